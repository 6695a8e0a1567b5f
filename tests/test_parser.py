import pytest

from dicelang.errors import DiceParserError
from dicelang.expr import (
    Add,
    Advantage,
    BasicDice,
    Const,
    Disadvantage,
    Div,
    Explode,
    FateDice,
    Mod,
    Mul,
    Pow,
    Sub,
)
from dicelang.parser import parse


class TestSimpleExpressions:
    def test_constant(self):
        assert parse("1") == Const(1)

    @pytest.mark.parametrize("text,expected", [
        ("1+2", Add(1, 2)),
        ("1-2", Sub(1, 2)),
        ("1*2", Mul(1, 2)),
        ("1/2", Div(1, 2)),
        ("1%2", Mod(1, 2)),
        ("1^2", Pow(1, 2)),
    ])
    def test_binary_operators(self, text, expected):
        assert parse(text) == expected

    def test_dice(self):
        assert parse("1d2") == BasicDice(1, 2)
        assert parse("1dF") == FateDice(1)

    def test_modifiers(self):
        assert parse("1d2!") == Explode(BasicDice(1, 2))
        assert parse("1d2adv") == Advantage(BasicDice(1, 2))
        assert parse("1d2dis") == Disadvantage(BasicDice(1, 2))


class TestComplexExpressions:
    def test_dice_binds_tighter_than_arithmetic(self):
        assert parse("1+2d6*3") == Add(1, Mul(BasicDice(2, 6), 3))

    def test_dice_sides_from_groups(self):
        assert parse("(1d4)d(1d20)!") == Explode(BasicDice(BasicDice(1, 4), BasicDice(1, 20)))

    def test_repeated_explode(self):
        assert parse("4d6!!!!") == Explode(Explode(Explode(Explode(BasicDice(4, 6)))))

    def test_left_associative(self):
        assert parse("1-2-3") == Sub(Sub(1, 2), 3)
        assert parse("8/4/2") == Div(Div(8, 4), 2)
        assert parse("1+2-3+4") == Add(Sub(Add(1, 2), 3), 4)

    def test_pow_binds_left(self):
        assert parse("2^3^2") == Pow(Pow(2, 3), 2)

    def test_pow_over_multiplication(self):
        assert parse("2*3^2") == Mul(2, Pow(3, 2))
        assert parse("2d6^2") == Pow(BasicDice(2, 6), 2)

    def test_parentheses_override_precedence(self):
        assert parse("(1+2)*3") == Mul(Add(1, 2), 3)
        assert parse("2^(1+1)") == Pow(2, Add(1, 1))

    def test_chained_dice(self):
        assert parse("1d2d3") == BasicDice(BasicDice(1, 2), 3)

    def test_fate_then_modifier(self):
        assert parse("3dF!") == Explode(FateDice(3))
        assert parse("(1d2)dF") == FateDice(BasicDice(1, 2))

    def test_modifiers_stack(self):
        assert parse("1d20!adv") == Advantage(Explode(BasicDice(1, 20)))
        assert parse("(1d6)dis") == Disadvantage(BasicDice(1, 6))
        assert parse("(1d6!)adv") == Advantage(Explode(BasicDice(1, 6)))

    def test_whitespace_and_case(self):
        assert parse(" 2 D 20 ADV + 5 ") == Add(Advantage(BasicDice(2, 20)), 5)

    def test_unclosed_parenthesis_at_end(self):
        assert parse("(1+2") == Add(1, 2)
        assert parse("2*(1d6") == Mul(2, BasicDice(1, 6))


class TestInvalidSyntax:
    @pytest.mark.parametrize("text,message", [
        ("d4", "Expected token before d, was missing"),
        ("4d", "Expected token after d, was missing"),
        ("asdfa", "Encountered unexpected token asdfa"),
        ("1!", "The ! operator can only be used following a die roll"),
        ("1adv", "The adv operator can only be used following a die roll"),
        ("1dis", "The dis operator can only be used following a die roll"),
        (";", "Encountered unexpected character ;"),
        ("", "Cannot parse an empty expression"),
        ("1 1", "Leftover tokens were present after parsing"),
    ])
    def test_messages(self, text, message):
        with pytest.raises(DiceParserError) as exc:
            parse(text)
        assert str(exc.value) == message

    @pytest.mark.parametrize("text,message", [
        ("()", "Cannot parse an empty expression"),
        ("2*()", "Cannot parse an empty expression"),
        ("1+", "Expected token after +, was missing"),
        ("+1", "Expected token before +, was missing"),
        ("dF", "Expected token before dF, was missing"),
        ("adv", "Expected token before adv, was missing"),
        ("1 )", "Leftover tokens were present after parsing"),
        ("(1 2)", "Leftover tokens were present after parsing"),
        ("(1d6+1)!", "The ! operator can only be used following a die roll"),
        ("2^3!", "The ! operator can only be used following a die roll"),
    ])
    def test_edge_cases(self, text, message):
        with pytest.raises(DiceParserError) as exc:
            parse(text)
        assert str(exc.value) == message

    @pytest.mark.parametrize("text", ["4d+1", "1++2", "1 d d 6", "1*+2", "1! 2"])
    def test_operator_in_operand_position_is_leftover(self, text):
        with pytest.raises(DiceParserError) as exc:
            parse(text)
        assert str(exc.value) == "Leftover tokens were present after parsing"

    @pytest.mark.parametrize("text,message", [
        # 括號內的錯誤先於外層剩餘 token
        ("1 ()", "Cannot parse an empty expression"),
        ("1 (d4)", "Expected token before d, was missing"),
        ("(1 1) + ()", "Leftover tokens were present after parsing"),
        ("() + (1 1)", "Cannot parse an empty expression"),
        # 缺少運算元的檢查跑完整串
        ("1 1 d", "Expected token after d, was missing"),
        ("1! +", "Expected token after +, was missing"),
        # 修飾是否接在骰子後，最後才檢查
        ("1!+1d6", "The ! operator can only be used following a die roll"),
    ])
    def test_error_order(self, text, message):
        with pytest.raises(DiceParserError) as exc:
            parse(text)
        assert str(exc.value) == message

    @pytest.mark.parametrize("text,token", [("+*2", "+"), (")", ")")])
    def test_stray_operator_cannot_convert(self, text, token):
        with pytest.raises(DiceParserError) as exc:
            parse(text)
        assert str(exc.value) == f"Cannot convert token {token} to DiceExpr"
