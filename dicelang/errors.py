# dicelang/errors.py
from __future__ import annotations


class DiceError(ValueError):
    pass


# ---------- 解析錯誤 ----------
class DiceParserError(DiceError):
    pass


class EmptyExpression(DiceParserError):
    def __init__(self):
        super().__init__("Cannot parse an empty expression")


class MissingTokenBefore(DiceParserError):
    def __init__(self, op: str):
        super().__init__(f"Expected token before {op}, was missing")
        self.op = op


class MissingTokenAfter(DiceParserError):
    def __init__(self, op: str):
        super().__init__(f"Expected token after {op}, was missing")
        self.op = op


class UnexpectedToken(DiceParserError):
    def __init__(self, text: str):
        super().__init__(f"Encountered unexpected token {text}")
        self.text = text


class UnexpectedCharacter(DiceParserError):
    def __init__(self, char: str):
        super().__init__(f"Encountered unexpected character {char}")
        self.char = char


class DieOperatorMisuse(DiceParserError):
    def __init__(self, op: str):
        super().__init__(f"The {op} operator can only be used following a die roll")
        self.op = op


class LeftoverTokens(DiceParserError):
    def __init__(self):
        super().__init__("Leftover tokens were present after parsing")


class UnconvertibleToken(DiceParserError):
    def __init__(self, text: str):
        super().__init__(f"Cannot convert token {text} to DiceExpr")
        self.text = text


# ---------- 計算錯誤 ----------
class DiceEvaluationError(DiceError):
    pass


class DivisionByZero(DiceEvaluationError):
    def __init__(self, op: str = "/"):
        super().__init__("Cannot divide by zero" if op == "/" else "Cannot take a remainder by zero")
        self.op = op


class InvalidExponent(DiceEvaluationError):
    def __init__(self, base: int, exponent: int):
        super().__init__(f"Cannot compute {base} ^ {exponent}")
        self.base = base
        self.exponent = exponent


class InvalidDice(DiceEvaluationError):
    pass


class TooManyDice(DiceEvaluationError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"Too many dice: {count} (limit {limit})")
        self.count = count
        self.limit = limit


class TooManySides(DiceEvaluationError):
    def __init__(self, sides: int, limit: int):
        super().__init__(f"Too many sides: {sides} (limit {limit})")
        self.sides = sides
        self.limit = limit
