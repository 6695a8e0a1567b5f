import pytest

from cogs.dice import DiceCog, build_embed, extract_repeat, format_detail, truncate
from cogs.help import PAGES, page_for
from dicelang.config import ConfigManager, OutputSettings
from dicelang.errors import DiceError, DiceParserError
from dicelang.evaluator import Evaluator
from dicelang.expr import Advantage, BasicDice


class TestExtractRepeat:
    def test_plain_expression(self):
        assert extract_repeat("  2d6+1 ") == (1, "2d6+1")

    def test_repeat_prefix(self):
        assert extract_repeat("+5 1d20adv") == (5, "1d20adv")

    def test_out_of_range(self):
        with pytest.raises(DiceError):
            extract_repeat("+0 1d6")
        with pytest.raises(DiceError):
            extract_repeat("+51 1d6", max_repeat=50)

    def test_leading_plus_without_space_is_expression(self):
        assert extract_repeat("+5") == (1, "+5")


def test_truncate():
    assert truncate("abc", 10) == "abc"
    text = truncate("x" * 50, 20)
    assert len(text) <= 20
    assert text.endswith("...")


def test_format_detail_single(scripted):
    result = Evaluator(scripted([5, 12])).evaluate(Advantage(BasicDice(1, 20)))
    assert format_detail([result], OutputSettings()) == (
        "1d20adv = 12 [12]\n  1d20 = 5 [5]\n  1d20 = 12 [12]"
    )
    assert format_detail([result], OutputSettings(show_provenance=False)) == "1d20adv = 12 [12]"


def test_format_detail_many(scripted):
    ev = Evaluator(scripted(list(range(1, 13))))
    results = [ev.evaluate(BasicDice(1, 20)) for _ in range(12)]
    lines = format_detail(results, OutputSettings()).split("\n")
    assert lines[0] == " 1: 1d20 = 1 [1]"
    assert len(lines) == 11
    assert "10" in lines[-1]


def test_build_embed(scripted):
    ev = Evaluator(scripted([3, 4]))
    results = [ev.evaluate(BasicDice(1, 6)) for _ in range(2)]
    embed = build_embed("1d6", results, OutputSettings())
    assert embed.title == "🎲 連續擲骰 x2"
    assert "最高：**4**" in embed.description
    single = build_embed("1d6", results[:1], OutputSettings())
    assert "總和：**3**" in single.description


def test_cog_rolls_with_config(tmp_path, monkeypatch):
    monkeypatch.delenv("DICEBOT_LOG_LEVEL", raising=False)
    cog = DiceCog(bot=None, config=ConfigManager(str(tmp_path / "config.json")))
    core, results = cog.roll_expression("+3 2d6+1")
    assert core == "2d6+1"
    assert len(results) == 3
    assert all(3 <= r.value <= 13 for r in results)

    with pytest.raises(DiceParserError):
        cog.roll_expression("1adv")
    with pytest.raises(DiceError):
        cog.roll_expression("101d6")


def test_help_sections():
    assert page_for(None) == "home"
    assert page_for(" ADV ") == "modifiers"
    assert page_for("roll") == "syntax"
    for build in PAGES.values():
        assert build("rpg!").title
