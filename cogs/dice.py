# cogs/dice.py
import logging
import re
from typing import List, Tuple

import discord
from discord.ext import commands

from dicelang.config import ConfigManager, OutputSettings
from dicelang.errors import DiceError
from dicelang.evaluator import Evaluator
from dicelang.parser import parse
from dicelang.result import Result

logger = logging.getLogger("dicebot")

REPEAT_RE = re.compile(r"^\s*\+(?P<times>\d+)\s+(?P<core>\S.*)$", re.DOTALL)
MAX_SHOWN = 10


def extract_repeat(expr: str, max_repeat: int = 50) -> Tuple[int, str]:
    """拆出開頭的 +次數：'+5 1d20adv' -> (5, '1d20adv')"""
    m = REPEAT_RE.match(expr)
    if not m:
        return 1, expr.strip()
    times = int(m.group("times"))
    if not 1 <= times <= max_repeat:
        raise DiceError(f"連續次數 1~{max_repeat}")
    return times, m.group("core").strip()


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 4)].rstrip() + "\n..."


def format_detail(results: List[Result], output: OutputSettings) -> str:
    if len(results) == 1:
        r = results[0]
        text = r.render() if output.show_provenance else str(r)
    else:
        shown = results[:MAX_SHOWN]
        lines = [f"{i+1:>2}: {r}" for i, r in enumerate(shown)]
        if len(results) > len(shown):
            lines.append(f"...（僅顯示前 {len(shown)} 次）")
        text = "\n".join(lines)
    return truncate(text, output.chunk_limit)


def build_embed(core: str, results: List[Result], output: OutputSettings) -> discord.Embed:
    times = len(results)
    detail = format_detail(results, output)
    if times == 1:
        title = "🎲 擲骰結果"
        lines = [
            f"表達式：`{core}`",
            f"```\n{detail}\n```",
            f"總和：**{results[0].value}**",
        ]
    else:
        values = [r.value for r in results]
        title = f"🎲 連續擲骰 x{times}"
        lines = [
            f"表達式：`{core}`",
            "— 明細 —",
            f"```\n{detail}\n```",
            "— 統計 —",
            f"最高：**{max(values)}**｜最低：**{min(values)}**｜總計：**{sum(values)}**",
        ]
    return discord.Embed(title=title, description="\n".join(lines), color=discord.Color.random())


class DiceCog(commands.Cog, name="Dice"):
    def __init__(self, bot: commands.Bot, config: ConfigManager):
        self.bot = bot
        self.config = config

    @commands.Cog.listener()
    async def on_ready(self):
        logger.info("DiceCog ready.")

    def roll_expression(self, expr: str) -> Tuple[str, List[Result]]:
        times, core = extract_repeat(expr, self.config.get_max_repeat())
        tree = parse(core)
        evaluator = Evaluator(limits=self.config.get_roll_limits())
        return core, [evaluator.evaluate(tree) for _ in range(times)]

    @commands.command(name="roll", aliases=["r"], help="擲骰：rpg!roll [+次數] <骰式> 例：rpg!roll 4d6! / rpg!roll +5 1d20adv+3")
    async def roll(self, ctx: commands.Context, *, expr: str):
        try:
            core, results = self.roll_expression(expr)
        except DiceError as e:
            logger.info(f"Bad roll by {ctx.author} in #{ctx.channel}: {e}")
            return await ctx.reply(str(e))

        embed = build_embed(core, results, self.config.get_output_settings())
        embed.set_footer(text=f"{ctx.author} • #{ctx.channel}")
        await ctx.reply(embed=embed)
        logger.info(f"{ctx.author} rolled {core} x{len(results)} -> {[r.value for r in results]}")

    @roll.error
    async def roll_error(self, ctx: commands.Context, error):
        if isinstance(error, commands.MissingRequiredArgument):
            await ctx.reply(f"用法：`{ctx.prefix}roll [+次數] <骰式>`，例：`{ctx.prefix}roll 2d20adv+5`")
        else:
            await ctx.reply(f"擲骰失敗：{error}")
            logger.error(f"roll error: {error}")
