# cogs/help.py
from __future__ import annotations

import logging
import discord
from discord.ext import commands

logger = logging.getLogger("dicebot")


# ---- 內部：產生各頁 Embed ----
def _embed_home(prefix: str) -> discord.Embed:
    e = discord.Embed(
        title="📖 指令總覽",
        description="按下方按鈕切換分類；支援連續擲骰：在骰式前加 `+次數`。",
        color=discord.Color.blurple(),
    )
    e.add_field(
        name="🎲 擲骰",
        value=f"`{prefix}roll <骰式>`（簡寫 `{prefix}r`）",
        inline=False,
    )
    e.set_footer(text=f"提示：例如 `{prefix}roll 4d6!`、`{prefix}roll +5 1d20adv+3`")
    return e


def _embed_syntax(prefix: str) -> discord.Embed:
    e = discord.Embed(title="🧮 骰式語法", color=discord.Color.green())
    e.add_field(
        name="骰子",
        value=(
            "`NdS`：擲 N 顆 S 面骰並加總，例 `2d6`\n"
            "`NdF`：命運骰，每顆為 -1 / 0 / +1，例 `4dF`\n"
            "N 與 S 可以是任何運算式，例 `(1d4)d(1d20)`"
        ),
        inline=False,
    )
    e.add_field(
        name="運算",
        value=(
            "`+ - * / % ^` 與括號；除法與取餘向零截斷。\n"
            "優先順序：括號 > d > dF > ! adv dis > ^ > * / % > + -，同級由左至右。"
        ),
        inline=False,
    )
    e.add_field(
        name="結果",
        value=f"回覆會列出每一組骰子的擲出值，巢狀的骰子會縮排顯示，例：`{prefix}roll 2d3 + (2d3)d6`",
        inline=False,
    )
    return e


def _embed_modifiers(prefix: str) -> discord.Embed:
    e = discord.Embed(title="✨ 骰子修飾", color=discord.Color.orange())
    e.add_field(
        name="`!` 爆骰",
        value="擲出最大面時再加擲同樣數量的骰子，直到沒有最大面為止（1 面骰不爆）。例：`4d6!`",
        inline=False,
    )
    e.add_field(
        name="`adv` 優勢 / `dis` 劣勢",
        value="同一組骰子擲兩次，取總和較高 / 較低者。例：`1d20adv+5`、`2d20dis`",
        inline=False,
    )
    e.add_field(
        name="注意",
        value=f"修飾只能接在骰子後面，`{prefix}roll 1!` 會回報錯誤；可以疊加，例：`4d6!!`、`1d20!adv`。",
        inline=False,
    )
    return e


PAGES = {
    "home": _embed_home,
    "syntax": _embed_syntax,
    "modifiers": _embed_modifiers,
}

SECTION_ALIASES = {
    "roll": "syntax", "r": "syntax", "syntax": "syntax", "dice": "syntax",
    "mod": "modifiers", "modifiers": "modifiers", "adv": "modifiers", "dis": "modifiers", "explode": "modifiers",
}


def page_for(section: str | None) -> str:
    return SECTION_ALIASES.get((section or "").lower().strip(), "home")


# ---- 互動面板 ----
class HelpView(discord.ui.View):
    def __init__(self, author_id: int, prefix: str, timeout: float = 180.0):
        super().__init__(timeout=timeout)
        self.author_id = author_id
        self.prefix = prefix
        self.page = "home"
        self.message: discord.Message | None = None

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.author_id:
            await interaction.response.send_message("只有發起者可以操作這個幫助面板。", ephemeral=True)
            return False
        return True

    async def on_timeout(self) -> None:
        for c in self.children:
            if isinstance(c, discord.ui.Button):
                c.disabled = True
        if self.message:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException as e:
                logger.debug(f"help panel timeout edit failed: {e}")

    async def _show(self, interaction: discord.Interaction, page: str):
        self.page = page
        emb = PAGES.get(page, _embed_home)(self.prefix)
        await interaction.response.edit_message(embed=emb, view=self)

    @discord.ui.button(label="總覽", style=discord.ButtonStyle.secondary)
    async def btn_home(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self._show(interaction, "home")

    @discord.ui.button(label="語法", style=discord.ButtonStyle.primary)
    async def btn_syntax(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self._show(interaction, "syntax")

    @discord.ui.button(label="修飾", style=discord.ButtonStyle.secondary)
    async def btn_modifiers(self, interaction: discord.Interaction, _: discord.ui.Button):
        await self._show(interaction, "modifiers")

    @discord.ui.button(label="關閉", style=discord.ButtonStyle.danger)
    async def btn_close(self, interaction: discord.Interaction, _: discord.ui.Button):
        await interaction.response.edit_message(content="（已關閉說明）", embed=None, view=None)


# ---- Cog ----
class HelpCog(commands.Cog, name="Help"):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @commands.Cog.listener()
    async def on_ready(self):
        logger.info("HelpCog ready.")

    @commands.command(name="help", aliases=["h"], help="顯示互動式說明")
    async def help_cmd(self, ctx: commands.Context, *, section: str | None = None):
        prefix = ctx.prefix or "rpg!"
        view = HelpView(author_id=ctx.author.id, prefix=prefix)
        view.page = page_for(section)
        msg = await ctx.reply(embed=PAGES[view.page](prefix), view=view)
        view.message = msg
