import logging
import os
from dotenv import load_dotenv, find_dotenv
import discord
from discord.ext import commands

from dicelang.logging_config import setup_logging
from dicelang.config import ConfigManager

# --- 啟動階段 ---
load_dotenv(find_dotenv())
config_manager = ConfigManager(os.getenv("DICEBOT_CONFIG", "data/config.json"))
setup_logging(config_manager.log_level)
logger = logging.getLogger("dicebot")

TOKEN = os.getenv("DISCORD_TOKEN")
if not TOKEN:
    raise RuntimeError("請在 .env 設定 DISCORD_TOKEN")

intents = discord.Intents.default()
intents.message_content = True  # 需要讀取訊息內容才能解析擲骰
bot = commands.Bot(command_prefix=config_manager.prefix, intents=intents, help_command=None)


@bot.event
async def setup_hook():
    # 載入各類 cogs
    await bot.add_cog(
        __import__("cogs.dice", fromlist=["DiceCog"]).DiceCog(bot, config_manager))
    await bot.add_cog(
        __import__("cogs.help", fromlist=["HelpCog"]).HelpCog(bot))


@bot.event
async def on_ready():
    logger.info(f"Logged in as {bot.user} (id={bot.user.id})")


if __name__ == "__main__":
    bot.run(TOKEN, log_handler=None)
