# dicelang/config.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dicelang.evaluator import RollLimits

logger = logging.getLogger("dicebot")


@dataclass
class RollSettings:
    max_dice: int = 100
    max_sides: int = 1000
    max_repeat: int = 50     # rpg!roll +N 的上限


@dataclass
class OutputSettings:
    show_provenance: bool = True
    chunk_limit: int = 1800


@dataclass
class BotConfig:
    prefix: str = "rpg!"
    log_level: str = "INFO"
    roll: RollSettings = field(default_factory=RollSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


class ConfigManager:
    """讀取 data/config.json；檔案不存在或壞掉時使用預設值。環境變數 DICEBOT_LOG_LEVEL 優先。"""

    def __init__(self, path: str = "data/config.json"):
        self.path = Path(path)
        self.config = self._load()
        env_level = os.getenv("DICEBOT_LOG_LEVEL")
        if env_level:
            self.config.log_level = env_level.upper()

    def _load(self) -> BotConfig:
        if not self.path.exists():
            logger.info(f"找不到 {self.path}，使用預設設定")
            return BotConfig()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            r = raw.get("roll", {})
            o = raw.get("output", {})
            return BotConfig(
                prefix=raw.get("prefix", "rpg!"),
                log_level=str(raw.get("log_level", "INFO")).upper(),
                roll=RollSettings(
                    max_dice=max(1, int(r.get("max_dice", 100))),
                    max_sides=max(1, int(r.get("max_sides", 1000))),
                    max_repeat=max(1, int(r.get("max_repeat", 50))),
                ),
                output=OutputSettings(
                    show_provenance=bool(o.get("show_provenance", True)),
                    chunk_limit=max(200, int(o.get("chunk_limit", 1800))),
                ),
            )
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"讀取設定失敗（{self.path}）：{e}，使用預設值")
            return BotConfig()

    @property
    def prefix(self) -> str:
        return self.config.prefix

    @property
    def log_level(self) -> str:
        return self.config.log_level

    def get_roll_limits(self) -> RollLimits:
        return RollLimits(max_dice=self.config.roll.max_dice, max_sides=self.config.roll.max_sides)

    def get_max_repeat(self) -> int:
        return self.config.roll.max_repeat

    def get_output_settings(self) -> OutputSettings:
        return self.config.output
