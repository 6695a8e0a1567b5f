# dicelang/logging_config.py
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import gzip
import os
import shutil
from datetime import datetime


def _gzip_rotator(source: str, dest: str):
    """把旋轉出的檔案壓成 .gz"""
    # 例：source=logs/latest.log.2025-08-13 → 轉成 logs/2025-08-13.log.gz
    base = Path(source).name
    date_str = base.split(".")[-1]
    out = Path(source).with_name(f"{date_str}.log.gz") if date_str else Path(dest).with_suffix(".gz")

    with open(source, "rb") as f_in, gzip.open(out, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)
    os.remove(source)


def to_level(name: str) -> int:
    name = (name or "").upper()
    level = getattr(logging, name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str = "INFO", log_dir: str = "logs"):
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(to_level(level))

    # 檔案：latest.log（午夜輪替，保留 30 份，歷史自動 .gz）
    fh = TimedRotatingFileHandler(
        str(Path(log_dir) / "latest.log"),
        when="midnight",
        backupCount=30,
        encoding="utf-8",
        utc=False,
    )
    fh.rotator = _gzip_rotator
    fh.setFormatter(formatter)
    root.addHandler(fh)

    # 終端
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    root.addHandler(sh)

    root.info("==== Dice bot started at %s ====", datetime.now().strftime("%Y-%m-%d %H:%M:%S"))
