import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"


def setup_logging(logs_root: str, level: str = "INFO", console: bool = True):
    """Un archivo por dia en <logs_root>/YYYY/MM/DD/labreader.log (+ consola opcional)."""
    logdir = Path(logs_root) / datetime.now().strftime("%Y/%m/%d")
    logdir.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.add(
        str(logdir / "labreader.log"),
        format=LOG_FORMAT,
        rotation="00:00",
        retention="14 days",
        level=level,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    if console:
        logger.add(sys.stderr, format=LOG_FORMAT, level=level)
    return logger
