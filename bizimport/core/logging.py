# bizimport/core/logging.py
# loguru sinks: stderr always, a rotating file when LOG_FILE is set.
import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), backtrace=False, diagnose=False)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            rotation="10 MB",
            retention="10 files",
            enqueue=True,
            backtrace=True,
            diagnose=False,
            level=level.upper(),
        )
