"""Logging setup for the API server and the CLI commands.

Records go to stdout and to a log file. The level comes from an explicit
argument, else the LOG_LEVEL environment variable, else INFO. SQL statement
logging follows the database_echo setting; uvicorn's per-request access log is
kept at WARNING so command outcomes are not drowned out.
"""

import logging
import os
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("uvicorn.access", "httpx")


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name ("debug", "WARNING") to a logging constant.

    Unknown names fall back to INFO.
    """
    name = (level_name or os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_server_logging(
    log_file: str = "logs/server.log",
    level_name: str | None = None,
    echo_sql: bool = False,
) -> None:
    """Point the root logger at stdout and log_file.

    Handlers installed by an earlier call are closed and replaced, so calling this
    again (tests, reloads) never duplicates output.

    Args:
        log_file: Log file path; missing directories are created
        level_name: Level name overriding LOG_LEVEL
        echo_sql: Log SQL statements issued by the ledger store
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    level = get_log_level(level_name)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    for handler in (logging.StreamHandler(sys.stdout), logging.FileHandler(log_path)):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if echo_sql else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


__all__ = ["get_log_level", "setup_server_logging"]
