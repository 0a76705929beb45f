"""
Logging for the EODSA results engine.

Three named loggers share one setup: eodsa.api (routers), eodsa.services
(engine mutations, tolerated bulk failures, store errors) and eodsa.db
(schema bootstrap). EODSA_ENV=production writes JSON lines to rotating
files under EODSA_LOG_DIR; every other environment logs plain text to
stdout. EODSA_LOG_LEVEL sets the level for all three.
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


LOGGER_NAMES = ["api", "services", "db"]


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra_fields`` are merged into the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """[2025-03-01 10:30:45] INFO - eodsa.services - Assigned item number 12 to entry ent_..."""

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _get_log_level() -> int:
    # Unknown level names fall back to INFO
    level_str = os.environ.get("EODSA_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def _get_log_dir() -> Path:
    log_dir = Path(os.environ.get("EODSA_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _is_production() -> bool:
    return os.environ.get("EODSA_ENV", "development").lower() == "production"


def configure_logging() -> Dict[str, logging.Logger]:
    """
    (Re)build the handlers of the eodsa.* loggers.

    In production each logger writes to its own file (api.log, services.log,
    db.log; 10MB, 5 backups). Elsewhere all three write to stdout.

    Returns:
        Short logger name -> Logger
    """
    log_level = _get_log_level()
    is_prod = _is_production()
    log_dir = _get_log_dir() if is_prod else None

    loggers = {}

    for logger_name in LOGGER_NAMES:
        logger = logging.getLogger(f"eodsa.{logger_name}")
        logger.setLevel(log_level)
        logger.propagate = False
        logger.handlers.clear()

        if is_prod:
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / f"{logger_name}.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8"
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
        else:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(ConsoleFormatter())
            logger.addHandler(console_handler)

        loggers[logger_name] = logger

    return loggers


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Return one of the eodsa.* loggers, configuring them on first use.

    Args:
        name: "api", "services" or "db"

    Raises:
        ValueError: For any other name

    Example:
        >>> get_logger("services").info(
        ...     "Synced item numbers", extra={"extra_fields": {"synced": 3}}
        ... )
    """
    global _loggers

    if _loggers is None:
        _loggers = configure_logging()

    if name not in _loggers:
        raise ValueError(
            f"Unknown logger name: {name}. "
            f"Valid names: {', '.join(_loggers.keys())}"
        )

    return _loggers[name]


def init_logging() -> Dict[str, logging.Logger]:
    """Configure logging from the current environment; called by the app lifespan."""
    global _loggers
    _loggers = configure_logging()
    return _loggers
