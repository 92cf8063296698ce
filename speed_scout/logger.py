# File: speed_scout/logger.py
"""speed_scout.logger: общий логгер SpeedScout.

Сообщения уходят в stderr, чтобы stdout оставался за отчётами и списком URL
из режима ``index``. По ``--log-file`` дополнительно пишется ротируемый файл.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "SpeedScout"
LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Настраивает логгер ``SpeedScout`` заново, закрывая прежние обработчики."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.propagate = False

    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(RotatingFileHandler(str(log_file), maxBytes=MAX_LOG_BYTES, backupCount=3, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    return lg


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME", "LOG_FORMAT"]
