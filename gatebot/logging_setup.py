"""Настройка логирования на loguru."""
import inspect
import logging
import sys
from typing import Optional

from loguru import logger

from config.settings import Settings


class InterceptHandler(logging.Handler):
    """Перенаправляет записи стандартного logging (aiogram, aiohttp) в loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(settings: Optional[Settings] = None, level: Optional[str] = None) -> None:
    """Настраивает вывод в stderr и (если задан) в файл с ротацией."""
    log_level = level or (settings.LOG_LEVEL if settings else "INFO")
    log_file = settings.LOG_FILE if settings else None

    logger.remove()
    logger.add(sys.stderr, level=log_level)
    if log_file:
        logger.add(log_file, level=log_level, rotation="10 MB", retention=1)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
