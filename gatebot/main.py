"""Точка входа в приложение бота проверки участников."""

import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from config.settings import get_settings
from gatebot.app import BotApp
from gatebot.logging_setup import configure_logging


async def main() -> None:
    """Главная функция запуска приложения."""
    settings = get_settings()
    configure_logging(settings)
    app = BotApp(settings)
    await app.run()


def run() -> None:
    """Синхронная обертка для консольной команды."""
    try:
        asyncio.run(main())
    except ValidationError as e:
        logger.critical(f"❌ Ошибка конфигурации:\n{e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Приложение остановлено пользователем")


if __name__ == "__main__":
    run()
