#!/usr/bin/env python3
"""
Простой запуск Telegram-бота проверки новых участников.

Использование:
    python start.py
"""

import asyncio
import sys
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def main():
    """Основная функция для запуска бота."""
    try:
        from config.settings import get_settings
        from gatebot.app import BotApp
        from gatebot.logging_setup import configure_logging

        env_file = project_root / ".env"
        if not env_file.exists():
            logger.warning("⚠️ Файл .env не найден, настройки читаются только из переменных окружения")

        settings = get_settings()
        configure_logging(settings)

        logger.info("🚀 Запуск бота проверки участников...")
        logger.info(f"📋 Режим: {settings.RUN_MODE}. Для остановки нажмите Ctrl+C")

        app = BotApp(settings)
        asyncio.run(app.run())

    except ValidationError as e:
        logger.critical(f"❌ Ошибка конфигурации:\n{e}")
        logger.info("💡 Проверьте .env: python validate_config.py")
        sys.exit(1)
    except ImportError as e:
        logger.critical(f"❌ Не хватает зависимости {e.name or e}: pip install -e .")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("👋 Остановлено с клавиатуры.")
    except Exception:
        logger.exception("💥 Бот упал с непредвиденной ошибкой")
        sys.exit(1)


if __name__ == "__main__":
    if sys.version_info < (3, 10):
        logger.critical(f"Нужен Python 3.10+, сейчас {sys.version.split()[0]}")
        sys.exit(1)
    main()
