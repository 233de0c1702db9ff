"""
Настройка и регистрация всех обработчиков и middleware для диспетчера.
"""
from aiogram import Dispatcher
from loguru import logger

from config.settings import Settings
from gatebot.handlers.bot_lifecycle import bot_lifecycle_router
from gatebot.handlers.commands import commands_router
from gatebot.handlers.errors import errors_router
from gatebot.handlers.group_events import group_events_router
from gatebot.handlers.verification import verification_router
from gatebot.middleware.services import ServiceMiddleware
from gatebot.services.verification_engine import VerificationEngine


def setup_dispatcher(
    dp: Dispatcher,
    engine: VerificationEngine,
    settings: Settings,
) -> ServiceMiddleware:
    """
    Настраивает диспетчер, регистрируя middleware и обработчики.

    Args:
        dp: Экземпляр Dispatcher.
        engine: Движок верификации.
        settings: Конфигурация бота.

    Returns:
        Зарегистрированный ServiceMiddleware (нужен для остановки приема событий).
    """
    service_middleware = ServiceMiddleware(
        engine=engine,
        settings=settings,
    )
    dp.update.middleware(service_middleware)

    dp.include_router(bot_lifecycle_router)
    dp.include_router(commands_router)
    dp.include_router(verification_router)
    dp.include_router(group_events_router)
    dp.include_router(errors_router)

    logger.info("Все обработчики успешно зарегистрированы.")
    return service_middleware
