"""Последний рубеж: необработанные ошибки хендлеров."""
from aiogram import Router
from aiogram.types import ErrorEvent
from loguru import logger

errors_router = Router(name="errors_router")


@errors_router.errors()
async def on_unhandled_error(event: ErrorEvent) -> bool:
    """Логирует ошибку и помечает ее обработанной, чтобы polling продолжал работу."""
    logger.opt(exception=event.exception).error(
        f"Необработанная ошибка при обработке события {event.update.update_id}: {event.exception}"
    )
    return True
