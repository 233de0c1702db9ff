"""Middleware для передачи сервисов в обработчики."""

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update
from loguru import logger

from config.settings import Settings
from gatebot.services.verification_engine import VerificationEngine


class ServiceMiddleware(BaseMiddleware):
    """
    Middleware для передачи движка верификации и настроек в обработчики.

    После close() новые события больше не обрабатываются.
    """

    def __init__(self, engine: VerificationEngine, settings: Settings):
        """Инициализация middleware."""
        super().__init__()
        self.engine = engine
        self.settings = settings
        self.accepting = True

    def close(self) -> None:
        """Прекратить прием новых событий (вызывается при остановке)."""
        if self.accepting:
            self.accepting = False
            logger.info("Прием новых событий остановлен.")

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """Выполнение middleware."""
        if not self.accepting:
            update_id = event.update_id if isinstance(event, Update) else "?"
            logger.debug(f"Событие {update_id} отброшено: бот останавливается")
            return None

        data["engine"] = self.engine
        data["settings"] = self.settings

        return await handler(event, data)
