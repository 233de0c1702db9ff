"""Доступ к Telegram Bot API для движка верификации."""
from typing import Optional, Protocol

from aiogram import Bot
from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramNotFound,
)
from aiogram.types import InlineKeyboardMarkup
from loguru import logger

from gatebot.exceptions import Forbidden, MessageNotEditable, NotFound, TransportFailure
from gatebot.models import MemberInfo


class ChatPlatformClient(Protocol):
    """Набор вызовов платформы, которые использует движок."""

    async def reply(self, chat_id: int, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> int:
        ...

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> None:
        ...

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        ...

    async def remove_member(self, chat_id: int, user_id: int) -> None:
        ...

    async def get_member_info(self, chat_id: int, user_id: int) -> MemberInfo:
        ...


def _wrap(operation: str, error: TelegramAPIError) -> TransportFailure:
    if isinstance(error, TelegramForbiddenError):
        return Forbidden(operation, error)
    if isinstance(error, TelegramNotFound):
        return NotFound(operation, error)
    return TransportFailure(operation, error)


class AiogramPlatformClient:
    """
    Реализация ChatPlatformClient поверх aiogram.Bot.

    Все ошибки aiogram переводятся в TransportFailure и его подклассы.
    Таймауты запросов задаются сессией бота.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def reply(self, chat_id: int, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> int:
        try:
            message = await self.bot.send_message(chat_id, text, reply_markup=reply_markup)
        except TelegramAPIError as e:
            raise _wrap("send_message", e) from e
        return message.message_id

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
    ) -> None:
        try:
            await self.bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=reply_markup,
            )
        except TelegramBadRequest as e:
            raise MessageNotEditable("edit_message_text", e) from e
        except TelegramAPIError as e:
            raise _wrap("edit_message_text", e) from e

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        try:
            await self.bot.delete_message(chat_id, message_id)
        except TelegramBadRequest as e:
            raise NotFound("delete_message", e) from e
        except TelegramAPIError as e:
            raise _wrap("delete_message", e) from e

    async def remove_member(self, chat_id: int, user_id: int) -> None:
        """Исключение из группы: бан и сразу разбан, чтобы можно было вернуться."""
        try:
            await self.bot.ban_chat_member(chat_id, user_id)
        except TelegramBadRequest as e:
            raise NotFound("ban_chat_member", e) from e
        except TelegramAPIError as e:
            raise _wrap("ban_chat_member", e) from e

        try:
            await self.bot.unban_chat_member(chat_id, user_id, only_if_banned=True)
        except TelegramAPIError as e:
            logger.error(f"❌ Пользователь {user_id} забанен в {chat_id}, но разбан не удался: {e}")
            raise _wrap("unban_chat_member", e) from e

    async def get_member_info(self, chat_id: int, user_id: int) -> MemberInfo:
        try:
            member = await self.bot.get_chat_member(chat_id, user_id)
        except TelegramBadRequest as e:
            raise NotFound("get_chat_member", e) from e
        except TelegramAPIError as e:
            raise _wrap("get_chat_member", e) from e
        return MemberInfo(
            user_id=user_id,
            username=member.user.username,
            display_name=member.user.full_name,
        )
