"""Хендлеры команд /start и /help."""
from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message
from loguru import logger

from config.settings import Settings
from gatebot.services.verification_engine import VerificationEngine
from gatebot.utils.texts import help_text

commands_router = Router(name="commands_router")


@commands_router.message(CommandStart())
async def cmd_start(message: Message, engine: VerificationEngine):
    """
    Команда /start.

    В группе непроверенный пользователь получает проверку, проверенный -
    приветствие. В личных сообщениях всегда показывается приветствие.
    """
    if not message.from_user:
        return

    user = message.from_user
    try:
        if message.chat.type in ("group", "supergroup"):
            result = await engine.on_unverified_access_attempt(user.id, message.chat.id, user.first_name)
            delivered = result.delivered
        else:
            delivered = await engine.send_greeting(message.chat.id, user.first_name)

        if not delivered:
            logger.warning(f"⚠️ Ответ на /start для {user.id} в чате {message.chat.id} не доставлен")
    except Exception as e:
        logger.error(f"Ошибка при обработке /start от {user.id}: {e}")


@commands_router.message(Command("help"))
async def cmd_help(message: Message, settings: Settings):
    """Команда /help."""
    try:
        await message.answer(help_text(settings.COMMUNITY_NAME))
    except Exception as e:
        logger.error(f"Ошибка при обработке /help: {e}")
