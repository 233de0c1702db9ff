"""Обработчик вступления новых участников в группу."""
from aiogram import F, Router
from aiogram.types import Message
from loguru import logger

from gatebot.models import JoinOutcome
from gatebot.services.verification_engine import VerificationEngine

group_events_router = Router(name="group_events_router")
group_events_router.message.filter(F.chat.type.in_({"group", "supergroup"}))


@group_events_router.message(F.new_chat_members)
async def on_new_chat_members(message: Message, engine: VerificationEngine):
    """
    Отправляет проверку каждому новому участнику.

    Уже проверенные в этом запуске участники сразу получают приветствие,
    сам бот и другие боты пропускаются.
    """
    chat_id = message.chat.id
    bot_id = message.bot.id if message.bot else None

    for member in message.new_chat_members:
        is_self_or_bot = member.is_bot or member.id == bot_id
        if member.is_bot and member.id != bot_id:
            logger.info(f"🤖 Пропускаем Telegram-бота: {member.username or member.first_name or member.id}")

        try:
            result = await engine.on_member_joined(
                member.id,
                chat_id,
                member.first_name,
                is_self_or_bot=is_self_or_bot,
            )
        except Exception as e:
            logger.error(f"Ошибка при обработке нового участника {member.id} в группе {chat_id}: {e}")
            continue

        if not result.delivered:
            logger.warning(
                f"⚠️ Сообщение для участника {member.id} в группе {chat_id} не доставлено "
                f"({result.outcome.value}), состояние не откатывается"
            )
        elif result.outcome == JoinOutcome.ALREADY_PENDING:
            logger.debug(f"Повторное событие вступления {member.id} в группе {chat_id} проигнорировано")
