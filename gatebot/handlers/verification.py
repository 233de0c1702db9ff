"""Хендлер нажатия кнопки проверки."""
from typing import Dict, Tuple

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery
from loguru import logger

from gatebot.exceptions import MalformedPayload
from gatebot.models import ChallengeOutcome
from gatebot.services.verification_engine import VerificationEngine
from gatebot.utils.callback_data import VERIFY_PREFIX, decode_challenge_payload
from gatebot.utils.texts import (
    ANSWER_ALREADY_VERIFIED,
    ANSWER_ERROR,
    ANSWER_EXPIRED,
    ANSWER_MALFORMED,
    ANSWER_NOT_YOURS,
    ANSWER_VERIFIED,
)

verification_router = Router(name="verification_router")

ANSWERS: Dict[ChallengeOutcome, Tuple[str, bool]] = {
    ChallengeOutcome.VERIFIED: (ANSWER_VERIFIED, False),
    ChallengeOutcome.NOT_YOURS: (ANSWER_NOT_YOURS, True),
    ChallengeOutcome.ALREADY_VERIFIED: (ANSWER_ALREADY_VERIFIED, True),
    ChallengeOutcome.EXPIRED: (ANSWER_EXPIRED, True),
}


@verification_router.callback_query(F.data.startswith(VERIFY_PREFIX))
async def on_verify_pressed(callback: CallbackQuery, engine: VerificationEngine):
    """Проверка пользователя по нажатию кнопки «я человек»."""
    try:
        claimed_user_id = decode_challenge_payload(callback.data)
    except MalformedPayload as e:
        logger.warning(f"Некорректные данные кнопки от {callback.from_user.id}: {e}")
        await _answer(callback, ANSWER_MALFORMED, show_alert=True)
        return

    message_id = callback.message.message_id if callback.message else None

    try:
        result = await engine.on_challenge_response(
            callback.from_user.id,
            claimed_user_id,
            first_name=callback.from_user.first_name,
            message_id=message_id,
        )
    except Exception as e:
        logger.error(f"Ошибка при проверке пользователя {callback.from_user.id}: {e}")
        await _answer(callback, ANSWER_ERROR, show_alert=True)
        return

    if not result.delivered:
        logger.warning(f"⚠️ Приветствие для {claimed_user_id} не доставлено, пользователь уже отмечен проверенным")

    text, show_alert = ANSWERS[result.outcome]
    await _answer(callback, text, show_alert=show_alert)


async def _answer(callback: CallbackQuery, text: str, show_alert: bool = False) -> None:
    try:
        await callback.answer(text, show_alert=show_alert)
    except TelegramAPIError as e:
        logger.debug(f"Не удалось ответить на нажатие кнопки {callback.id}: {e}")
