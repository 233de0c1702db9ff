"""Данные inline-кнопки проверки."""
from typing import Optional

from aiogram.filters.callback_data import CallbackData

from gatebot.exceptions import MalformedPayload

VERIFY_PREFIX = "verify"


class VerifyCallback(CallbackData, prefix=VERIFY_PREFIX):
    """Кнопка «я человек», адресованная одному пользователю."""
    user_id: int


def encode_challenge_payload(user_id: int) -> str:
    return VerifyCallback(user_id=user_id).pack()


def decode_challenge_payload(data: Optional[str]) -> int:
    """
    Извлекает id пользователя, которому адресована кнопка.

    Raises:
        MalformedPayload: данные не соответствуют формату ``verify:<id>``.
    """
    if not data:
        raise MalformedPayload(data, "empty payload")
    try:
        callback = VerifyCallback.unpack(data)
    except (TypeError, ValueError) as e:
        raise MalformedPayload(data, str(e)) from e
    if callback.user_id <= 0:
        raise MalformedPayload(data, "user id must be positive")
    return callback.user_id
