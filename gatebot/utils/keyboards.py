"""Inline-клавиатуры бота."""
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from gatebot.utils.callback_data import VerifyCallback
from gatebot.utils.texts import DOCS_BUTTON_TEXT, PLAY_BUTTON_TEXT, VERIFY_BUTTON_TEXT


def verification_keyboard(user_id: int) -> InlineKeyboardMarkup:
    """Одна кнопка проверки, адресованная пользователю user_id."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(
            text=VERIFY_BUTTON_TEXT,
            callback_data=VerifyCallback(user_id=user_id).pack()
        )]
    ])


def main_keyboard(game_url: str, docs_url: str) -> InlineKeyboardMarkup:
    """Кнопки со ссылками, которые показываются после проверки."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=PLAY_BUTTON_TEXT, url=game_url)],
        [InlineKeyboardButton(text=DOCS_BUTTON_TEXT, url=docs_url)],
    ])
