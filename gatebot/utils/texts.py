"""Тексты сообщений бота (HTML-разметка)."""
from typing import Optional

from aiogram.utils.text_decorations import html_decoration

VERIFY_BUTTON_TEXT = "✅ I am Human - Verify Me"
PLAY_BUTTON_TEXT = "🎮 Play Now"
DOCS_BUTTON_TEXT = "📚 Documents"

ANSWER_VERIFIED = "✅ Verification successful!"
ANSWER_NOT_YOURS = "❌ This verification is not for you!"
ANSWER_ALREADY_VERIFIED = "✅ You are already verified!"
ANSWER_EXPIRED = "⏰ Verification expired. Please contact an admin."
ANSWER_MALFORMED = "❌ This button is no longer valid."
ANSWER_ERROR = "❌ An error occurred. Please try again."

DEFAULT_FIRST_NAME = "there"


def display_first_name(first_name: Optional[str]) -> str:
    return first_name or DEFAULT_FIRST_NAME


def verification_text(first_name: Optional[str], community: str, timeout: str) -> str:
    name = html_decoration.quote(display_first_name(first_name))
    return (
        f"👋 Welcome to {community}, {name}!\n\n"
        f"🛡️ <b>Verification Required</b>\n\n"
        f"To ensure you're a real person and not a bot, please click the verification button below "
        f"within {timeout}.\n\n"
        f"This helps us keep the community safe from automated accounts."
    )


def greeting_text(first_name: Optional[str], community: str) -> str:
    name = html_decoration.quote(display_first_name(first_name))
    return (
        f"✅ <b>Verification Complete!</b>\n\n"
        f"👋 Welcome to {community}, {name}!\n\n"
        f"🎮 Ready to dive into the game? Use the buttons below to access the game client "
        f"or check out the documentation.\n\n"
        f"Have fun and enjoy your adventure! 🚀"
    )


def expiry_text(user_id: int, display_name: Optional[str]) -> str:
    name = html_decoration.quote(display_name or f"User {user_id}")
    mention = f'<a href="tg://user?id={user_id}">{name}</a>'
    return (
        f"⏰ {mention} did not complete verification in time and was removed from the group.\n\n"
        f"They are welcome to rejoin and verify again."
    )


def help_text(community: str) -> str:
    return (
        f"🤖 <b>{community} Bot Commands</b>\n\n"
        f"/start - Show welcome message with game links\n"
        f"/help - Show this help message\n\n"
        f"The bot will automatically greet new members when they join the group!\n\n"
        f"🛡️ <b>Verification System</b>\n"
        f"New members must complete verification to access game links. "
        f"This helps prevent automated accounts.\n\n"
        f"ℹ️ <b>Note:</b> This is a data-free service. Verification status resets when the bot restarts."
    )
