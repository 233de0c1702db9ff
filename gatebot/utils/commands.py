"""Module for setting up bot commands."""
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import BotCommand, BotCommandScopeAllGroupChats, BotCommandScopeAllPrivateChats
from loguru import logger

BOT_COMMANDS = [
    BotCommand(command="start", description="Welcome message and game links"),
    BotCommand(command="help", description="How verification works"),
]


async def set_bot_commands(bot: Bot) -> None:
    """
    Sets up the commands for the bot in the Telegram UI.

    The same command list is shown in private chats and in groups.
    """
    try:
        await bot.set_my_commands(BOT_COMMANDS, scope=BotCommandScopeAllPrivateChats())
        await bot.set_my_commands(BOT_COMMANDS, scope=BotCommandScopeAllGroupChats())
        logger.info("Команды бота настроены для личных сообщений и групп")
    except TelegramAPIError as e:
        logger.error(f"Не удалось установить команды бота: {e}")
