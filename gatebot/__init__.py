"""Бот проверки новых участников группы: кнопка «я человек» и исключение по таймауту."""

__version__ = "1.0.0"
