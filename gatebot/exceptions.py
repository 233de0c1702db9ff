"""Исключения бота.

Ошибки транспорта (любой вызов Bot API) никогда не являются фатальными для
движка верификации: best-effort вызовы поглощают их с записью в лог, а
обязательные (отправка проверки или приветствия) сообщаются обработчику
через ``delivered=False``.
"""
from typing import Optional


class GateBotError(Exception):
    """Базовое исключение бота."""


class TransportFailure(GateBotError):
    """Вызов Telegram Bot API завершился ошибкой."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class MessageNotEditable(TransportFailure):
    """Сообщение нельзя отредактировать (удалено, слишком старое и т.п.)."""


class NotFound(TransportFailure):
    """Чат, сообщение или участник не найдены."""


class Forbidden(TransportFailure):
    """У бота нет прав на действие."""


class MalformedPayload(GateBotError):
    """Данные кнопки не удалось разобрать."""

    def __init__(self, data: Optional[str], reason: str = ""):
        self.data = data
        self.reason = reason
        super().__init__(f"malformed callback payload {data!r}" + (f": {reason}" if reason else ""))
