"""Результаты операций движка верификации."""
from enum import Enum

from pydantic import BaseModel


class JoinOutcome(str, Enum):
    """Чем закончилась обработка вступления или команды в группе."""
    SKIPPED = "skipped"
    GREETED = "greeted"
    CHALLENGED = "challenged"
    ALREADY_PENDING = "already_pending"


class ChallengeOutcome(str, Enum):
    """Чем закончилось нажатие кнопки проверки."""
    VERIFIED = "verified"
    NOT_YOURS = "not_yours"
    ALREADY_VERIFIED = "already_verified"
    EXPIRED = "expired"


class JoinResult(BaseModel):
    outcome: JoinOutcome
    delivered: bool = True


class ChallengeResult(BaseModel):
    outcome: ChallengeOutcome
    delivered: bool = True


class SweepReport(BaseModel):
    """Итоги одного прохода по просроченным заявкам."""
    expired: int = 0
    notified: int = 0
    removed: int = 0
    messages_deleted: int = 0
    failures: int = 0
