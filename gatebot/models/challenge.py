"""
Модели, связанные с заявками на проверку.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class VerificationState(str, Enum):
    """Состояние пользователя в жизненном цикле проверки."""
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REMOVED = "removed"


class PendingChallenge(BaseModel):
    """
    Незавершенная проверка пользователя.

    message_id равен None, пока сообщение с кнопкой еще не отправлено.
    """
    chat_id: int
    message_id: Optional[int] = None
    issued_at: float


class ExpiredChallenge(BaseModel):
    """Просроченная заявка, уже изъятая из хранилища."""
    user_id: int
    chat_id: int
    message_id: Optional[int] = None
    issued_at: float


class MemberInfo(BaseModel):
    """Отображаемые данные участника группы."""
    user_id: int
    username: Optional[str] = None
    display_name: str

    @property
    def label(self) -> str:
        if self.username:
            return f"{self.display_name} (@{self.username})"
        return self.display_name
