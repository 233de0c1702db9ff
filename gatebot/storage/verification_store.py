"""Хранилище состояния проверки участников.

Состояние живет только в памяти процесса: перезапуск очищает и список
проверенных пользователей, и все незавершенные заявки.
"""
import threading
import time
from typing import Callable, Dict, List, Optional, Set

from loguru import logger

from gatebot.models import ExpiredChallenge, PendingChallenge, VerificationState


class VerificationStore:
    """
    Единственный владелец множества проверенных пользователей и словаря заявок.

    Каждая операция выполняется целиком под одной блокировкой и не содержит
    await, поэтому атомарна и для корутин, и для потоков. Наружу отдаются
    только копии записей.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._verified: Set[int] = set()
        self._pending: Dict[int, PendingChallenge] = {}

    def now(self) -> float:
        """Текущее время по часам хранилища."""
        return self._clock()

    def is_verified(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._verified

    def mark_verified(self, user_id: int) -> None:
        with self._lock:
            self._verified.add(user_id)

    def begin_challenge(
        self,
        user_id: int,
        chat_id: int,
        message_id: Optional[int] = None,
        now: Optional[float] = None,
    ) -> bool:
        """
        Создает заявку, только если у пользователя ее еще нет.

        Returns:
            False, если заявка уже существует или пользователь проверен:
            повторную проверку отправлять не нужно.
        """
        issued_at = self._clock() if now is None else now
        with self._lock:
            if user_id in self._pending or user_id in self._verified:
                return False
            self._pending[user_id] = PendingChallenge(
                chat_id=chat_id,
                message_id=message_id,
                issued_at=issued_at,
            )
            return True

    def attach_message(self, user_id: int, message_id: int) -> bool:
        """Запоминает id сообщения с кнопкой. False, если заявки уже нет."""
        with self._lock:
            entry = self._pending.get(user_id)
            if entry is None:
                return False
            entry.message_id = message_id
            return True

    def complete_challenge(self, user_id: int) -> Optional[PendingChallenge]:
        """Атомарно изымает заявку. None означает, что ее уже нет."""
        with self._lock:
            entry = self._pending.pop(user_id, None)
        return entry.model_copy() if entry is not None else None

    def promote(self, user_id: int) -> Optional[PendingChallenge]:
        """Изымает заявку и отмечает пользователя проверенным за один шаг."""
        with self._lock:
            entry = self._pending.pop(user_id, None)
            if entry is None:
                return None
            self._verified.add(user_id)
        return entry.model_copy()

    def list_expired(self, now: Optional[float] = None, timeout: float = 0) -> List[ExpiredChallenge]:
        """
        Возвращает и атомарно удаляет все заявки старше timeout секунд.

        Заявка, попавшая в результат, уже не может быть подтверждена.
        """
        current = self._clock() if now is None else now
        expired: List[ExpiredChallenge] = []
        with self._lock:
            for user_id, entry in list(self._pending.items()):
                if current - entry.issued_at > timeout:
                    del self._pending[user_id]
                    expired.append(ExpiredChallenge(
                        user_id=user_id,
                        chat_id=entry.chat_id,
                        message_id=entry.message_id,
                        issued_at=entry.issued_at,
                    ))
        if expired:
            logger.debug(f"🧹 Изъято {len(expired)} просроченных заявок")
        return expired

    def get_pending(self, user_id: int) -> Optional[PendingChallenge]:
        with self._lock:
            entry = self._pending.get(user_id)
            return entry.model_copy() if entry is not None else None

    def state_of(self, user_id: int) -> VerificationState:
        with self._lock:
            if user_id in self._verified:
                return VerificationState.VERIFIED
            if user_id in self._pending:
                return VerificationState.PENDING
        return VerificationState.UNVERIFIED

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def verified_count(self) -> int:
        with self._lock:
            return len(self._verified)
