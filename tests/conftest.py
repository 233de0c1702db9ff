"""Общие фикстуры тестов."""

from typing import Dict, List, Optional, Tuple

import pytest

from config.settings import Settings
from gatebot.exceptions import NotFound, TransportFailure
from gatebot.models import MemberInfo
from gatebot.services.verification_engine import VerificationEngine
from gatebot.storage import VerificationStore


class FakeClock:
    """Управляемые часы для хранилища."""

    def __init__(self, start: float = 0.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


class FakePlatform:
    """Записывает вызовы платформы; отдельные операции можно заставить падать."""

    def __init__(self):
        self.calls: List[Tuple] = []
        self.failing: Dict[str, TransportFailure] = {}
        self.members: Dict[int, MemberInfo] = {}
        self._next_message_id = 1000

    def fail(self, operation: str, error: Optional[TransportFailure] = None) -> None:
        self.failing[operation] = error or TransportFailure(operation)

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise self.failing[operation]

    def calls_of(self, operation: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == operation]

    async def reply(self, chat_id, text, reply_markup=None):
        self.calls.append(("reply", chat_id, text, reply_markup))
        self._check("reply")
        self._next_message_id += 1
        return self._next_message_id

    async def edit_message(self, chat_id, message_id, text, reply_markup=None):
        self.calls.append(("edit_message", chat_id, message_id, text, reply_markup))
        self._check("edit_message")

    async def delete_message(self, chat_id, message_id):
        self.calls.append(("delete_message", chat_id, message_id))
        self._check("delete_message")

    async def remove_member(self, chat_id, user_id):
        self.calls.append(("remove_member", chat_id, user_id))
        self._check("remove_member")

    async def get_member_info(self, chat_id, user_id):
        self.calls.append(("get_member_info", chat_id, user_id))
        self._check("get_member_info")
        if user_id not in self.members:
            raise NotFound("get_chat_member")
        return self.members[user_id]


def make_settings(**overrides) -> Settings:
    values = dict(
        BOT_TOKEN="123456789:TEST-token_value",
        CHALLENGE_TIMEOUT_SECONDS=300,
        SWEEP_INTERVAL_SECONDS=5,
        LOG_FILE=None,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return VerificationStore(clock=clock)


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def engine(store, platform, settings):
    return VerificationEngine(store, platform, settings)


