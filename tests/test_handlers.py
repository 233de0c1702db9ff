"""Tests for the aiogram handlers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from gatebot.handlers.commands import cmd_help, cmd_start
from gatebot.handlers.errors import on_unhandled_error
from gatebot.handlers.group_events import on_new_chat_members
from gatebot.handlers.verification import ANSWERS, on_verify_pressed
from gatebot.models import ChallengeOutcome, ChallengeResult, JoinOutcome, JoinResult
from gatebot.utils.texts import (
    ANSWER_ERROR,
    ANSWER_EXPIRED,
    ANSWER_MALFORMED,
    ANSWER_NOT_YOURS,
    ANSWER_VERIFIED,
)

BOT_ID = 999


def make_user(user_id, first_name="Alice", is_bot=False):
    user = MagicMock()
    user.id = user_id
    user.first_name = first_name
    user.username = None
    user.is_bot = is_bot
    return user


def make_message(chat_type="supergroup", chat_id=100, from_user=None, new_members=None):
    message = MagicMock()
    message.chat.id = chat_id
    message.chat.type = chat_type
    message.from_user = from_user
    message.new_chat_members = new_members or []
    message.bot.id = BOT_ID
    message.answer = AsyncMock()
    return message


def make_callback(user_id, data, message_id=1001):
    callback = MagicMock()
    callback.id = "cb-1"
    callback.data = data
    callback.from_user = make_user(user_id)
    callback.message.message_id = message_id
    callback.answer = AsyncMock()
    return callback


@pytest.fixture
def mock_engine():
    engine = MagicMock()
    engine.on_member_joined = AsyncMock(return_value=JoinResult(outcome=JoinOutcome.CHALLENGED))
    engine.on_unverified_access_attempt = AsyncMock(return_value=JoinResult(outcome=JoinOutcome.CHALLENGED))
    engine.on_challenge_response = AsyncMock(return_value=ChallengeResult(outcome=ChallengeOutcome.VERIFIED))
    engine.send_greeting = AsyncMock(return_value=True)
    return engine


class TestNewChatMembers:
    @pytest.mark.asyncio
    async def test_each_member_is_processed(self, mock_engine):
        """Should pass every new member to the engine."""
        message = make_message(new_members=[make_user(42, "Alice"), make_user(43, "Bob")])

        await on_new_chat_members(message, mock_engine)

        assert mock_engine.on_member_joined.await_count == 2
        mock_engine.on_member_joined.assert_any_await(42, 100, "Alice", is_self_or_bot=False)
        mock_engine.on_member_joined.assert_any_await(43, 100, "Bob", is_self_or_bot=False)

    @pytest.mark.asyncio
    async def test_bots_and_self_are_flagged(self, mock_engine):
        """Should flag other bots and the gate itself."""
        message = make_message(new_members=[make_user(7, "Other", is_bot=True), make_user(BOT_ID, "Gate", is_bot=True)])

        await on_new_chat_members(message, mock_engine)

        for awaited in mock_engine.on_member_joined.await_args_list:
            assert awaited.kwargs["is_self_or_bot"] is True

    @pytest.mark.asyncio
    async def test_error_for_one_member_does_not_stop_others(self, mock_engine):
        """Should continue with the next member after an error."""
        mock_engine.on_member_joined.side_effect = [
            RuntimeError("boom"),
            JoinResult(outcome=JoinOutcome.CHALLENGED),
        ]
        message = make_message(new_members=[make_user(42), make_user(43)])

        await on_new_chat_members(message, mock_engine)

        assert mock_engine.on_member_joined.await_count == 2


class TestVerifyButton:
    @pytest.mark.asyncio
    async def test_verified_answer(self, mock_engine):
        """Should answer with a toast on success."""
        callback = make_callback(42, "verify:42")

        await on_verify_pressed(callback, mock_engine)

        mock_engine.on_challenge_response.assert_awaited_once_with(
            42, 42, first_name="Alice", message_id=1001
        )
        callback.answer.assert_awaited_once_with(ANSWER_VERIFIED, show_alert=False)

    @pytest.mark.asyncio
    async def test_foreign_click(self, mock_engine):
        """Should show an alert to a member clicking someone else's button."""
        mock_engine.on_challenge_response.return_value = ChallengeResult(outcome=ChallengeOutcome.NOT_YOURS)
        callback = make_callback(45, "verify:44")

        await on_verify_pressed(callback, mock_engine)

        mock_engine.on_challenge_response.assert_awaited_once_with(
            45, 44, first_name="Alice", message_id=1001
        )
        callback.answer.assert_awaited_once_with(ANSWER_NOT_YOURS, show_alert=True)

    @pytest.mark.asyncio
    async def test_expired(self, mock_engine):
        """Should tell the member to contact an admin after expiry."""
        mock_engine.on_challenge_response.return_value = ChallengeResult(outcome=ChallengeOutcome.EXPIRED)
        callback = make_callback(42, "verify:42")

        await on_verify_pressed(callback, mock_engine)

        callback.answer.assert_awaited_once_with(ANSWER_EXPIRED, show_alert=True)

    @pytest.mark.asyncio
    async def test_malformed_payload(self, mock_engine):
        """Should reject a broken payload without calling the engine."""
        callback = make_callback(42, "verify:abc")

        await on_verify_pressed(callback, mock_engine)

        mock_engine.on_challenge_response.assert_not_awaited()
        callback.answer.assert_awaited_once_with(ANSWER_MALFORMED, show_alert=True)

    @pytest.mark.asyncio
    async def test_engine_error(self, mock_engine):
        """Should answer with a generic error when the engine raises."""
        mock_engine.on_challenge_response.side_effect = RuntimeError("boom")
        callback = make_callback(42, "verify:42")

        await on_verify_pressed(callback, mock_engine)

        callback.answer.assert_awaited_once_with(ANSWER_ERROR, show_alert=True)

    def test_every_outcome_has_an_answer(self):
        """Should map each challenge outcome to a reply."""
        assert set(ANSWERS) == set(ChallengeOutcome)


class TestCommands:
    @pytest.mark.asyncio
    async def test_start_in_group_goes_through_gate(self, mock_engine):
        """Should treat /start in a group as an access attempt."""
        message = make_message(chat_type="group", from_user=make_user(50, "Eve"))

        await cmd_start(message, mock_engine)

        mock_engine.on_unverified_access_attempt.assert_awaited_once_with(50, 100, "Eve")
        mock_engine.send_greeting.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_in_private_greets(self, mock_engine):
        """Should greet in a private chat."""
        message = make_message(chat_type="private", chat_id=50, from_user=make_user(50, "Eve"))

        await cmd_start(message, mock_engine)

        mock_engine.send_greeting.assert_awaited_once_with(50, "Eve")
        mock_engine.on_unverified_access_attempt.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_help(self, settings):
        """Should reply with the command list."""
        message = make_message(chat_type="private", from_user=make_user(50))

        await cmd_help(message, settings)

        text = message.answer.await_args.args[0]
        assert "/start" in text
        assert "/help" in text
        assert settings.COMMUNITY_NAME in text


class TestErrorHandler:
    @pytest.mark.asyncio
    async def test_marks_error_handled(self):
        """Should log and swallow unhandled errors."""
        event = MagicMock()
        event.update.update_id = 1
        event.exception = RuntimeError("boom")

        assert await on_unhandled_error(event) is True
