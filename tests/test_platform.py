"""Tests for gatebot.services.platform."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError, TelegramNetworkError

from gatebot.exceptions import Forbidden, MessageNotEditable, NotFound, TransportFailure
from gatebot.services.platform import AiogramPlatformClient


def api_error(cls, message="error"):
    return cls(method=MagicMock(), message=message)


@pytest.fixture
def bot():
    bot = MagicMock()
    bot.send_message = AsyncMock(return_value=MagicMock(message_id=555))
    bot.edit_message_text = AsyncMock()
    bot.delete_message = AsyncMock()
    bot.ban_chat_member = AsyncMock()
    bot.unban_chat_member = AsyncMock()
    bot.get_chat_member = AsyncMock()
    return bot


@pytest.fixture
def client(bot):
    return AiogramPlatformClient(bot)


class TestReply:
    @pytest.mark.asyncio
    async def test_returns_message_id(self, client, bot):
        """Should send the message and return its id."""
        message_id = await client.reply(100, "hi", reply_markup=None)

        assert message_id == 555
        bot.send_message.assert_awaited_once_with(100, "hi", reply_markup=None)

    @pytest.mark.asyncio
    async def test_forbidden(self, client, bot):
        """Should map a forbidden error."""
        bot.send_message.side_effect = api_error(TelegramForbiddenError, "bot was kicked")

        with pytest.raises(Forbidden):
            await client.reply(100, "hi")

    @pytest.mark.asyncio
    async def test_network_error(self, client, bot):
        """Should map any other API error to TransportFailure."""
        bot.send_message.side_effect = api_error(TelegramNetworkError, "timeout")

        with pytest.raises(TransportFailure) as exc_info:
            await client.reply(100, "hi")

        assert exc_info.value.operation == "send_message"


class TestEditAndDelete:
    @pytest.mark.asyncio
    async def test_edit_bad_request(self, client, bot):
        """Should report an uneditable message."""
        bot.edit_message_text.side_effect = api_error(TelegramBadRequest, "message to edit not found")

        with pytest.raises(MessageNotEditable):
            await client.edit_message(100, 7, "text")

    @pytest.mark.asyncio
    async def test_delete_bad_request(self, client, bot):
        """Should report a missing message as NotFound."""
        bot.delete_message.side_effect = api_error(TelegramBadRequest, "message to delete not found")

        with pytest.raises(NotFound):
            await client.delete_message(100, 7)


class TestRemoveMember:
    @pytest.mark.asyncio
    async def test_ban_then_unban(self, client, bot):
        """Should kick with ban followed by unban so the member may rejoin."""
        manager = MagicMock()
        manager.attach_mock(bot.ban_chat_member, "ban")
        manager.attach_mock(bot.unban_chat_member, "unban")

        await client.remove_member(100, 43)

        assert manager.mock_calls == [
            call.ban(100, 43),
            call.unban(100, 43, only_if_banned=True),
        ]

    @pytest.mark.asyncio
    async def test_ban_failure_skips_unban(self, client, bot):
        """Should not unban when the ban failed."""
        bot.ban_chat_member.side_effect = api_error(TelegramBadRequest, "not enough rights")

        with pytest.raises(TransportFailure):
            await client.remove_member(100, 43)

        bot.unban_chat_member.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unban_failure_is_reported(self, client, bot):
        """Should surface a failed unban."""
        bot.unban_chat_member.side_effect = api_error(TelegramNetworkError)

        with pytest.raises(TransportFailure) as exc_info:
            await client.remove_member(100, 43)

        assert exc_info.value.operation == "unban_chat_member"


class TestMemberInfo:
    @pytest.mark.asyncio
    async def test_builds_member_info(self, client, bot):
        """Should return display data of the member."""
        user = MagicMock(username="bob", full_name="Bob Smith")
        bot.get_chat_member.return_value = MagicMock(user=user)

        info = await client.get_member_info(100, 43)

        assert info.user_id == 43
        assert info.label == "Bob Smith (@bob)"

    @pytest.mark.asyncio
    async def test_unknown_member(self, client, bot):
        """Should raise NotFound for an unknown member."""
        bot.get_chat_member.side_effect = api_error(TelegramBadRequest, "user not found")

        with pytest.raises(NotFound):
            await client.get_member_info(100, 43)
