"""Движок проверки новых участников.

Состояния пользователя: UNVERIFIED -> PENDING -> VERIFIED, либо
PENDING -> REMOVED при истечении таймаута. Вернувшийся после исключения
пользователь снова проходит проверку с нуля.
"""
from typing import Awaitable, Optional

from loguru import logger

from config.settings import Settings
from gatebot.exceptions import TransportFailure
from gatebot.models import (
    ChallengeOutcome,
    ChallengeResult,
    ExpiredChallenge,
    JoinOutcome,
    JoinResult,
    MemberInfo,
    SweepReport,
)
from gatebot.services.platform import ChatPlatformClient
from gatebot.storage import VerificationStore
from gatebot.utils.keyboards import main_keyboard, verification_keyboard
from gatebot.utils.texts import expiry_text, greeting_text, verification_text


class VerificationEngine:
    """
    Бизнес-логика проверки: вступление, нажатие кнопки, истечение срока.

    Все изменения состояния делаются через VerificationStore до или после
    сетевых вызовов, но никогда во время них.
    """

    def __init__(self, store: VerificationStore, platform: ChatPlatformClient, settings: Settings):
        self.store = store
        self.platform = platform
        self.settings = settings

    @property
    def timeout(self) -> int:
        return self.settings.CHALLENGE_TIMEOUT_SECONDS

    async def on_member_joined(
        self,
        user_id: int,
        chat_id: int,
        first_name: Optional[str],
        is_self_or_bot: bool = False,
    ) -> JoinResult:
        """Обрабатывает вступление участника в группу."""
        if is_self_or_bot:
            logger.debug(f"🤖 Пропускаем бота {user_id} в группе {chat_id}")
            return JoinResult(outcome=JoinOutcome.SKIPPED)
        return await self._gate(user_id, chat_id, first_name, source="вступление")

    async def on_unverified_access_attempt(
        self,
        user_id: int,
        chat_id: int,
        first_name: Optional[str],
    ) -> JoinResult:
        """Обрабатывает команду в группе от пользователя, который мог еще не получить проверку."""
        return await self._gate(user_id, chat_id, first_name, source="команда")

    async def _gate(self, user_id: int, chat_id: int, first_name: Optional[str], source: str) -> JoinResult:
        if self.store.is_verified(user_id):
            logger.info(f"✅ Пользователь {user_id} уже проверен, отправляем приветствие ({source})")
            delivered = await self.send_greeting(chat_id, first_name)
            return JoinResult(outcome=JoinOutcome.GREETED, delivered=delivered)

        if not self.store.begin_challenge(user_id, chat_id):
            logger.debug(f"⏳ У пользователя {user_id} уже есть активная проверка ({source}), пропускаем")
            return JoinResult(outcome=JoinOutcome.ALREADY_PENDING)

        text = verification_text(first_name, self.settings.COMMUNITY_NAME, self.settings.format_timeout())
        try:
            message_id = await self.platform.reply(chat_id, text, reply_markup=verification_keyboard(user_id))
        except TransportFailure as e:
            logger.error(f"❌ Не удалось отправить проверку пользователю {user_id} в {chat_id}: {e}")
            return JoinResult(outcome=JoinOutcome.CHALLENGED, delivered=False)

        if not self.store.attach_message(user_id, message_id):
            logger.warning(f"⚠️ Заявка {user_id} исчезла до сохранения сообщения {message_id}")
            await self._attempt("удаление осиротевшей проверки", self.platform.delete_message(chat_id, message_id))
            return JoinResult(outcome=JoinOutcome.CHALLENGED)

        logger.info(f"🛡️ Требуется проверка пользователя {user_id} ({first_name}) в группе {chat_id} ({source})")
        return JoinResult(outcome=JoinOutcome.CHALLENGED)

    async def send_greeting(self, chat_id: int, first_name: Optional[str]) -> bool:
        """Отправляет полное приветствие с игровыми ссылками."""
        try:
            await self.platform.reply(
                chat_id,
                greeting_text(first_name, self.settings.COMMUNITY_NAME),
                reply_markup=self._main_keyboard(),
            )
            return True
        except TransportFailure as e:
            logger.error(f"❌ Не удалось отправить приветствие в {chat_id}: {e}")
            return False

    async def on_challenge_response(
        self,
        responding_user_id: int,
        claimed_user_id: int,
        first_name: Optional[str] = None,
        message_id: Optional[int] = None,
    ) -> ChallengeResult:
        """
        Обрабатывает нажатие кнопки проверки.

        Кнопка адресована одному пользователю: чужое нажатие отклоняется без
        изменения состояния. message_id сообщения с кнопкой используется,
        только если заявка не успела его запомнить.
        """
        if responding_user_id != claimed_user_id:
            logger.warning(
                f"🚫 Пользователь {responding_user_id} нажал кнопку проверки пользователя {claimed_user_id}"
            )
            return ChallengeResult(outcome=ChallengeOutcome.NOT_YOURS)

        entry = self.store.promote(claimed_user_id)
        if entry is None:
            if self.store.is_verified(claimed_user_id):
                return ChallengeResult(outcome=ChallengeOutcome.ALREADY_VERIFIED)
            logger.info(f"⏰ Пользователь {claimed_user_id} нажал кнопку после истечения срока")
            return ChallengeResult(outcome=ChallengeOutcome.EXPIRED)

        logger.info(f"✅ Пользователь {claimed_user_id} ({first_name}) успешно прошел проверку")

        target_chat = entry.chat_id
        target_message = entry.message_id if entry.message_id is not None else message_id
        text = greeting_text(first_name, self.settings.COMMUNITY_NAME)

        if target_message is not None:
            try:
                await self.platform.edit_message(target_chat, target_message, text, reply_markup=self._main_keyboard())
                return ChallengeResult(outcome=ChallengeOutcome.VERIFIED)
            except TransportFailure as e:
                logger.warning(f"⚠️ Не удалось изменить сообщение {target_message} в {target_chat}, отправляем новое: {e}")

        delivered = await self.send_greeting(target_chat, first_name)
        return ChallengeResult(outcome=ChallengeOutcome.VERIFIED, delivered=delivered)

    async def sweep_expired(self, now: Optional[float] = None, timeout: Optional[float] = None) -> SweepReport:
        """
        Обрабатывает просроченные заявки.

        Каждая заявка и каждый шаг обработки независимы: ошибка в одном не
        мешает остальным, а изъятая заявка обратно не возвращается.
        """
        expired = self.store.list_expired(now, self.timeout if timeout is None else timeout)
        report = SweepReport(expired=len(expired))
        if not expired:
            return report

        logger.info(f"⏰ Найдено {len(expired)} просроченных проверок")
        for entry in expired:
            if not self.settings.REMOVE_ON_EXPIRY:
                logger.info(
                    f"🗑️ Удалена просроченная заявка пользователя {entry.user_id} в {entry.chat_id} (исключение отключено)"
                )
                continue
            await self._expire(entry, report)

        logger.info(
            f"Итоги проверки: просрочено {report.expired}, исключено {report.removed}, "
            f"уведомлений {report.notified}, удалено сообщений {report.messages_deleted}, ошибок {report.failures}"
        )
        return report

    async def _expire(self, entry: ExpiredChallenge, report: SweepReport) -> None:
        info: Optional[MemberInfo] = None
        try:
            info = await self.platform.get_member_info(entry.chat_id, entry.user_id)
        except TransportFailure as e:
            logger.debug(f"Не удалось получить данные участника {entry.user_id}: {e}")
        except Exception as e:
            logger.error(f"Ошибка при получении данных участника {entry.user_id}: {e}")

        label = info.label if info else str(entry.user_id)
        logger.info(f"👢 Пользователь {label} не прошел проверку в группе {entry.chat_id} вовремя")

        display_name = info.display_name if info else None
        if await self._attempt(
            f"уведомление об исключении {entry.user_id}",
            self.platform.reply(entry.chat_id, expiry_text(entry.user_id, display_name)),
        ):
            report.notified += 1
        else:
            report.failures += 1

        if await self._attempt(
            f"исключение {entry.user_id} из {entry.chat_id}",
            self.platform.remove_member(entry.chat_id, entry.user_id),
        ):
            report.removed += 1
            logger.info(f"Пользователь {label} удален из группы {entry.chat_id} за непрохождение проверки")
        else:
            report.failures += 1

        if entry.message_id is not None:
            if await self._attempt(
                f"удаление сообщения проверки {entry.message_id}",
                self.platform.delete_message(entry.chat_id, entry.message_id),
            ):
                report.messages_deleted += 1

    async def _attempt(self, action: str, call: Awaitable) -> bool:
        """Выполняет вызов платформы, не пропуская ошибки наружу."""
        try:
            await call
            return True
        except TransportFailure as e:
            logger.warning(f"⚠️ Не удалось выполнить {action}: {e}")
        except Exception as e:
            logger.error(f"❌ Непредвиденная ошибка ({action}): {e}")
        return False

    def _main_keyboard(self):
        return main_keyboard(self.settings.GAME_URL, self.settings.DOCS_URL)
