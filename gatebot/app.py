"""Основной класс приложения для управления ботом."""

import asyncio
import signal
from typing import Callable, List, Optional

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiohttp import web
from loguru import logger

from config.settings import Settings
from gatebot.dispatcher_setup import setup_dispatcher
from gatebot.middleware.services import ServiceMiddleware
from gatebot.services.expiry_sweeper import ExpirySweeper
from gatebot.services.platform import AiogramPlatformClient
from gatebot.services.verification_engine import VerificationEngine
from gatebot.storage import VerificationStore
from gatebot.utils.commands import set_bot_commands
from gatebot.web.server import build_web_app


class BotApp:
    """
    Основной класс приложения, который инициализирует и координирует
    все компоненты бота: настройки, хранилище, движок, диспетчер, фоновую проверку.
    """

    def __init__(self, settings: Settings, clock: Optional[Callable[[], float]] = None):
        self.settings = settings
        self.clock = clock
        self.bot: Optional[Bot] = None
        self.dp: Optional[Dispatcher] = None
        self.store: Optional[VerificationStore] = None
        self.engine: Optional[VerificationEngine] = None
        self.sweeper: Optional[ExpirySweeper] = None
        self.service_middleware: Optional[ServiceMiddleware] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._shutdown_done = False

    async def _setup_bot_and_dispatcher(self):
        """Инициализирует бота и диспетчер."""
        self.bot = Bot(
            token=self.settings.get_bot_token(),
            session=AiohttpSession(timeout=self.settings.REQUEST_TIMEOUT_SECONDS),
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )
        self.dp = Dispatcher()
        logger.info("Бот и диспетчер успешно настроены.")

    def _setup_engine(self):
        """Создает хранилище, движок верификации и фоновую проверку."""
        self.store = VerificationStore(clock=self.clock)
        self.engine = VerificationEngine(
            store=self.store,
            platform=AiogramPlatformClient(self.bot),
            settings=self.settings,
        )
        self.sweeper = ExpirySweeper(
            self.engine,
            interval=self.settings.SWEEP_INTERVAL_SECONDS,
            timeout=self.settings.CHALLENGE_TIMEOUT_SECONDS,
        )
        logger.info(
            f"Движок верификации готов: таймаут {self.settings.CHALLENGE_TIMEOUT_SECONDS} с, "
            f"исключение по таймауту {'включено' if self.settings.REMOVE_ON_EXPIRY else 'выключено'}"
        )

    def _setup_dispatcher(self):
        """Настраивает и регистрирует все компоненты в диспетчере."""
        self.service_middleware = setup_dispatcher(
            dp=self.dp,
            engine=self.engine,
            settings=self.settings,
        )
        self.dp.startup.register(self.on_startup)
        self.dp.shutdown.register(self.on_shutdown)
        logger.info("Диспетчер полностью настроен.")

    def _allowed_updates(self) -> List[str]:
        allowed_updates = self.dp.resolve_used_update_types()
        for update_type in ("message", "callback_query", "my_chat_member"):
            if update_type not in allowed_updates:
                allowed_updates.append(update_type)
        return allowed_updates

    async def on_startup(self, bot: Bot):
        """Выполняется при старте бота."""
        logger.info("Запуск бота...")
        try:
            me = await bot.get_me()
            logger.info(f"Бот @{me.username} (ID: {me.id}) подключен")
        except TelegramAPIError as e:
            logger.error(f"Не удалось получить данные бота: {e}")

        await set_bot_commands(bot)

        if self.settings.RUN_MODE == "webhook" and self.settings.webhook_url:
            try:
                await bot.set_webhook(
                    self.settings.webhook_url,
                    secret_token=self.settings.get_webhook_secret(),
                    allowed_updates=self._allowed_updates(),
                )
                logger.info(f"Webhook зарегистрирован: {self.settings.webhook_url}")
            except TelegramAPIError as e:
                logger.error(f"Не удалось зарегистрировать webhook: {e}")

        self.sweeper.start()
        logger.info("Периодические задачи запущены.")

    async def on_shutdown(self):
        """
        Выполняется при остановке бота.

        Сначала прекращается прием событий, затем останавливается фоновая
        проверка. Сохранять нечего: состояние живет только в памяти.
        """
        if self._shutdown_done:
            return
        self._shutdown_done = True

        logger.info("Остановка бота...")
        if self.service_middleware:
            self.service_middleware.close()
        if self.sweeper:
            await self.sweeper.stop(timeout=self.settings.SHUTDOWN_TIMEOUT_SECONDS)
        if self.store:
            logger.info(
                f"Состояние в памяти сброшено: ожидали проверки {self.store.pending_count}, "
                f"проверено {self.store.verified_count}"
            )

    async def _release(self):
        if self.bot:
            await self.bot.session.close()
        logger.info("Все ресурсы освобождены. Бот остановлен.")

    def request_stop(self):
        """Сигнал остановки для режима webhook."""
        if self._stop_event and not self._stop_event.is_set():
            logger.info("Получен сигнал остановки")
            self._stop_event.set()

    def _install_signal_handlers(self):
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                logger.debug(f"Обработчик сигнала {sig} не поддерживается на этой платформе")

    async def _run_polling(self):
        allowed_updates = self._allowed_updates()
        logger.debug(f"Типы обновлений: {allowed_updates}")

        await self.bot.delete_webhook(drop_pending_updates=False)
        await self.dp.start_polling(
            self.bot,
            allowed_updates=allowed_updates,
        )

    async def _run_webhook(self):
        app = build_web_app(self.dp, self.bot, self.store, self.settings)
        runner = web.AppRunner(app)
        await runner.setup()

        self._stop_event = asyncio.Event()
        self._install_signal_handlers()

        await self.dp.emit_startup(bot=self.bot)
        try:
            site = web.TCPSite(runner, self.settings.WEBHOOK_HOST, self.settings.WEBHOOK_PORT)
            await site.start()
            logger.info(f"🌐 Webhook-сервер слушает порт {self.settings.WEBHOOK_PORT}")
            logger.info(f"📡 Webhook эндпоинт: {self.settings.WEBHOOK_PATH}")
            logger.info(f"💚 Проверка здоровья: http://localhost:{self.settings.WEBHOOK_PORT}/health")
            if not self.settings.webhook_url:
                logger.info("WEBHOOK_BASE_URL не задан: пробросьте порт наружу по HTTPS и зарегистрируйте webhook вручную")

            await self._stop_event.wait()
        finally:
            await self.dp.emit_shutdown(bot=self.bot)
            await runner.cleanup()

    async def run(self):
        """Главный метод для запуска бота."""
        try:
            await self._setup_bot_and_dispatcher()
            self._setup_engine()
            self._setup_dispatcher()

            if self.settings.RUN_MODE == "webhook":
                await self._run_webhook()
            else:
                await self._run_polling()
        except Exception as e:
            logger.opt(exception=e).critical(f"Критическая ошибка при запуске бота: {e}")
        finally:
            await self.on_shutdown()
            await self._release()
