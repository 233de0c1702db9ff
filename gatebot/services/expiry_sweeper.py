"""
Фоновая задача, исключающая участников с просроченной проверкой.
"""
import asyncio
from typing import Optional

from loguru import logger

from gatebot.models import SweepReport
from gatebot.services.verification_engine import VerificationEngine


class ExpirySweeper:
    """Периодически вызывает VerificationEngine.sweep_expired."""

    def __init__(self, engine: VerificationEngine, interval: float, timeout: float):
        if interval <= 0:
            raise ValueError("Интервал проверки должен быть положительным")
        if interval >= timeout:
            raise ValueError(
                f"Интервал проверки ({interval} с) должен быть меньше таймаута ({timeout} с)"
            )
        self.engine = engine
        self.interval = interval
        self.timeout = timeout
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Запуск периодической проверки."""
        if self.running:
            logger.warning("Проверка просроченных заявок уже запущена.")
            return
        self._task = asyncio.create_task(self._run(), name="expiry-sweeper")
        logger.info(f"Проверка просроченных заявок запущена (каждые {self.interval} с, таймаут {self.timeout} с).")

    async def stop(self, timeout: float = 5.0) -> None:
        """Отменяет задачу и ждет ее завершения не дольше timeout секунд."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await asyncio.wait_for(task, timeout=timeout)
        except asyncio.CancelledError:
            pass
        except asyncio.TimeoutError:
            logger.warning(f"Проверка просроченных заявок не остановилась за {timeout} с")
        logger.info("Проверка просроченных заявок остановлена.")

    async def run_once(self) -> SweepReport:
        """Один проход по заявкам с текущим временем хранилища."""
        return await self.engine.sweep_expired(self.engine.store.now(), self.timeout)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Ошибка в фоновой проверке заявок: {e}")
