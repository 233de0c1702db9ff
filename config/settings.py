"""Настройки конфигурации для бота проверки новых участников."""
from functools import lru_cache
from typing import Literal, Optional

from loguru import logger
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Основные настройки приложения."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # 1. Настройки Telegram
    BOT_TOKEN: SecretStr = Field(..., description="Токен Telegram бота")
    REQUEST_TIMEOUT_SECONDS: int = Field(
        default=30,
        gt=0,
        description="Таймаут HTTP-запросов к Bot API"
    )

    # 2. Настройки верификации
    CHALLENGE_TIMEOUT_SECONDS: int = Field(
        default=30 * 60,
        gt=0,
        description="Время на нажатие кнопки проверки в секундах"
    )
    SWEEP_INTERVAL_SECONDS: int = Field(
        default=5 * 60,
        gt=0,
        description="Интервал проверки просроченных заявок в секундах"
    )
    REMOVE_ON_EXPIRY: bool = Field(
        default=True,
        description="Исключать из группы тех, кто не прошел проверку вовремя"
    )

    # 3. Ссылки и тексты
    COMMUNITY_NAME: str = Field(default="Spore War", description="Название сообщества")
    GAME_URL: str = Field(
        default="http://warspore-saga.xyz/mobile/index.html",
        description="Ссылка на игровой клиент"
    )
    DOCS_URL: str = Field(
        default="http://warspore-saga.xyz/docs",
        description="Ссылка на документацию"
    )

    # 4. Режим запуска
    RUN_MODE: Literal["polling", "webhook"] = Field(default="polling", description="polling или webhook")
    WEBHOOK_HOST: str = Field(default="0.0.0.0", description="Адрес для webhook-сервера")
    WEBHOOK_PORT: int = Field(default=3000, description="Порт webhook-сервера")
    WEBHOOK_PATH: str = Field(default="/webhook", description="Путь webhook-эндпоинта")
    WEBHOOK_BASE_URL: Optional[str] = Field(
        default=None,
        description="Публичный HTTPS адрес; если задан, webhook регистрируется при старте"
    )
    WEBHOOK_SECRET: Optional[SecretStr] = Field(default=None, description="Секрет для заголовка webhook")
    SHUTDOWN_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Сколько ждать остановки фоновых задач при выключении"
    )

    # 5. Логирование
    LOG_LEVEL: str = Field(default="INFO", description="Уровень логирования")
    LOG_FILE: Optional[str] = Field(default="bot.log", description="Файл лога (пусто - без файла)")

    # Валидаторы
    @field_validator("WEBHOOK_PATH")
    def normalize_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        return value

    @field_validator("WEBHOOK_BASE_URL")
    def strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value:
            return value.rstrip("/")
        return None

    @field_validator("LOG_LEVEL")
    def upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def check_sweep_interval(self) -> "Settings":
        if self.SWEEP_INTERVAL_SECONDS >= self.CHALLENGE_TIMEOUT_SECONDS:
            raise ValueError(
                "SWEEP_INTERVAL_SECONDS должен быть меньше CHALLENGE_TIMEOUT_SECONDS "
                f"({self.SWEEP_INTERVAL_SECONDS} >= {self.CHALLENGE_TIMEOUT_SECONDS})"
            )
        if self.SWEEP_INTERVAL_SECONDS * 6 > self.CHALLENGE_TIMEOUT_SECONDS:
            logger.warning(
                f"SWEEP_INTERVAL_SECONDS={self.SWEEP_INTERVAL_SECONDS} больше рекомендуемой "
                f"шестой части таймаута ({self.CHALLENGE_TIMEOUT_SECONDS // 6})"
            )
        return self

    # Методы для удобства
    def get_bot_token(self) -> str:
        """Получить токен бота в виде строки."""
        return self.BOT_TOKEN.get_secret_value()

    def get_webhook_secret(self) -> Optional[str]:
        """Секрет webhook в виде строки, если задан."""
        return self.WEBHOOK_SECRET.get_secret_value() if self.WEBHOOK_SECRET else None

    @property
    def webhook_url(self) -> Optional[str]:
        """Полный адрес webhook для регистрации в Telegram."""
        if not self.WEBHOOK_BASE_URL:
            return None
        return f"{self.WEBHOOK_BASE_URL}{self.WEBHOOK_PATH}"

    def format_timeout(self) -> str:
        """Таймаут проверки в человекочитаемом виде (для текстов сообщений)."""
        seconds = self.CHALLENGE_TIMEOUT_SECONDS
        if seconds % 3600 == 0:
            hours = seconds // 3600
            return f"{hours} hour" + ("s" if hours != 1 else "")
        if seconds % 60 == 0:
            minutes = seconds // 60
            return f"{minutes} minute" + ("s" if minutes != 1 else "")
        return f"{seconds} seconds"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Единственный экземпляр настроек, читается при первом обращении."""
    return Settings()
