#!/usr/bin/env python3
"""
Валидация конфигурации бота проверки участников

Проверяет:
- Наличие и значения настроек (.env или окружение)
- Формат и работоспособность токена Telegram
- Состояние webhook относительно выбранного режима запуска
- Выводит понятные ошибки
"""

import re
import sys

import requests
from pydantic import ValidationError

from config.settings import Settings

TELEGRAM_API = "https://api.telegram.org"


def load_settings():
    """Загружаем настройки через те же правила, что и бот"""
    try:
        return Settings()
    except ValidationError as e:
        print("❌ Configuration is invalid:")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            print(f"   {field}: {error['msg']}")
        return None


def validate_telegram_token(token):
    """Проверяем формат и работоспособность Telegram токена"""
    if not re.match(r'^\d+:[a-zA-Z0-9_-]+$', token):
        print("❌ Invalid Telegram bot token format")
        print("   Should be like: 123456789:ABCdefGHI...")
        return False

    try:
        response = requests.get(f'{TELEGRAM_API}/bot{token}/getMe', timeout=10)
        if response.status_code == 200:
            data = response.json()
            if data.get('ok'):
                bot_info = data.get('result', {})
                print(f"✅ Bot connected successfully: @{bot_info.get('username', 'unknown')}")
                if not bot_info.get('can_join_groups', True):
                    print("⚠️  Bot cannot be added to groups (check BotFather settings)")
                return True
            print("❌ Invalid bot token (API returned error)")
            return False
        elif response.status_code == 401:
            print("❌ Invalid bot token (401 Unauthorized)")
            return False
        else:
            print(f"❌ Telegram API error: {response.status_code}")
            return False
    except requests.exceptions.RequestException as e:
        print(f"❌ Network error connecting to Telegram: {e}")
        return False


def validate_webhook(token, settings):
    """Сверяем текущий webhook в Telegram с режимом запуска"""
    try:
        response = requests.get(f'{TELEGRAM_API}/bot{token}/getWebhookInfo', timeout=10)
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        print(f"❌ Could not read webhook info: {e}")
        return False

    if not data.get('ok'):
        print("❌ Telegram refused getWebhookInfo")
        return False

    current_url = data.get('result', {}).get('url', '')
    if settings.RUN_MODE == "polling":
        if current_url:
            print(f"⚠️  Webhook is set to {current_url}; it will be removed when polling starts")
        else:
            print("✅ No webhook set, polling mode is ready")
        return True

    if settings.webhook_url:
        if current_url and current_url != settings.webhook_url:
            print(f"⚠️  Webhook points to {current_url}, will be replaced with {settings.webhook_url}")
        else:
            print(f"✅ Webhook will be registered at {settings.webhook_url}")
    elif current_url:
        print(f"✅ Webhook is set externally: {current_url}")
    else:
        print("⚠️  Webhook mode without WEBHOOK_BASE_URL and no webhook registered yet")
        print("   Expose the port over HTTPS and call setWebhook, or set WEBHOOK_BASE_URL")
    return True


def describe_timeouts(settings):
    """Печатаем параметры проверки"""
    print(f"✅ Challenge timeout: {settings.CHALLENGE_TIMEOUT_SECONDS}s ({settings.format_timeout()})")
    print(f"✅ Sweep interval: {settings.SWEEP_INTERVAL_SECONDS}s")
    action = "kick" if settings.REMOVE_ON_EXPIRY else "drop pending entry only"
    print(f"✅ On expiry: {action}")


def main():
    print("🔍 Human Gate Bot - Configuration Validation")
    print("=" * 50)

    settings = load_settings()
    if settings is None:
        sys.exit(1)

    print("\n🔍 Validating configuration...")
    describe_timeouts(settings)

    token = settings.get_bot_token()
    validation_failed = False

    if not validate_telegram_token(token):
        validation_failed = True
    elif not validate_webhook(token, settings):
        validation_failed = True

    if validation_failed:
        print("\n❌ Configuration validation failed!")
        print("Please fix the issues above before running the bot.")
        sys.exit(1)
    else:
        print("\n✅ All configuration checks passed!")
        print("Bot is ready to start.")


if __name__ == "__main__":
    main()
