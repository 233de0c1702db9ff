"""HTTP-сервер для режима webhook: эндпоинт Telegram и проверка здоровья."""
import time
from datetime import datetime, timezone

from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler
from aiohttp import web
from loguru import logger

from config.settings import Settings
from gatebot.storage import VerificationStore

STORE_KEY = web.AppKey("store", VerificationStore)


@web.middleware
async def request_logging_middleware(request: web.Request, handler):
    """Логирует каждый запрос и время его обработки."""
    started = time.perf_counter()
    logger.debug(f"[HTTP] {request.method} {request.path}")
    status = 500
    try:
        response = await handler(request)
        status = response.status
        return response
    except web.HTTPException as e:
        status = e.status
        raise
    finally:
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(f"[HTTP] {request.method} {request.path} -> {status} ({duration_ms:.0f}ms)")


async def health(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    return web.json_response({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "pending": store.pending_count,
        "verified": store.verified_count,
    })


def build_web_app(dp: Dispatcher, bot: Bot, store: VerificationStore, settings: Settings) -> web.Application:
    """Собирает aiohttp-приложение с webhook-эндпоинтом и /health."""
    app = web.Application(middlewares=[request_logging_middleware])
    app[STORE_KEY] = store

    SimpleRequestHandler(
        dispatcher=dp,
        bot=bot,
        secret_token=settings.get_webhook_secret(),
    ).register(app, path=settings.WEBHOOK_PATH)
    app.router.add_get("/health", health)

    return app
