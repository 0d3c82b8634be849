"""
Sheet To-Do Bot — Webhook deployment.

Telegram retries any webhook call that doesn't answer quickly, so POST
/webhook always acknowledges at once and the update is processed in a
background task after the response has been sent. From then on errors are
only visible as a chat reply or in the logs.

Run with: uvicorn src.bot.webhook:app --port 8080
"""

from __future__ import annotations

import asyncio
import logging
import os

import uvicorn
from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import Application

from src.bot import messages
from src.config import apply_log_level, get_settings, settings_presence
from src.core.errors import ConfigError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Sheet To-Do Bot")

_application: Application | None = None
_init_lock = asyncio.Lock()


async def get_application() -> Application:
    """Build and initialize the PTB application once per process."""
    global _application
    async with _init_lock:
        if _application is None:
            from src.bot.telegram_bot import build_app

            settings = get_settings()
            apply_log_level(settings)
            application = build_app(settings=settings, webhook=True)
            await application.initialize()
            _application = application
            logger.info("PTB application initialized for webhook")
    return _application


def _chat_id(data: dict) -> int | None:
    message = data.get("message") or (data.get("callback_query") or {}).get("message") or {}
    return (message.get("chat") or {}).get("id")


async def _report_config_error(data: dict, exc: ConfigError) -> None:
    """Tell the chat about a configuration problem, if we can reach Telegram at all."""
    token = os.getenv("TELEGRAM_BOT_TOKEN")
    chat_id = _chat_id(data)
    if not token or chat_id is None:
        return
    try:
        async with Bot(token) as bot:
            await bot.send_message(chat_id=chat_id, text=messages.error_message(str(exc)))
    except TelegramError as send_exc:
        logger.error("Could not report configuration error to chat %s: %s", chat_id, send_exc)


async def process_update(data: dict) -> None:
    """Background half of the webhook: feed one update through the bot."""
    try:
        application = await get_application()
    except ConfigError as exc:
        logger.error("Webhook configuration error: %s (present: %s)", exc, settings_presence())
        await _report_config_error(data, exc)
        return
    except Exception:
        logger.exception("Failed to initialize bot application")
        return

    try:
        update = Update.de_json(data, application.bot)
        await application.process_update(update)
    except Exception:
        logger.exception("Webhook processing error for update_id=%s", data.get("update_id"))


@app.on_event("shutdown")
async def _shutdown() -> None:
    if _application is not None:
        await _application.shutdown()
        logger.info("PTB application shutdown")


@app.get("/", response_class=PlainTextResponse)
def health() -> str:
    return "ok"


@app.get("/set_webhook", response_class=PlainTextResponse)
async def set_webhook() -> str:
    try:
        settings = get_settings()
    except ConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    if not settings.WEBHOOK_URL:
        raise HTTPException(status_code=500, detail="WEBHOOK_URL not set")

    application = await get_application()
    await application.bot.set_webhook(url=settings.WEBHOOK_URL)
    logger.info("Webhook registered at %s", settings.WEBHOOK_URL)
    return f"set_webhook {settings.WEBHOOK_URL}"


@app.post("/webhook")
async def telegram_webhook(request: Request, background_tasks: BackgroundTasks) -> dict:
    """Acknowledge immediately; the work runs after the response is sent."""
    try:
        data = await request.json()
    except ValueError:
        logger.error("Webhook received a body that is not JSON")
        return {"ok": True}

    if not isinstance(data, dict):
        logger.error("Webhook received a non-object JSON body")
        return {"ok": True}

    logger.info("Webhook update %s received", data.get("update_id"))
    background_tasks.add_task(process_update, data)
    return {"ok": True}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("src.bot.webhook:app", host="0.0.0.0", port=port)
