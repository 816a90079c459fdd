"""Receive report messages from Telegram via polling or a webhook."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from telegram import Message, Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from config import ServiceConfig
from ingestion.interface import InboundHandler, MessageSource
from ingestion.models import InboundMessage
from notifications.replies import STATUS_TEXT

logger = logging.getLogger(__name__)

MODES = ("polling", "webhook")


def to_inbound_message(message: Message) -> InboundMessage:
    """Convert a Telegram message into the channel-neutral model."""
    user = message.from_user
    username = user.username if user is not None and user.username else "Unknown"
    chat_title = message.chat.title if message.chat is not None else None
    return InboundMessage(
        message_id=message.message_id,
        text=(message.text or "").strip(),
        username=username,
        chat_title=chat_title,
        date=message.date,
    )


class TelegramMessageSource(MessageSource):
    """python-telegram-bot Application wired to an inbound handler."""

    def __init__(self, config: ServiceConfig, mode: str = "polling"):
        if mode not in MODES:
            raise ValueError(f"Unknown mode {mode!r} (expected one of: {', '.join(MODES)})")
        if not config.telegram_bot_token:
            raise ValueError("TELEGRAM_BOT_TOKEN must be configured")
        if mode == "webhook" and not config.webhook_url:
            raise ValueError("WEBHOOK_URL must be configured for webhook mode")
        self.config = config
        self.mode = mode
        self.handler: Optional[InboundHandler] = None

    async def on_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or not message.text:
            return

        inbound = to_inbound_message(message)
        # Storage calls are blocking; keep them off the event loop
        reply = await asyncio.to_thread(self.handler, inbound)
        if reply:
            await message.reply_text(reply, parse_mode=ParseMode.HTML)

    async def on_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if update.effective_message is not None:
            await update.effective_message.reply_text(STATUS_TEXT)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Error while handling update %s", update, exc_info=context.error)

    def build_application(self, handler: InboundHandler) -> Application:
        self.handler = handler
        app = Application.builder().token(self.config.telegram_bot_token).build()
        app.add_handler(CommandHandler("status", self.on_status))
        app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.on_text))
        app.add_error_handler(self.on_error)
        return app

    def run(self, handler: InboundHandler) -> None:
        app = self.build_application(handler)
        if self.mode == "webhook":
            url_path = f"telegram/{self.config.telegram_bot_token}"
            logger.info("Starting webhook on %s:%d", self.config.listen_host, self.config.port)
            app.run_webhook(
                listen=self.config.listen_host,
                port=self.config.port,
                url_path=url_path,
                webhook_url=f"{self.config.webhook_url.rstrip('/')}/{url_path}",
                allowed_updates=Update.ALL_TYPES,
            )
        else:
            logger.info("Starting long polling")
            app.run_polling(allowed_updates=Update.ALL_TYPES)
