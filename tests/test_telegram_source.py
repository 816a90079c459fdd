"""
Telegram Source Tests

Message conversion and handler wiring, with Telegram objects stubbed.
"""

import asyncio
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from telegram.constants import ParseMode

from config import ServiceConfig
from ingestion.telegram_source import TelegramMessageSource, to_inbound_message

TOKEN = "123456:TEST-token"


def make_message(text, username="alice", title="Signals"):
    return SimpleNamespace(
        message_id=7,
        text=text,
        from_user=SimpleNamespace(username=username),
        chat=SimpleNamespace(title=title),
        date=datetime(2024, 1, 1, 12, 0),
        reply_text=AsyncMock(),
    )


@pytest.fixture
def source():
    return TelegramMessageSource(ServiceConfig(telegram_bot_token=TOKEN))


class TestToInboundMessage:

    def test_fields_are_copied_and_text_trimmed(self):
        inbound = to_inbound_message(make_message("  DAILY REPORT \n"))
        assert inbound.message_id == 7
        assert inbound.text == "DAILY REPORT"
        assert inbound.username == "alice"
        assert inbound.chat_title == "Signals"

    def test_missing_username_is_unknown(self):
        assert to_inbound_message(make_message("hi", username=None)).username == "Unknown"
        msg = make_message("hi")
        msg.from_user = None
        assert to_inbound_message(msg).username == "Unknown"


class TestTelegramMessageSource:

    def test_config_validation(self):
        with pytest.raises(ValueError):
            TelegramMessageSource(ServiceConfig())
        with pytest.raises(ValueError):
            TelegramMessageSource(ServiceConfig(telegram_bot_token=TOKEN), mode="webhook")
        with pytest.raises(ValueError):
            TelegramMessageSource(ServiceConfig(telegram_bot_token=TOKEN), mode="carrier-pigeon")

    def test_reply_is_sent_as_html(self, source):
        received = []
        source.handler = lambda m: received.append(m) or "<b>ok</b>"
        message = make_message("DAILY REPORT")

        asyncio.run(source.on_text(SimpleNamespace(effective_message=message), None))

        assert received[0].text == "DAILY REPORT"
        message.reply_text.assert_awaited_once_with("<b>ok</b>", parse_mode=ParseMode.HTML)

    def test_no_reply_when_handler_returns_none(self, source):
        source.handler = lambda m: None
        message = make_message("gm")
        asyncio.run(source.on_text(SimpleNamespace(effective_message=message), None))
        message.reply_text.assert_not_awaited()

    def test_status_command(self, source):
        message = make_message("/status")
        asyncio.run(source.on_status(SimpleNamespace(effective_message=message), None))
        assert "running" in message.reply_text.await_args.args[0]

    def test_build_application_registers_handlers(self, source):
        app = source.build_application(lambda m: None)
        assert len(app.handlers[0]) == 2
