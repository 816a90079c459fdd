"""Row builders: turn parsed reports and inbound messages into table rows."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Tuple

import pytz

from ingestion.models import InboundMessage, ParsedReport, TradeRecord

# Columns forming the natural key of the trades table
TRADE_KEY_COLUMNS = ("report_date", "time", "pair", "session")


def _utc_now() -> str:
    return datetime.now(pytz.utc).isoformat()


def message_row(message: InboundMessage, source: str, created_at: Optional[str] = None) -> dict:
    """Audit row written for every inbound text message."""
    return {
        "message_id": message.message_id,
        "username": message.username,
        "source": source,
        "message": message.text,
        "created_at": created_at or _utc_now(),
    }


def trade_row(report_date: date, trade: TradeRecord, source: str, username: str) -> dict:
    return {
        "report_date": report_date.isoformat(),
        "session": trade.session.value,
        "time": trade.time,
        "pair": trade.pair,
        "action": trade.action.value,
        "martingale": trade.martingale,
        "result": trade.result.value,
        "message": trade.message_line,
        "source": source,
        "username": username,
    }


def summary_row(report: ParsedReport, updated_at: Optional[str] = None) -> dict:
    return {
        "report_date": report.report_date.isoformat(),
        "reported_accuracy": report.reported_accuracy,
        "reported_wins": report.reported_wins,
        "reported_losses": report.reported_losses,
        "updated_at": updated_at or _utc_now(),
    }


def trade_key(row: dict) -> Tuple[str, str, str, str]:
    """(report_date, time, pair, session) of a trade row."""
    return tuple(str(row[col]) for col in TRADE_KEY_COLUMNS)
