"""Data models for daily reports parsed from Telegram messages."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class Session(str, Enum):
    OVERNIGHT = "Overnight"
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"
    UNKNOWN = "Unknown"


class Action(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class TradeResult(str, Enum):
    WIN = "Win"
    LOSS = "Loss"


class ResultPolicy(str, Enum):
    """How a trade line's marker and martingale level map to a result."""
    STRICT = "strict"                       # marker alone decides
    MARTINGALE_AWARE = "martingale_aware"   # loss only at the last level


@dataclass
class TradeRecord:
    """A single trade line inside a session block."""
    session: Session
    time: str                 # "09:15", as written
    pair: str                 # "EUR/USD"
    action: Action
    martingale: int           # 0-3
    result: TradeResult
    message_line: str         # trimmed source line


@dataclass
class ReportSummary:
    """Self-reported figures from the report preamble."""
    accuracy: Optional[float] = None
    wins: Optional[int] = None
    losses: Optional[int] = None

    def is_empty(self) -> bool:
        return self.accuracy is None and self.wins is None and self.losses is None


@dataclass
class ParsedReport:
    """One parsed daily report message."""
    report_date: date
    trades: List[TradeRecord] = field(default_factory=list)
    reported_accuracy: Optional[float] = None
    reported_wins: Optional[int] = None
    reported_losses: Optional[int] = None

    @property
    def summary(self) -> ReportSummary:
        return ReportSummary(
            accuracy=self.reported_accuracy,
            wins=self.reported_wins,
            losses=self.reported_losses,
        )


@dataclass
class InboundMessage:
    """A text message delivered by the messaging channel."""
    message_id: int
    text: str
    username: str = "Unknown"
    chat_title: Optional[str] = None
    date: Optional[datetime] = None
