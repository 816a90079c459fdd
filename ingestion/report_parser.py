"""Parse "Daily Report" chat messages into structured TradeRecord lists.

A report looks roughly like this::

    📒 DAILY REPORT
    🗓 Monday, January 1st, 2024
    Accuracy: 87.5%
    Wins 7️⃣ x 1️⃣ Losses

    🌅 Morning Session
    ✅¹ 09:15 • 🇪🇺EUR/USD🇺🇸OTC • Buy
    ❌³ 10:00 • GBP/JPY • Sell

Every function here is pure and never raises on malformed text; missing
pieces come back as None, an empty list or a default date.
"""
from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple, Union

import pytz

from ingestion.models import (
    Action,
    ParsedReport,
    ReportSummary,
    ResultPolicy,
    Session,
    TradeRecord,
    TradeResult,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TimezoneLike = Union[str, pytz.BaseTzInfo]


# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# "📒 DAILY REPORT", including the "DIALY" typo seen in the channel
REPORT_MARKER_RE = re.compile(
    r"(?:[\U0001F4D2-\U0001F4D4]\ufe0f?\s*)?D(?:AI|IA)LY\s+REPORT",
    re.IGNORECASE,
)

# 🗓 / 📅 / 📆 at the start of the date header line
CALENDAR_GLYPHS = ("\U0001F5D3", "\U0001F4C5", "\U0001F4C6")

ORDINAL_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)

# Tried in order, first success wins (ordinal suffixes are removed first)
DATE_FORMATS = [
    "%A, %B %d, %Y",    # Monday, January 1, 2024
    "%A, %b %d, %Y",    # Monday, Jan 1, 2024
    "%A %B %d, %Y",     # Monday January 1, 2024
    "%B %d, %Y",        # January 1, 2024
    "%b %d, %Y",        # Jan 1, 2024
    "%d %B %Y",         # 1 January 2024
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d.%m.%Y",
]

# Summary lines: "Accuracy: 87.5%" and "Wins 1️⃣2️⃣ x 3️⃣ Losses"
ACCURACY_RE = re.compile(r"Accuracy\s*:\s*([0-9]+(?:[.,][0-9]+)?)\s*%", re.IGNORECASE)
_COUNT = r"[0-9\ufe0f\u20e3\U0001F51F\s]+?"
WINS_LOSSES_RE = re.compile(
    rf"Wins?\s*:?\s*(?P<wins>{_COUNT})\s*[x\u00d7]\s*(?P<losses>{_COUNT})\s*Loss(?:es)?",
    re.IGNORECASE,
)
KEYCAP_TEN = "\U0001F51F"   # 🔟

# "🌅 Morning Session", "🌙 Late Night Session (20:00-00:00)"; the name must hold a keyword
SESSION_HEADER_RE = re.compile(
    r"^[^\w]*(?P<name>(?:[A-Za-z\-]+\s+){0,2}?(?:overnight|morning|afternoon|night))\s+Session\b",
    re.IGNORECASE,
)

# Checked in order: "overnight" must win over "night"
SESSION_KEYWORDS = [
    ("overnight", Session.OVERNIGHT),
    ("morning", Session.MORNING),
    ("afternoon", Session.AFTERNOON),
    ("night", Session.NIGHT),
]

WIN_MARKERS = "\u2705\u2714\u2611"      # ✅ ✔ ☑
LOSS_MARKERS = "\u274c\u2716"           # ❌ ✖

SUPERSCRIPT_LEVELS = {"\u2070": 0, "\u00b9": 1, "\u00b2": 2, "\u00b3": 3}   # ⁰ ¹ ² ³
MAX_MARTINGALE_LEVEL = 3

# "✅¹ 09:15 • 🇪🇺EUR/USD🇺🇸OTC • Buy"
TRADE_LINE_RE = re.compile(
    rf"^(?P<marker>[{WIN_MARKERS}{LOSS_MARKERS}])\ufe0f?"
    r"(?:\s*(?P<sup>[\u2070\u00b9\u00b2\u00b3])|(?P<digit>[0-3])(?=\s))?"
    r"\s*(?P<time>[0-9]{2}:[0-9]{2})\s*\u2022\s*"
    r"(?P<pair>[^\u2022]+?)\s*\u2022\s*"
    r"(?P<action>buy|sell)\b",
    re.IGNORECASE,
)

# Pair noise: "OTC" tags (optionally bracketed or hyphenated), flags, U+FE0F, spaces
OTC_RE = re.compile(r"[\s\-_]*[(\[]?\s*otc\s*[)\]]?", re.IGNORECASE)
PAIR_NOISE_RE = re.compile(r"[\U0001F1E6-\U0001F1FF\ufe0f\s]")
PAIR_RE = re.compile(r"[A-Za-z]{3}/[A-Za-z]{3}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _as_timezone(tz: TimezoneLike) -> pytz.BaseTzInfo:
    if isinstance(tz, str):
        try:
            return pytz.timezone(tz)
        except pytz.UnknownTimeZoneError:
            logger.warning("Unknown reference timezone %r, using UTC", tz)
            return pytz.utc
    return tz


def _today(tz: TimezoneLike, clock: Optional[Clock] = None) -> date:
    """Current calendar date in the reference timezone."""
    now = clock() if clock is not None else datetime.now(pytz.utc)
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(_as_timezone(tz)).date()


def _keycaps_to_int(raw: str) -> Optional[int]:
    """Convert '1️⃣2️⃣' (or plain '12') to 12."""
    digits = re.sub(r"[^0-9]", "", raw.replace(KEYCAP_TEN, "10"))
    return int(digits) if digits else None


def _normalize_pair(raw: str) -> Optional[str]:
    """Strip flag emoji and OTC tags: '🇪🇺EUR/USD🇺🇸OTC' -> 'EUR/USD'."""
    cleaned = PAIR_NOISE_RE.sub("", OTC_RE.sub("", raw))
    if not PAIR_RE.fullmatch(cleaned):
        return None
    return cleaned.upper()


def resolve_result(is_loss_marker: bool, martingale: int, policy: ResultPolicy) -> TradeResult:
    """Map a line's marker and martingale level to Win/Loss under a policy."""
    if not is_loss_marker:
        return TradeResult.WIN
    if policy == ResultPolicy.MARTINGALE_AWARE and martingale < MAX_MARTINGALE_LEVEL:
        return TradeResult.WIN
    return TradeResult.LOSS


# ---------------------------------------------------------------------------
# Report pieces
# ---------------------------------------------------------------------------

def is_daily_report(text: Optional[str]) -> bool:
    """True if the message carries the DAILY REPORT marker."""
    if not isinstance(text, str) or not text:
        return False
    return REPORT_MARKER_RE.search(text) is not None


def extract_report_date(
    text: str,
    reference_timezone: TimezoneLike = pytz.utc,
    clock: Optional[Clock] = None,
) -> date:
    """Read the date from the calendar header line, or default to today."""
    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped.startswith(CALENDAR_GLYPHS):
            continue

        raw = stripped[1:].lstrip("\ufe0f").split("#", 1)[0]
        raw = " ".join(ORDINAL_RE.sub(r"\1", raw).split())
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                continue

        logger.warning("Unrecognised report date %r, defaulting to today", raw)
        break

    return _today(reference_timezone, clock)


def extract_summary(text: str) -> ReportSummary:
    """Pull the self-reported accuracy and win/loss counts, if present."""
    summary = ReportSummary()
    text = text or ""

    acc_match = ACCURACY_RE.search(text)
    if acc_match:
        summary.accuracy = float(acc_match.group(1).replace(",", "."))

    wl_match = WINS_LOSSES_RE.search(text)
    if wl_match:
        summary.wins = _keycaps_to_int(wl_match.group("wins"))
        summary.losses = _keycaps_to_int(wl_match.group("losses"))

    return summary


def normalize_session(name: Optional[str]) -> Session:
    """Map a header name to a Session by case-insensitive substring."""
    lowered = (name or "").lower()
    for keyword, session in SESSION_KEYWORDS:
        if keyword in lowered:
            return session
    return Session.UNKNOWN


def segment_sessions(text: str) -> List[Tuple[Session, List[str]]]:
    """Split the message into (session, lines) blocks.

    Lines before the first session header are the date/summary preamble
    and are dropped.
    """
    blocks: List[Tuple[Session, List[str]]] = []
    current: Optional[List[str]] = None

    for line in (text or "").splitlines():
        header = SESSION_HEADER_RE.match(line.strip())
        if header:
            current = []
            blocks.append((normalize_session(header.group("name")), current))
        elif current is not None:
            current.append(line)

    return blocks


def extract_trade(
    line: str,
    session: Session = Session.UNKNOWN,
    policy: ResultPolicy = ResultPolicy.STRICT,
) -> Optional[TradeRecord]:
    """Parse one trade line, returning None if it does not have the trade shape."""
    stripped = line.strip()
    m = TRADE_LINE_RE.match(stripped)
    pair = _normalize_pair(m.group("pair")) if m else None
    if m is None or pair is None:
        if stripped and stripped[0] in WIN_MARKERS + LOSS_MARKERS:
            logger.warning("Skipping malformed trade line: %r", stripped)
        else:
            logger.debug("Skipping non-trade line: %r", stripped)
        return None

    if m.group("sup"):
        martingale = SUPERSCRIPT_LEVELS[m.group("sup")]
    elif m.group("digit"):
        martingale = int(m.group("digit"))
    else:
        martingale = 0

    is_loss = m.group("marker") in LOSS_MARKERS
    return TradeRecord(
        session=session,
        time=m.group("time"),
        pair=pair,
        action=Action(m.group("action").capitalize()),
        martingale=martingale,
        result=resolve_result(is_loss, martingale, ResultPolicy(policy)),
        message_line=stripped,
    )


def parse_daily_report(
    text: Optional[str],
    reference_timezone: TimezoneLike = pytz.utc,
    policy: ResultPolicy = ResultPolicy.STRICT,
    clock: Optional[Clock] = None,
) -> Optional[ParsedReport]:
    """Parse a full message. None means "not a daily report"."""
    if not is_daily_report(text):
        return None

    report_date = extract_report_date(text, reference_timezone, clock)
    summary = extract_summary(text)

    trades: List[TradeRecord] = []
    for session, lines in segment_sessions(text):
        for line in lines:
            if not line.strip():
                continue
            trade = extract_trade(line, session, policy)
            if trade is not None:
                trades.append(trade)

    if not trades:
        logger.warning("Daily report for %s has no extractable trades", report_date)
    else:
        logger.info("Parsed %d trades for %s", len(trades), report_date)

    return ParsedReport(
        report_date=report_date,
        trades=trades,
        reported_accuracy=summary.accuracy,
        reported_wins=summary.wins,
        reported_losses=summary.losses,
    )


class ReportParser:
    """parse_daily_report bound to a reference timezone and result policy."""

    def __init__(
        self,
        reference_timezone: TimezoneLike = pytz.utc,
        policy: ResultPolicy = ResultPolicy.STRICT,
        clock: Optional[Clock] = None,
    ):
        self.reference_timezone = _as_timezone(reference_timezone)
        self.policy = ResultPolicy(policy)
        self.clock = clock

    def parse(self, text: Optional[str]) -> Optional[ParsedReport]:
        return parse_daily_report(text, self.reference_timezone, self.policy, self.clock)
