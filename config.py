"""Central configuration for the Daily Report Sync service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import pytz
from dotenv import load_dotenv

from ingestion.models import ResultPolicy

# --- Environment ---
# Load .env if present (local development)
load_dotenv()

# --- Timezone ---
# Reports without a readable date header are filed under "today" here.
DEFAULT_TIMEZONE = "UTC"

# --- Telegram webhook ---
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_PORT = 10000

# --- Tables ---
DEFAULT_TRADES_TABLE = "trades"
DEFAULT_MESSAGES_TABLE = "telegram_messages"
DEFAULT_SUMMARY_TABLE = "daily_reports"

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def resolve_timezone(name: str) -> pytz.BaseTzInfo:
    """Look up a pytz timezone, raising ValueError for unknown names."""
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown timezone: {name!r}") from e


def resolve_policy(value: str) -> ResultPolicy:
    """Map 'strict' / 'martingale_aware' (any case, '-' allowed) to a policy."""
    normalized = value.strip().lower().replace("-", "_")
    try:
        return ResultPolicy(normalized)
    except ValueError as e:
        choices = ", ".join(p.value for p in ResultPolicy)
        raise ValueError(
            f"Unknown result policy {value!r} (expected one of: {choices})"
        ) from e


@dataclass(frozen=True)
class ServiceConfig:
    """Settings handed to the ingest service and message source at startup."""
    telegram_bot_token: str = ""
    supabase_url: str = ""
    supabase_key: str = ""
    timezone: pytz.BaseTzInfo = pytz.utc
    result_policy: ResultPolicy = ResultPolicy.STRICT
    trades_table: str = DEFAULT_TRADES_TABLE
    messages_table: str = DEFAULT_MESSAGES_TABLE
    summary_table: str = DEFAULT_SUMMARY_TABLE
    source: str = "telegram"
    webhook_url: Optional[str] = None
    listen_host: str = DEFAULT_LISTEN_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build a config from the process environment (and .env)."""
        return cls(
            telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_KEY", ""),
            timezone=resolve_timezone(os.getenv("REPORT_TIMEZONE", DEFAULT_TIMEZONE)),
            result_policy=resolve_policy(
                os.getenv("RESULT_POLICY", ResultPolicy.STRICT.value)
            ),
            trades_table=os.getenv("TRADES_TABLE", DEFAULT_TRADES_TABLE),
            messages_table=os.getenv("MESSAGES_TABLE", DEFAULT_MESSAGES_TABLE),
            summary_table=os.getenv("SUMMARY_TABLE", DEFAULT_SUMMARY_TABLE),
            source=os.getenv("MESSAGE_SOURCE", "telegram"),
            webhook_url=os.getenv("WEBHOOK_URL") or None,
            listen_host=os.getenv("LISTEN_HOST", DEFAULT_LISTEN_HOST),
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        )
