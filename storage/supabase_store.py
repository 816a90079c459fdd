"""Supabase (PostgREST) backed record store."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from config import ServiceConfig
from storage.interface import RecordStore, StorageError
from storage.records import TRADE_KEY_COLUMNS

logger = logging.getLogger(__name__)

BATCH_SIZE = 50

# PostgREST rejections and transport failures (connect, timeout, ...)
STORAGE_ERRORS = (APIError, httpx.HTTPError)


class SupabaseRecordStore(RecordStore):
    """Writes audit, trade and summary rows through the Supabase REST API.

    Trade inserts are a single upsert with ON CONFLICT DO NOTHING on the
    natural key, so concurrent deliveries of the same report cannot create
    duplicates. The unique constraint lives in schema.sql.
    """

    def __init__(
        self,
        url: str,
        key: str,
        trades_table: str = "trades",
        messages_table: str = "telegram_messages",
        summary_table: str = "daily_reports",
        client: Optional[Client] = None,
    ):
        if client is None:
            if not url or not key:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be configured")
            client = create_client(url, key)
            logger.info("Connected to Supabase at %s", url)
        self.client = client
        self.trades_table = trades_table
        self.messages_table = messages_table
        self.summary_table = summary_table

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "SupabaseRecordStore":
        return cls(
            config.supabase_url,
            config.supabase_key,
            trades_table=config.trades_table,
            messages_table=config.messages_table,
            summary_table=config.summary_table,
        )

    def insert_message(self, row: dict) -> None:
        try:
            self.client.table(self.messages_table).insert(row).execute()
        except STORAGE_ERRORS as e:
            raise StorageError(f"Message insert failed: {e}") from e

    def insert_trades(self, rows: List[dict]) -> Tuple[int, int]:
        inserted = 0
        on_conflict = ",".join(TRADE_KEY_COLUMNS)
        for i in range(0, len(rows), BATCH_SIZE):
            batch = rows[i:i + BATCH_SIZE]
            try:
                resp = (
                    self.client.table(self.trades_table)
                    .upsert(batch, on_conflict=on_conflict, ignore_duplicates=True)
                    .execute()
                )
            except STORAGE_ERRORS as e:
                raise StorageError(f"Trade upsert failed: {e}") from e
            # Ignored duplicates are not echoed back
            inserted += len(resp.data or [])

        skipped = len(rows) - inserted
        logger.info("Trades: %d inserted, %d duplicates skipped", inserted, skipped)
        return inserted, skipped

    def upsert_summary(self, row: dict) -> None:
        try:
            self.client.table(self.summary_table).upsert(
                row, on_conflict="report_date"
            ).execute()
        except STORAGE_ERRORS as e:
            raise StorageError(f"Summary upsert failed: {e}") from e

    def find_trade(self, report_date: date, time: str, pair: str, session: str) -> Optional[dict]:
        try:
            resp = (
                self.client.table(self.trades_table)
                .select("*")
                .eq("report_date", report_date.isoformat())
                .eq("time", time)
                .eq("pair", pair)
                .eq("session", session)
                .limit(1)
                .execute()
            )
        except STORAGE_ERRORS as e:
            raise StorageError(f"Trade lookup failed: {e}") from e
        return resp.data[0] if resp.data else None
