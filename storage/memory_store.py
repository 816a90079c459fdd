"""In-process record store for dry runs and tests."""
from __future__ import annotations

import threading
from datetime import date
from typing import Dict, List, Optional, Tuple

from storage.interface import RecordStore
from storage.records import trade_key


class InMemoryRecordStore(RecordStore):
    """Same semantics as the Supabase store, kept in dicts behind a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self.messages: List[dict] = []
        self.trades: Dict[Tuple[str, str, str, str], dict] = {}
        self.summaries: Dict[str, dict] = {}

    def insert_message(self, row: dict) -> None:
        with self._lock:
            self.messages.append(dict(row))

    def insert_trades(self, rows: List[dict]) -> Tuple[int, int]:
        inserted = 0
        with self._lock:
            for row in rows:
                key = trade_key(row)
                if key in self.trades:
                    continue
                self.trades[key] = dict(row)
                inserted += 1
        return inserted, len(rows) - inserted

    def upsert_summary(self, row: dict) -> None:
        with self._lock:
            self.summaries[str(row["report_date"])] = dict(row)

    def find_trade(self, report_date: date, time: str, pair: str, session: str) -> Optional[dict]:
        with self._lock:
            return self.trades.get((report_date.isoformat(), time, pair, session))
