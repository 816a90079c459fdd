"""Abstract interface for record stores.

Implement this to swap between Supabase and the in-memory store used for
dry runs and tests.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple


class StorageError(Exception):
    """A write or read against the record store failed."""


class RecordStore(ABC):
    """Base class for all record store backends."""

    @abstractmethod
    def insert_message(self, row: dict) -> None:
        """Append a raw message audit row."""
        ...

    @abstractmethod
    def insert_trades(self, rows: List[dict]) -> Tuple[int, int]:
        """Insert trade rows, skipping natural-key duplicates.

        Returns (inserted, skipped).
        """
        ...

    @abstractmethod
    def upsert_summary(self, row: dict) -> None:
        """Create or replace the summary row for row['report_date']."""
        ...

    @abstractmethod
    def find_trade(self, report_date: date, time: str, pair: str, session: str) -> Optional[dict]:
        """Return the stored trade row for a natural key, if any."""
        ...
