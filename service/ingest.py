"""Ingest pipeline: audit, parse, store and reply for each inbound message."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import ServiceConfig
from ingestion.models import InboundMessage, ParsedReport
from ingestion.report_parser import Clock, ReportParser
from notifications.replies import (
    format_empty_reply,
    format_failure_reply,
    format_saved_reply,
)
from storage.interface import RecordStore, StorageError
from storage.records import message_row, summary_row, trade_row

logger = logging.getLogger(__name__)


class IngestStatus(str, Enum):
    NOT_REPORT = "NOT_REPORT"
    EMPTY = "EMPTY"           # report detected, no trade lines read
    SAVED = "SAVED"
    FAILED = "FAILED"         # storage error while saving trades


@dataclass
class IngestOutcome:
    status: IngestStatus
    report: Optional[ParsedReport] = None
    inserted: int = 0
    skipped: int = 0
    reply: Optional[str] = None


class ReportIngestService:
    """Handles one inbound message at a time; safe to share across handlers."""

    def __init__(self, config: ServiceConfig, store: RecordStore, clock: Optional[Clock] = None):
        self.config = config
        self.store = store
        self.parser = ReportParser(config.timezone, config.result_policy, clock)

    def handle(self, message: InboundMessage) -> Optional[str]:
        """InboundHandler entry point: process and return the reply text."""
        return self.handle_message(message).reply

    def handle_message(self, message: InboundMessage) -> IngestOutcome:
        logger.info(
            "Message %s from @%s in %s",
            message.message_id, message.username, message.chat_title or "private chat",
        )

        # 1. Audit row, independent of report detection
        try:
            self.store.insert_message(message_row(message, self.config.source))
        except StorageError:
            logger.exception("Failed to store raw message %s", message.message_id)

        # 2. Parse
        report = self.parser.parse(message.text)
        if report is None:
            return IngestOutcome(status=IngestStatus.NOT_REPORT)

        if not report.trades:
            logger.warning(
                "Report %s from @%s had no extractable trades",
                report.report_date, message.username,
            )
            return IngestOutcome(
                status=IngestStatus.EMPTY,
                report=report,
                reply=format_empty_reply(report),
            )

        # 3. Store trades and the summary row
        rows = [
            trade_row(report.report_date, t, self.config.source, message.username)
            for t in report.trades
        ]
        try:
            inserted, skipped = self.store.insert_trades(rows)
            if not report.summary.is_empty():
                self.store.upsert_summary(summary_row(report))
        except StorageError:
            logger.exception("Failed to store report %s", report.report_date)
            return IngestOutcome(
                status=IngestStatus.FAILED,
                report=report,
                reply=format_failure_reply(report),
            )

        logger.info(
            "Report %s: %d trades saved, %d duplicates skipped",
            report.report_date, inserted, skipped,
        )
        return IngestOutcome(
            status=IngestStatus.SAVED,
            report=report,
            inserted=inserted,
            skipped=skipped,
            reply=format_saved_reply(report, inserted, skipped),
        )
