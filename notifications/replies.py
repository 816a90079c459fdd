"""Reply texts sent back to the sender of a daily report."""
from __future__ import annotations

from ingestion.models import ParsedReport, TradeResult

STATUS_TEXT = "✅ Daily Report Sync running"

# Shown when a report yields no trades
EXAMPLE_TRADE_LINE = "✅¹ 09:15 • EUR/USD • Buy"


def format_saved_reply(report: ParsedReport, inserted: int, skipped: int) -> str:
    """Confirmation after trades were written."""
    wins = sum(1 for t in report.trades if t.result == TradeResult.WIN)
    losses = len(report.trades) - wins

    message = (
        f"✅ <b>Daily Report - {report.report_date.isoformat()}</b>\n"
        f"\n"
        f"Trades saved: {inserted}\n"
        f"Wins: {wins} | Losses: {losses}"
    )
    if skipped:
        message += f"\nDuplicates skipped: {skipped}"
    if report.reported_accuracy is not None:
        message += f"\nReported accuracy: {report.reported_accuracy:g}%"
    return message


def format_empty_reply(report: ParsedReport) -> str:
    """Diagnostic for a report where no trade line could be read."""
    return (
        f"⚠️ <b>Daily Report - {report.report_date.isoformat()}</b>\n"
        f"\n"
        f"No trades could be extracted. Please check the format:\n"
        f"<code>{EXAMPLE_TRADE_LINE}</code>\n"
        f"under a session header such as <code>Morning Session</code>."
    )


def format_failure_reply(report: ParsedReport) -> str:
    return (
        f"❌ <b>Daily Report - {report.report_date.isoformat()}</b>\n"
        f"\n"
        f"Parsed {len(report.trades)} trades but saving failed. "
        f"Please resend the report later."
    )
