"""Entry point: parse a report file or run the Telegram receiver."""
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from config import LOG_LEVEL, ServiceConfig, resolve_policy, resolve_timezone
from ingestion.models import ResultPolicy
from ingestion.report_parser import parse_daily_report
from analytics.summary import (
    trades_to_dataframe,
    summary_by_session,
    overall_stats,
)


def run_parse(path: Path, config: ServiceConfig):
    """Parse one report text file and print what would be stored."""
    text = path.read_text(encoding="utf-8")
    report = parse_daily_report(text, config.timezone, config.result_policy)
    if report is None:
        print("Not a daily report.")
        return None

    # 1. Header
    stats = overall_stats(report)
    print(f"\n=== DAILY REPORT {stats['report_date']} ===")
    print(f"  Trades:   {stats['total_trades']}")
    print(f"  Wins:     {stats['total_wins']}")
    print(f"  Losses:   {stats['total_losses']}")
    print(f"  Win Rate: {stats['win_rate']:.1%}")
    print(f"  Pairs:    {stats['unique_pairs']}")
    if report.reported_accuracy is not None:
        print(f"  Reported accuracy: {report.reported_accuracy:g}%")
    if report.reported_wins is not None or report.reported_losses is not None:
        print(f"  Reported: {report.reported_wins} W / {report.reported_losses} L")

    if not report.trades:
        print("\nNo trades could be extracted. Check the format.")
        return report

    # 2. Trades
    df = trades_to_dataframe(report)
    print("\n=== TRADES ===")
    print(df.drop(columns=["report_date"]).to_string(index=False))

    # 3. Sessions
    print("\n=== BY SESSION ===")
    print(summary_by_session(df).to_string(index=False))

    return report


def run_serve(config: ServiceConfig, mode: str, dry_run: bool = False):
    """Start the Telegram receiver writing to Supabase (or memory)."""
    from ingestion.telegram_source import TelegramMessageSource
    from service.ingest import ReportIngestService

    if dry_run:
        from storage.memory_store import InMemoryRecordStore
        store = InMemoryRecordStore()
    else:
        from storage.supabase_store import SupabaseRecordStore
        store = SupabaseRecordStore.from_config(config)

    service = ReportIngestService(config, store)
    source = TelegramMessageSource(config, mode=mode)
    print(f"Daily Report Sync running ({mode}, policy={config.result_policy.value})")
    source.run(service.handle)


def main():
    parser = argparse.ArgumentParser(description="Daily Report Sync CLI")
    parser.add_argument(
        "--tz",
        type=str,
        default=None,
        help="Reference timezone for undated reports. Default: REPORT_TIMEZONE.",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ResultPolicy],
        default=None,
        help="Win/Loss policy. Default: RESULT_POLICY.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse", help="Parse a report text file.")
    parse_cmd.add_argument("file", type=Path, help="UTF-8 text file with one report.")

    serve_cmd = sub.add_parser("serve", help="Run the Telegram receiver.")
    serve_cmd.add_argument(
        "--mode",
        choices=["polling", "webhook"],
        default="polling",
        help="Telegram delivery mode. Default: polling.",
    )
    serve_cmd.add_argument(
        "--dry-run",
        action="store_true",
        help="Keep records in memory instead of Supabase.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = ServiceConfig.from_env()
    overrides = {}
    if args.tz:
        overrides["timezone"] = resolve_timezone(args.tz)
    if args.policy:
        overrides["result_policy"] = resolve_policy(args.policy)
    if overrides:
        config = replace(config, **overrides)

    if args.command == "parse":
        run_parse(args.file, config)
    else:
        run_serve(config, args.mode, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
