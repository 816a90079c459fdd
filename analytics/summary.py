"""Tabular views of a parsed daily report for the CLI."""
from __future__ import annotations

import pandas as pd

from ingestion.models import ParsedReport, Session

SESSION_ORDER = [s.value for s in Session]


def trades_to_dataframe(report: ParsedReport) -> pd.DataFrame:
    """Convert the report's TradeRecords to a flat DataFrame."""
    rows = []
    for t in report.trades:
        rows.append({
            "report_date": report.report_date,
            "session": t.session.value,
            "time": t.time,
            "pair": t.pair,
            "action": t.action.value,
            "martingale": t.martingale,
            "result": t.result.value,
        })
    return pd.DataFrame(rows)


def summary_by_session(df: pd.DataFrame) -> pd.DataFrame:
    """Trade counts per session.

    Columns: session, trades, wins, losses, win_rate
    """
    if df.empty:
        return pd.DataFrame()

    trades = df.groupby("session").size().rename("trades")
    wins = df[df["result"] == "Win"].groupby("session").size().rename("wins")
    losses = df[df["result"] == "Loss"].groupby("session").size().rename("losses")

    summary = pd.DataFrame({
        "trades": trades,
        "wins": wins,
        "losses": losses,
    }).fillna(0).astype(int)

    summary["win_rate"] = summary["wins"] / summary["trades"]

    summary = summary.reset_index()
    summary["session"] = pd.Categorical(summary["session"], SESSION_ORDER, ordered=True)
    return summary.sort_values("session").reset_index(drop=True)


def overall_stats(report: ParsedReport) -> dict:
    """Counted figures next to the self-reported ones."""
    df = trades_to_dataframe(report)
    total_wins = int((df["result"] == "Win").sum()) if not df.empty else 0
    total_losses = int((df["result"] == "Loss").sum()) if not df.empty else 0

    return {
        "report_date": report.report_date.isoformat(),
        "total_trades": len(df),
        "total_wins": total_wins,
        "total_losses": total_losses,
        "win_rate": total_wins / max(total_wins + total_losses, 1),
        "reported_accuracy": report.reported_accuracy,
        "reported_wins": report.reported_wins,
        "reported_losses": report.reported_losses,
        "unique_pairs": df["pair"].nunique() if not df.empty else 0,
    }
