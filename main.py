#!/usr/bin/env python3
"""
Signal Desk CLI: list | closed | tags | summary | add | close
Usage:
  python main.py list [--query Q] [--tag T] [--sort newest]
  python main.py closed [--query Q] [--sort profit_desc]
  python main.py tags
  python main.py summary [--unit usd|pct]
  python main.py add --ticker AAPL --price 180 --amount 10 [--notes "growth, tech"]
  python main.py close --ticker AAPL [--close-price 195] [--date 2024-05-01] [--dry-run]
"""

from __future__ import annotations
import argparse
import locale
import logging
import sys
from pathlib import Path

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from signal_desk.core.config import load_config, Config
from signal_desk.core.logger import setup_logging
from signal_desk.core.session import Session
from signal_desk.core.types import Collection, DisplayUnit, Signal
from signal_desk.persistence.gateway import load_store, write_collection
from signal_desk.store.record_store import RecordStore
from signal_desk.views.filters import (
    CLOSED_SORT_KEYS,
    SIGNAL_SORT_KEYS,
    filter_records,
    sort_closed_trades,
    sort_signals,
)
from signal_desk.views.tags import extract_tags, note_tags
from signal_desk.lifecycle.close import close_signal
from signal_desk.analytics.rollups import confidence_rollup, time_rollup
from signal_desk.analytics.metrics import compute_summary


def _money(v) -> str:
    return "-" if v is None else f"{v:.2f}"


def _save(config: Config, store: RecordStore, which: Collection) -> bool:
    path = config.signals_path if which == Collection.SIGNALS else config.closed_trades_path
    result = write_collection(config.resolve(path), store.collection(which))
    if not result.ok:
        print(f"Error: {result.reason}")
    return result.ok


def run_list(config: Config, store: RecordStore, args) -> int:
    rows = sort_signals(filter_records(store.signals, args.query, args.tag), args.sort)
    if not rows:
        print("No signals found")
        return 0
    for s in rows:
        created = s.created_at.strftime("%Y-%m-%d") if s.created_at else "-"
        print(f"{s.ticker:8} | {s.action:4} | {s.buy_amount or '':>6} @ {_money(s.buy_price):>9} | "
              f"conf {s.confidence_score if s.confidence_score is not None else '-':>5} | {created} | "
              f"{', '.join(note_tags(s.notes))}")
    return 0


def run_closed(config: Config, store: RecordStore, args) -> int:
    rows = sort_closed_trades(filter_records(store.closed_trades, args.query, args.tag), args.sort)
    if not rows:
        print("No closed trades")
        return 0
    for t in rows:
        closed = t.closed_at.strftime("%Y-%m-%d") if t.closed_at else "-"
        print(f"{t.ticker:8} | {_money(t.buy_price):>9} -> {_money(t.close_price):>9} | "
              f"profit {_money(t.realized_profit):>10} | {closed}")
    return 0


def run_tags(config: Config, store: RecordStore, args) -> int:
    for tag in extract_tags(store.signals):
        print(tag)
    return 0


def run_summary(config: Config, store: RecordStore, args) -> int:
    session = Session.from_config(config)
    unit = DisplayUnit(args.unit) if args.unit else session.closed_view
    trades = store.closed_trades
    print(f"\n--- P&L by window ({unit.value}) ---")
    for b in time_rollup(trades):
        print(f"{b.label:>4}: {b.format_value(unit):>14}  ({b.count} trades)")
    print(f"\n--- P&L by confidence ({unit.value}) ---")
    for b in confidence_rollup(trades):
        print(f"{b.label:>6}: {b.format_value(unit):>14}  ({b.count} trades)")
    m = compute_summary(trades)
    print("\n--- Closed trades ---")
    print(f"Total trades: {m.total_trades} (wins: {m.winning_trades}, losses: {m.losing_trades})")
    print(f"Total profit: {m.total_profit:.2f} USD")
    print(f"Return on cost: {'-' if m.return_pct is None else f'{m.return_pct:.2f}%'}")
    print(f"Win rate: {m.win_rate*100:.1f}%")
    print(f"Profit factor: {m.profit_factor:.2f}")
    print(f"Expectancy: {m.expectancy:.2f} USD/trade")
    return 0


def run_add(config: Config, store: RecordStore, args) -> int:
    result = store.add_signal(Signal(
        ticker=args.ticker or "",
        name=args.name,
        exchange=args.exchange,
        buy_price=args.price,
        buy_amount=args.amount,
        confidence_score=args.confidence,
        action=args.action,
        notes=args.notes,
    ))
    if not result.ok:
        print(f"Error: {result.reason}")
        return 1
    if not _save(config, store, Collection.SIGNALS):
        return 1
    print(f"Added {result.record.ticker}")
    return 0


def run_close(config: Config, store: RecordStore, args) -> int:
    ticker = (args.ticker or "").strip().upper()
    signal = next((s for s in store.signals if s.ticker == ticker), None)
    if signal is None:
        print(f"Error: no open signal for {ticker or '(empty ticker)'}")
        return 1
    dry_run = args.dry_run or config.dry_run
    result = close_signal(store, signal.id, args.price_text, args.date, dry_run=dry_run)
    if not result.ok:
        print(f"Error: {result.reason}")
        return 1
    if not _save(config, store, Collection.CLOSED):
        return 1
    if not dry_run and not _save(config, store, Collection.SIGNALS):
        return 1
    print(f"Closed {result.record.ticker} @ {_money(result.record.close_price)} profit={_money(result.record.profit)}")
    return 0


COMMANDS = {
    "list": run_list,
    "closed": run_closed,
    "tags": run_tags,
    "summary": run_summary,
    "add": run_add,
    "close": run_close,
}


def main() -> int:
    parser = argparse.ArgumentParser(description="Signal Desk CLI")
    parser.add_argument("mode", choices=sorted(COMMANDS), help="Command to run")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--query", default="", help="Text filter on ticker, name, notes")
    parser.add_argument("--tag", default="", help="Exact tag filter")
    parser.add_argument("--sort", default=None, choices=SIGNAL_SORT_KEYS + CLOSED_SORT_KEYS,
                        help="Sort key; list defaults to newest, closed to profit_desc")
    parser.add_argument("--unit", choices=[u.value for u in DisplayUnit], default=None)
    parser.add_argument("--ticker", default=None)
    parser.add_argument("--name", default=None)
    parser.add_argument("--exchange", default=None)
    parser.add_argument("--price", type=float, default=None, help="Buy price (add)")
    parser.add_argument("--amount", type=float, default=None, help="Share count (add)")
    parser.add_argument("--confidence", type=float, default=None)
    parser.add_argument("--action", default="buy")
    parser.add_argument("--notes", default=None)
    parser.add_argument("--close-price", dest="price_text", default=None, help="Close price (close)")
    parser.add_argument("--date", default=None, help="Close date YYYY-MM-DD (close)")
    parser.add_argument("--dry-run", action="store_true", help="Keep the signal open after closing")
    args = parser.parse_args()

    if args.mode == "list":
        args.sort = args.sort or "newest"
        if args.sort not in SIGNAL_SORT_KEYS:
            parser.error(f"--sort {args.sort} is not valid for list; choose from {', '.join(SIGNAL_SORT_KEYS)}")
    elif args.mode == "closed":
        args.sort = args.sort or "profit_desc"
        if args.sort not in CLOSED_SORT_KEYS:
            parser.error(f"--sort {args.sort} is not valid for closed; choose from {', '.join(CLOSED_SORT_KEYS)}")

    config = load_config(args.config, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logging.getLogger("signal_desk").warning("System locale unavailable; name sorts use codepoint order")
    store = load_store(config)
    return COMMANDS[args.mode](config, store, args)


if __name__ == "__main__":
    sys.exit(main())
