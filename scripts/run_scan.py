#!/usr/bin/env python3
"""
Run a market scan from the command line.

Usage:
    python scripts/run_scan.py daytrade --market US [--symbols AAPL,NVDA] [--min-score 40]
    python scripts/run_scan.py breakouts --market IN --limit 30
    python scripts/run_scan.py crossovers --market US
    python scripts/run_scan.py history --symbol SPY --years 3
    python scripts/run_scan.py picks

Arguments:
    --market M      US or IN (default: US)
    --symbols LIST  Comma-separated symbols (default: configured scan universe)
    --limit N       Only scan the first N symbols
    --min-score N   Minimum day-trade score
"""

import argparse
import asyncio
import os
import sys
import time

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from stockscreen.core.config import parse_comma_list  # noqa: E402
from stockscreen.services.data_provider.models import MARKET_IN, MARKET_US  # noqa: E402
from stockscreen.services.scanner import MarketScanner  # noqa: E402
from stockscreen.services.stock_lists import get_stocks_to_scan  # noqa: E402


def resolve_symbols(args, market):
    symbols = parse_comma_list(args.symbols) if args.symbols else get_stocks_to_scan(market)
    if args.limit:
        symbols = symbols[:args.limit]
    return symbols


def print_day_trades(outcome):
    for r in outcome.hits:
        print(
            f"  {r.symbol:<14} score {r.score:>3}  {r.price:>10.2f}  "
            f"buy {r.buy_price:.2f} / sell {r.sell_price:.2f} / stop {r.stop_loss:.2f}"
        )
        print(f"      {', '.join(r.signals)}")


def print_breakouts(outcome):
    for a in outcome.hits:
        print(
            f"  {a.symbol:<14} {a.change_percent:>+6.2f}%  "
            f"[{a.signal.severity.value}] {a.signal.label}: {a.signal.description}"
        )


def print_crossovers(outcome):
    for c in outcome.hits:
        print(f"  {c.symbol:<14} {c.type:<13} SMA50 {c.sma50:.2f} / SMA200 {c.sma200:.2f}")


async def main(args):
    scanner = MarketScanner()
    market = args.market.upper()
    start = time.perf_counter()

    try:
        if args.command == "history":
            history = await scanner.get_crossover_history(args.symbol, market, years=args.years)
            print(f"📈 {history.symbol}: currently {history.current_state} "
                  f"(SMA50 {history.sma50}, SMA200 {history.sma200})")
            for event in history.events:
                print(f"  {event.date}  {event.type:<13} close {event.close:.2f}")
            return

        if args.command == "picks":
            limit = args.limit or None
            picks = await scanner.daily_picks(
                get_stocks_to_scan(MARKET_US)[:limit], get_stocks_to_scan(MARKET_IN)[:limit]
            )
            for mkt, results in picks.items():
                print(f"\n🎯 {mkt} top picks")
                for r in results:
                    print(f"  {r.symbol:<14} score {r.score:>3}  {', '.join(r.signals[:4])}")
            return

        symbols = resolve_symbols(args, market)
        print(f"🔍 Scanning {len(symbols)} {market} symbols ({args.command})...")

        if args.command == "daytrade":
            outcome = await scanner.scan_day_trades(symbols, market, min_score=args.min_score)
            print_day_trades(outcome)
        elif args.command == "breakouts":
            outcome = await scanner.scan_breakouts(symbols, market)
            print_breakouts(outcome)
        else:
            outcome = await scanner.scan_crossovers(symbols, market)
            print_crossovers(outcome)

        print(f"\n✅ {len(outcome.hits)} hits, {outcome.attempted} attempted, {outcome.skipped} skipped")
    finally:
        await scanner.shutdown()
        print(f"⏱️  {time.perf_counter() - start:.2f}s")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a market scan")
    parser.add_argument("command", choices=["daytrade", "breakouts", "crossovers", "history", "picks"])
    parser.add_argument("--market", default=MARKET_US, choices=[MARKET_US, MARKET_IN, "us", "in"])
    parser.add_argument("--symbols", help="Comma-separated symbols")
    parser.add_argument("--symbol", default="SPY", help="Symbol for the history command")
    parser.add_argument("--years", type=int, default=3)
    parser.add_argument("--limit", type=int, default=0)
    parser.add_argument("--min-score", type=int, default=None)

    asyncio.run(main(parser.parse_args()))
