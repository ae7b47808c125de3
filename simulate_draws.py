#!/usr/bin/env python3
"""
Fire concurrent draw requests against a running backend and tally the results.

Usage:
    python simulate_draws.py --base-url http://localhost:8000 --draws 50 --workers 10

Every request is an independent `POST /api/draw/`, as a burst of visitors
smashing eggs at the same moment would send. The tally makes oversold stock
easy to spot: compare the win counts per prize with the stock configured
before the run.
"""

import argparse
import sys
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import requests
from requests import RequestException

TIMEOUT = 10  # seconds per request


@dataclass
class DrawOutcome:
    status: int
    won: bool
    prize_name: Optional[str] = None
    code: Optional[str] = None


class DrawClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def draw(self) -> DrawOutcome:
        try:
            response = self.session.post(f"{self.base_url}/api/draw/", timeout=TIMEOUT)
        except RequestException as exc:
            return DrawOutcome(status=0, won=False, code=f"transport:{type(exc).__name__}")
        try:
            data = response.json()
        except ValueError:
            return DrawOutcome(status=response.status_code, won=False, code="invalid_json")
        if data.get("success"):
            prize = data.get("prize") or {}
            return DrawOutcome(status=response.status_code, won=True, prize_name=prize.get("name"))
        return DrawOutcome(status=response.status_code, won=False, code=data.get("code"))


def tally(outcomes: Iterable[DrawOutcome]) -> Dict[str, Counter]:
    wins: Counter = Counter()
    misses: Counter = Counter()
    for outcome in outcomes:
        if outcome.won:
            wins[outcome.prize_name or "<unnamed>"] += 1
        else:
            misses[outcome.code or f"http_{outcome.status}"] += 1
    return {"wins": wins, "misses": misses}


def run(client: DrawClient, draws: int, workers: int) -> Dict[str, Counter]:
    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(lambda _: client.draw(), range(draws)))
    return tally(outcomes)


def main():
    parser = argparse.ArgumentParser(
        description="Send concurrent draw requests and summarise the outcomes."
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="Root URL of the running Django service (default: http://localhost:8000)",
    )
    parser.add_argument("--draws", type=int, default=50, help="Total draw requests (default: 50)")
    parser.add_argument("--workers", type=int, default=10, help="Concurrent senders (default: 10)")
    args = parser.parse_args()

    if args.draws < 1 or args.workers < 1:
        parser.error("--draws and --workers must be positive integers")

    summary = run(DrawClient(args.base_url), args.draws, args.workers)

    print(f"[info] {args.draws} draws sent with {args.workers} workers")
    for name, count in summary["wins"].most_common():
        print(f"  won  {name}: {count}")
    for code, count in summary["misses"].most_common():
        print(f"  miss {code}: {count}")
    if summary["misses"].get("storage_failure") or summary["misses"].get("invalid_json"):
        print("[error] server reported failures during the run", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
