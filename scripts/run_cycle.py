#!/usr/bin/env python3
"""CLI script to run a single sync cycle and print its result.

Usage:
    python scripts/run_cycle.py
    python scripts/run_cycle.py --date 2024-05-17 --policy ignore

Reads THREEC_API_TOKEN, HUBSPOT_TOKEN and the other settings from the
environment or the .env file in the project root. Writes to the CRM exactly
like the background scheduler does.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from datetime import date

# Ensure project root is on sys.path so we can import src.call_sync
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


async def run(day: date | None, policy: str | None) -> int:
    """Run one cycle; return a process exit code."""
    from src.call_sync.api.middleware.logging import configure_structlog
    from src.call_sync.config import UnansweredPolicy, get_settings
    from src.call_sync.sync.service import build_sync_service

    configure_structlog()
    settings = get_settings()
    if policy is not None:
        settings = settings.model_copy(
            update={"UNANSWERED_NEW_CONTACT_POLICY": UnansweredPolicy(policy)}
        )

    missing = settings.missing_credentials()
    if missing:
        print(f"Missing settings: {', '.join(missing)}", file=sys.stderr)
        return 2

    service = build_sync_service(settings)
    result = await service.run_cycle(day)

    print("Cycle finished:")
    print(f"  Pages:       {result.pages_fetched}")
    print(f"  Fetched:     {result.fetched}")
    print(f"  New records: {result.new_records}")
    print(f"  Created:     {result.dispatch.created}")
    print(f"  Updated:     {result.dispatch.updated}")
    print(f"  Skipped:     {result.dispatch.skipped}")
    print(f"  Failed:      {result.dispatch.failed}")
    print(f"  Interrupted: {result.interrupted}")
    print(f"  Duration:    {result.duration_seconds:.2f}s")
    return 1 if result.interrupted or result.dispatch.failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one call sync cycle")
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Day to sync (YYYY-MM-DD, default: today in the configured timezone)",
    )
    parser.add_argument(
        "--policy",
        choices=["create", "ignore"],
        default=None,
        help="Override UNANSWERED_NEW_CONTACT_POLICY for this run",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.date, args.policy)))


if __name__ == "__main__":
    main()
