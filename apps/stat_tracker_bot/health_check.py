"""
Minimal health check for the stat tracker bot.

Verifies:
1. Bot is connected to Discord (readiness file exists), unless --webhook is given
2. The remote database answers a trivial query

The gateway bot creates READINESS_FILE in on_ready and removes it on disconnect.
This script exits 0 if healthy, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

from libs.db.database import D1Client, StoreError

READINESS_FILE = "/tmp/stat-tracker-bot-ready"


async def check_database() -> bool:
    """Check if the remote database answers ``SELECT 1``."""
    client = D1Client()
    if not client.config.is_complete:
        return False
    try:
        row = await client.first("SELECT 1 AS ok")
        return row is not None
    except StoreError:
        return False
    finally:
        await client.close()


async def is_healthy(require_gateway: bool = True) -> bool:
    """Return True only when the bot is connected (if required) AND the database is reachable."""
    if require_gateway and not os.path.isfile(READINESS_FILE):
        return False

    return await check_database()


async def main_async(require_gateway: bool = True) -> int:
    healthy = await is_healthy(require_gateway)
    return 0 if healthy else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Stat tracker bot health check")
    parser.add_argument(
        "--webhook",
        action="store_true",
        help="Skip the gateway readiness file (webhook deployments)",
    )
    args = parser.parse_args()
    return asyncio.run(main_async(require_gateway=not args.webhook))


if __name__ == "__main__":
    sys.exit(main())
