#!/usr/bin/env python3
"""
Remove accounts that were never activated within the grace period.

Run daily, e.g. from cron:
    python scripts/purge_unactivated_users.py --days 3
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path so the src package imports from any directory
sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import asyncio
from datetime import UTC, datetime, timedelta

import structlog

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.infrastructure.cache import build_lookup_cache
from src.infrastructure.db.session import dispose_engine, get_session_factory
from src.infrastructure.repositories import UserRepository

logger = structlog.get_logger()


async def purge(days: int, dry_run: bool) -> int:
    settings = get_settings()
    cache = build_lookup_cache(settings)
    cutoff = datetime.now(UTC) - timedelta(days=days)
    removed = 0

    async with get_session_factory()() as session:
        users = UserRepository(session, cache)
        stale = await users.find_all_not_activated_created_before(cutoff)
        for user in stale:
            logger.info("unactivated_user_found", login=user.login, created_date=str(user.created_date))
            if not dry_run and await users.delete(user.id):
                removed += 1

    logger.info("unactivated_users_purged", removed=removed, candidates=len(stale), dry_run=dry_run)
    await cache.close()
    await dispose_engine()
    return removed


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--days", type=int, default=3, help="Grace period in days")
    parser.add_argument("--dry-run", action="store_true", help="Only report candidates")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)
    asyncio.run(purge(args.days, args.dry_run))


if __name__ == "__main__":
    main()
