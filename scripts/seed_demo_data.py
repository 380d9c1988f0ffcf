#!/usr/bin/env python3
"""
Seed demo users, assessments and one submission per activated student.

Run with:
    python scripts/seed_demo_data.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path so the src package imports from any directory
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio

import structlog
from sqlalchemy import select

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.reference_data import DEMO_ASSESSMENTS, DEMO_USERS
from src.infrastructure.cache import build_lookup_cache
from src.infrastructure.db.models import AssessmentModel, SubmissionModel, UserModel
from src.infrastructure.db.session import dispose_engine, get_session_factory
from src.infrastructure.repositories import UserRepository

logger = structlog.get_logger()


async def seed() -> None:
    settings = get_settings()
    cache = build_lookup_cache(settings)
    session_factory = get_session_factory()

    async with session_factory() as session:
        users = UserRepository(session, cache)
        created_users = []
        for data in DEMO_USERS:
            existing = await users.find_one_by_login(data["login"])
            if existing is not None:
                created_users.append(existing)
                continue
            created_users.append(await users.save(UserModel(**data)))

        assessments = []
        for data in DEMO_ASSESSMENTS:
            existing = await session.scalar(
                select(AssessmentModel).where(AssessmentModel.type == data["type"])
            )
            if existing is None:
                existing = AssessmentModel(**data)
                session.add(existing)
            assessments.append(existing)
        await session.flush()

        first_assessment = assessments[0]
        for user in created_users:
            if not user.activated or user.login == "admin":
                continue
            already = await session.scalar(
                select(SubmissionModel.id).where(
                    SubmissionModel.user_id == user.id,
                    SubmissionModel.assessment_id == first_assessment.id,
                )
            )
            if already is None:
                session.add(
                    SubmissionModel(
                        user_id=user.id,
                        assessment_id=first_assessment.id,
                        github_url=f"https://github.com/{user.login}/{first_assessment.type}",
                    )
                )
        await session.commit()

    logger.info(
        "demo_data_seeded",
        users=len(DEMO_USERS),
        assessments=len(DEMO_ASSESSMENTS),
        environment=settings.environment,
    )
    await cache.close()
    await dispose_engine()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.log_json)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
