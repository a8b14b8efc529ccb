"""
Database Module
===============

Async clients for the Charity Prep data stores:
- PostgreSQL (asyncpg + SQLAlchemy 2.0): compliance registers and score history
- Redis (redis.asyncio): rate limit counters

Usage:
    from shared.database import PostgresClient, postgres_session

    async with postgres_session() as session:
        result = await session.execute(select(IncomeRecordModel))
        ...
"""

from shared.database.postgres import (
    Base,
    PostgresClient,
    postgres_session,
)
from shared.database.redis import RedisClient


__all__ = [
    # PostgreSQL
    "Base",
    "PostgresClient",
    "postgres_session",
    # Redis
    "RedisClient",
]
