#!/usr/bin/env python3
"""
Database Initialization Script
==============================

Create the Charity Prep tables, load reference data and check that
the rate limit store is reachable.

Usage:
    python scripts/init_databases.py
    python scripts/init_databases.py --skip-seed

Version: 0.1.0
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.logging import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False, service_name="init-db")
logger = get_logger(__name__)


async def init_postgres() -> bool:
    """Create every compliance table."""
    from sqlalchemy import text

    # Registers the models on Base.metadata
    import services.charity_compliance.models  # noqa: F401
    from shared.database.postgres import PostgresClient

    logger.info("postgres_init_starting")

    try:
        async with PostgresClient.get_engine().begin() as conn:
            result = await conn.execute(text("SELECT version()"))
            logger.info("postgres_connected", version=str(result.scalar())[:50])

        await PostgresClient.create_tables()
        return True

    except Exception as e:
        logger.error("postgres_init_failed", error=str(e))
        return False


async def seed_countries() -> bool:
    """Load the country reference list. Existing codes are left untouched."""
    from sqlalchemy.dialects.postgresql import insert

    from services.charity_compliance.countries import seed_countries as country_rows
    from services.charity_compliance.models import CountryModel
    from shared.database.postgres import postgres_session

    rows = [country.model_dump() for country in country_rows()]
    logger.info("country_seed_starting", countries=len(rows))

    try:
        async with postgres_session() as session:
            await session.execute(
                insert(CountryModel).values(rows).on_conflict_do_nothing(index_elements=["code"])
            )
        logger.info("country_seed_completed", countries=len(rows))
        return True

    except Exception as e:
        logger.error("country_seed_failed", error=str(e))
        return False


async def check_redis() -> bool:
    """Verify the rate limit store is reachable."""
    from shared.database.redis import RedisClient

    result = await RedisClient.health_check()
    if result["status"] != "healthy":
        logger.error("redis_check_failed", error=result.get("error"))
        return False

    logger.info("redis_connected", latency_ms=result["latency_ms"])
    return True


async def main(args: argparse.Namespace) -> int:
    """Main initialization function."""
    from shared.database.postgres import PostgresClient
    from shared.database.redis import RedisClient

    logger.info("charity_prep_database_init")

    results = {"PostgreSQL": await init_postgres()}

    if not args.skip_seed and results["PostgreSQL"]:
        results["Countries"] = await seed_countries()

    results["Redis"] = await check_redis()

    await PostgresClient.close()
    await RedisClient.close()

    failed = [name for name, success in results.items() if not success]
    for name, success in results.items():
        logger.info("init_step_result", step=name, status="ok" if success else "failed")

    if failed:
        logger.error("database_init_failed", failed=failed)
        return 1

    logger.info("database_init_completed")
    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Initialize Charity Prep databases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--skip-seed",
        action="store_true",
        help="Create tables without loading country reference data",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    exit_code = asyncio.run(main(args))
    sys.exit(exit_code)
