#!/usr/bin/env python3
"""
Wait for the backing stores to be ready.

Blocks container start-up until PostgreSQL accepts queries and Redis answers
PING. Redis only guards the per-user preference lock, so an unreachable Redis
is reported but does not fail the script.
"""

import asyncio
import asyncpg
import logging
import os
import sys

from redis.asyncio import Redis
from redis.exceptions import RedisError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def wait_for_database(
    host: str = "db",
    port: int = 5432,
    user: str = "admin",
    password: str = "admin",
    database: str = "interactions",
    max_retries: int = 30,
    retry_interval: float = 2.0
) -> bool:
    """
    Wait for PostgreSQL to accept connections and answer a trivial query.

    Returns:
        True if the database is ready, False if max retries exceeded
    """
    logger.info(f"Waiting for database at {host}:{port} (database: {database})")

    for attempt in range(max_retries):
        try:
            conn = await asyncpg.connect(
                host=host,
                port=port,
                user=user,
                password=password,
                database=database,
                timeout=5.0
            )
            try:
                result = await conn.fetchval("SELECT 1")
            finally:
                await conn.close()

            if result == 1:
                logger.info(f"Database is ready! (attempt {attempt + 1}/{max_retries})")
                return True

        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
            logger.info(f"Attempt {attempt + 1}/{max_retries} failed: {e}")

        if attempt < max_retries - 1:
            await asyncio.sleep(retry_interval)

    logger.error(f"Database not ready after {max_retries} attempts")
    return False


async def check_redis(url: str, max_retries: int = 5, retry_interval: float = 1.0) -> bool:
    """Ping Redis a few times; False means preference updates will run unlocked."""
    client = Redis.from_url(url)
    try:
        for attempt in range(max_retries):
            try:
                if await client.ping():
                    logger.info("Redis is ready")
                    return True
            except RedisError as e:
                logger.info(f"Redis attempt {attempt + 1}/{max_retries} failed: {e}")
            await asyncio.sleep(retry_interval)
        return False
    finally:
        await client.aclose()


async def main():
    host = os.getenv("POSTGRES_HOST", "db")
    port = int(os.getenv("POSTGRES_PORT", "5432"))
    user = os.getenv("POSTGRES_USER", "admin")
    password = os.getenv("POSTGRES_PASSWORD", "admin")
    database = os.getenv("POSTGRES_DB", "interactions")

    if not await wait_for_database(host, port, user, password, database):
        logger.error("Database is not ready, exiting")
        sys.exit(1)

    if not await check_redis(os.getenv("REDIS_URL", "redis://redis:6379/0")):
        logger.warning("Redis not available, preference updates will not be serialized")

    logger.info("Backing stores ready")


if __name__ == "__main__":
    asyncio.run(main())
