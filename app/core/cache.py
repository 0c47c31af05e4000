import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from redis.asyncio import Redis, ConnectionPool
from redis.exceptions import LockError, RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

_pool: Optional[ConnectionPool] = None

PREFERENCE_LOCK_PREFIX = "pref-lock:"
LOCK_POLL_INTERVAL = 0.05


# ── Connection pool ───────────────────────────────────────────────────────────

async def get_redis_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        logger.info("Redis connection pool created: %s", settings.redis_url)
    return _pool


async def get_redis() -> Redis:
    pool = await get_redis_pool()
    return Redis(connection_pool=pool)


async def close_redis_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None
        logger.info("Redis connection pool closed")


# ── Per-user preference lock ──────────────────────────────────────────────────

@asynccontextmanager
async def preference_lock(user_id: uuid.UUID) -> AsyncIterator[bool]:
    """
    Serialize preference load-update-store sequences for one user.

    Built on redis-py's Lock: acquisition is SET NX PX with a bounded wait,
    and release is a token-checked script, so a lock that expired and was
    taken over by another worker is left in place.

    Yields True when the lock is held. When locking is disabled, Redis is
    unreachable, or the wait times out, yields False and the caller proceeds
    unserialized (plain last-write-wins).
    """
    if not settings.preference_lock_enabled:
        yield False
        return

    lock = None
    acquired = False
    try:
        redis = await get_redis()
        lock = redis.lock(
            f"{PREFERENCE_LOCK_PREFIX}{user_id}",
            timeout=settings.preference_lock_ttl_ms / 1000,
            sleep=LOCK_POLL_INTERVAL,
            blocking_timeout=settings.preference_lock_wait_seconds,
        )
        acquired = await lock.acquire()
        if not acquired:
            logger.warning("Timed out waiting for preference lock of user %s", user_id)
    except RedisError as e:
        logger.warning("Preference lock unavailable for user %s: %s", user_id, e)

    if not acquired:
        yield False
        return

    try:
        yield True
    finally:
        try:
            await lock.release()
        except LockError as e:
            logger.warning("Preference lock of user %s was lost before release: %s", user_id, e)
        except RedisError as e:
            logger.warning("Failed to release preference lock of user %s: %s", user_id, e)
