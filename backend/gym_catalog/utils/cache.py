"""
Route Summary Cache

Public route summaries are read far more often than routes change, so they
are kept in Redis under a versioned key:

    gym_route:{route_id}:v:{updated_at}:summary

A write bumps updated_at, so readers of the new version miss naturally; the
lifecycle manager and the route editor still drop every version of the key
so nothing stale survives until its TTL.

The cache is optional. When Redis cannot be reached every read misses,
every write is skipped, and a warning is logged once per connection attempt.
"""
import json
import logging
from typing import Any, Dict, Optional

import redis

from gym_catalog.config import settings

logger = logging.getLogger(__name__)

# Lazily connected client shared by the process
_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """
    Shared Redis client for the cache, connected on first use.

    Uses CACHE_REDIS_URL (falling back to REDIS_URL).

    Returns:
        Connected client, or None when Redis is unreachable
    """
    global _redis_client

    if _redis_client is None:
        try:
            client = redis.Redis.from_url(
                settings.cache_redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            client.ping()
            _redis_client = client
            logger.info("Route cache connected")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(f"Redis unavailable, route cache disabled: {e}")
            _redis_client = None

    return _redis_client


def cache_get(key: str) -> Optional[Any]:
    """JSON value stored under `key`, or None on a miss or a Redis failure."""
    client = get_redis_client()
    if client is None:
        return None

    try:
        raw = client.get(key)
    except redis.RedisError as e:
        logger.error(f"Cache read failed for '{key}': {e}")
        return None

    if raw is None:
        logger.debug(f"Cache MISS: {key}")
        return None

    logger.debug(f"Cache HIT: {key}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Corrupt cache entry '{key}': {e}")
        return None


def cache_set(key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
    """
    Store a JSON-serialisable value with an expiry.

    Args:
        key: Cache key
        value: Payload; dates and other non-JSON values are stored as strings
        ttl_seconds: Expiry (default: settings.ROUTE_SUMMARY_TTL)

    Returns:
        True when stored, False when Redis is unavailable or refused the write
    """
    client = get_redis_client()
    if client is None:
        return False

    if ttl_seconds is None:
        ttl_seconds = settings.ROUTE_SUMMARY_TTL

    try:
        client.setex(key, ttl_seconds, json.dumps(value, default=str))
    except (redis.RedisError, TypeError, ValueError) as e:
        logger.error(f"Cache write failed for '{key}': {e}")
        return False

    logger.debug(f"Cache SET: {key} (TTL: {ttl_seconds}s)")
    return True


def cache_clear_pattern(pattern: str) -> int:
    """
    Delete every key matching a glob pattern.

    Walks the keyspace with SCAN so a large cache never blocks Redis.

    Returns:
        Number of keys deleted (0 when Redis is unavailable)
    """
    client = get_redis_client()
    if client is None:
        return 0

    try:
        keys = list(client.scan_iter(match=pattern, count=500))
        deleted = client.delete(*keys) if keys else 0
    except redis.RedisError as e:
        logger.error(f"Cache clear failed for '{pattern}': {e}")
        return 0

    if deleted:
        logger.debug(f"Cache CLEAR: {deleted} keys matching '{pattern}'")
    return deleted


# ============================================================================
# ROUTE SUMMARIES
# ============================================================================


def build_route_summary_key(route_id: int, version: str) -> str:
    """
    Cache key of one version of a route summary.

    Example:
        >>> build_route_summary_key(12, "2024-01-03T10:00:00")
        'gym_route:12:v:2024-01-03T10:00:00:summary'
    """
    return f"gym_route:{route_id}:v:{version}:summary"


def build_route_summary_pattern(route_id: int) -> str:
    """Pattern matching every cached version of a route summary."""
    return f"gym_route:{route_id}:v:*:summary"


def get_cached_route_summary(route_id: int, version: str) -> Optional[Dict]:
    return cache_get(build_route_summary_key(route_id, version))


def set_cached_route_summary(route_id: int, version: str, summary: Dict) -> bool:
    return cache_set(build_route_summary_key(route_id, version), summary)


def invalidate_route_summary(route_id: int) -> int:
    """
    Drop every cached version of a route summary.

    Returns:
        Number of entries removed
    """
    return cache_clear_pattern(build_route_summary_pattern(route_id))
