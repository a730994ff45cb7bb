"""
Database Module - Supabase and Redis Clients

Provides:
- Per-session async Supabase clients for auth and table operations
- Upstash Redis client for shared cart storage
- Cart storage selection from environment
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from upstash_redis import Redis

from cubtton.cart.storage import CartStorage, FileStorage, RedisStorage
from cubtton.logging import get_logger

logger = get_logger(__name__)

# Environment variables
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

CUBTTON_STORAGE_PATH = os.environ.get("CUBTTON_STORAGE_PATH", "~/.cubtton/storage.json")


# Singleton instance
_redis_client: Optional[Redis] = None


async def create_session_client() -> AsyncClient:
    """
    Create an async Supabase client for one visitor session.

    Each session gets its own client because the client holds the signed-in
    user's auth session. Uses the anon key: row-level security in the
    Supabase project decides what that user may read and write.
    """
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return await acreate_client(SUPABASE_URL, SUPABASE_ANON_KEY)


def redis_configured() -> bool:
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)


def get_redis() -> Redis:
    """Get Upstash Redis client (singleton)."""
    global _redis_client

    if _redis_client is None:
        if not redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


def get_cart_storage() -> CartStorage:
    """Redis when configured, otherwise the per-profile JSON file."""
    if redis_configured():
        logger.info("Cart storage: Upstash Redis")
        return RedisStorage(get_redis(), ttl_seconds=TTL.CART)
    logger.info(f"Cart storage: {CUBTTON_STORAGE_PATH}")
    return FileStorage(CUBTTON_STORAGE_PATH)


class TTL:
    """Time-to-live constants (seconds) for Redis keys."""

    CART = 30 * 86400  # abandoned carts expire after 30 days
