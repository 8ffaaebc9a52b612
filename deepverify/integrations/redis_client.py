"""
Upstash Redis integration, used only by the analysis throttle.

`client` stays None when no credentials are configured; callers then fall
back to in-memory state. Read `redis_client.client` at call time, never
import the variable itself.
"""

import logging

from upstash_redis import Redis

from deepverify.config import settings

logger = logging.getLogger(__name__)

client = None  # Redis | None


def initialize() -> None:
    global client

    if not (settings.upstash_redis_host and settings.upstash_redis_password):
        client = None
        logger.warning("[STARTUP] No Upstash credentials; analysis throttle is per-process")
        return

    try:
        client = Redis(url=settings.upstash_redis_host, token=settings.upstash_redis_password)
        logger.info("[STARTUP] Upstash Redis client ready")
    except Exception as e:
        client = None
        logger.error(f"[STARTUP] Upstash Redis unavailable, using memory throttle: {e}")
