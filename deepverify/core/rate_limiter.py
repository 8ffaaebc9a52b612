"""
Per-user throttle on analyze calls: Redis-backed (preferred) with in-memory
fallback.

The Redis client is accessed at call-time via the integration module
so it picks up the instance initialized during the FastAPI lifespan.
"""

import time
import logging
from typing import Dict, List

from fastapi import HTTPException

from deepverify.config import settings
from deepverify.integrations import redis_client as redis_module

logger = logging.getLogger(__name__)

# {uid: [timestamp, ...]}
_recent_calls: Dict[str, List[float]] = {}


def _too_many() -> HTTPException:
    return HTTPException(
        status_code=429,
        detail="Too many analysis requests. Please try again in a minute.",
    )


def check_analysis_rate(uid: str) -> None:
    rc = redis_module.client
    if rc:
        _check_redis(rc, uid)
    else:
        _check_memory(uid)


def _check_redis(rc, uid: str) -> None:
    key = f"analysis_rate:{uid}"
    try:
        count = rc.incr(key)
        if count == 1:
            rc.expire(key, settings.analysis_rate_window_sec)
    except Exception as e:
        logger.error(f"Redis throttle error: {e}. Falling back to memory.")
        _check_memory(uid)
        return

    if count > settings.analysis_rate_max_requests:
        logger.warning(f"[THROTTLE] Redis limit hit for {uid}")
        raise _too_many()


def _check_memory(uid: str) -> None:
    now = time.time()
    window = settings.analysis_rate_window_sec

    if len(_recent_calls) > settings.rate_limit_memory_limit:
        prune_idle(now)

    calls = [t for t in _recent_calls.get(uid, []) if now - t < window]
    if len(calls) >= settings.analysis_rate_max_requests:
        _recent_calls[uid] = calls
        logger.warning(f"[THROTTLE] Memory limit hit for {uid}")
        raise _too_many()

    calls.append(now)
    _recent_calls[uid] = calls


def prune_idle(now: float) -> None:
    """Drop users whose latest call is older than the window."""
    window = settings.analysis_rate_window_sec
    idle = [uid for uid, calls in _recent_calls.items() if not calls or now - calls[-1] > window]
    for uid in idle:
        del _recent_calls[uid]
    if idle:
        logger.info(f"[THROTTLE] Pruned {len(idle)} idle users")
