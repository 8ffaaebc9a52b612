"""
Push-style session-change notifications.

Mounted pages subscribe per user and must release the subscription on
teardown. `subscription()` wraps subscribe/unsubscribe for scoped use:

    with session_bus.subscription(uid, on_change):
        ...

`session_bus` is a module-level singleton. Publishing happens on sign-out and
whenever the identity provider reports a revoked token.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class SessionEvent(str, Enum):
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REVOKED = "TOKEN_REVOKED"


Callback = Callable[[str, SessionEvent], None]


class Subscription:
    def __init__(self, bus: "SessionEventBus", uid: str, callback: Callback):
        self._bus = bus
        self.uid = uid
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._bus._remove(self)


class SessionEventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, uid: str, callback: Callback) -> Subscription:
        sub = Subscription(self, uid, callback)
        self._subscribers.setdefault(uid, []).append(sub)
        return sub

    @contextmanager
    def subscription(self, uid: str, callback: Callback):
        sub = self.subscribe(uid, callback)
        try:
            yield sub
        finally:
            sub.unsubscribe()

    def publish(self, uid: str, event: SessionEvent) -> int:
        """Notify every subscriber of `uid`. Returns how many were called."""
        # Copy: callbacks usually unsubscribe themselves.
        subs = list(self._subscribers.get(uid, []))
        logger.info(f"[SESSION] {event.value} for {uid} -> {len(subs)} subscriber(s)")
        for sub in subs:
            try:
                sub.callback(uid, event)
            except Exception as e:
                logger.error(f"[SESSION] Subscriber for {uid} failed on {event.value}: {e}")
        return len(subs)

    def subscriber_count(self, uid: str) -> int:
        return len(self._subscribers.get(uid, []))

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscribers.get(sub.uid)
        if not subs:
            return
        if sub in subs:
            subs.remove(sub)
        if not subs:
            del self._subscribers[sub.uid]


session_bus = SessionEventBus()
