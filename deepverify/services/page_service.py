"""
Page sessions: per-user, per-page analysis state.

Each mounted page owns its input slot, the `analyzing` flag and the last
result, and moves through IDLE -> ANALYZING -> RESOLVED -> IDLE. The
simulated analysis runs as a one-shot asyncio task. While it is pending,
`analyze()` is a no-op.

A page subscribes to session-change events when mounted. Teardown (leaving
the page, sign-out, a revoked token, app shutdown) cancels any pending task
and releases the subscription. Pages left idle longer than
`settings.page_idle_ttl_sec` are swept on the next mount.

`page_registry` is a module-level singleton. In-memory only: NOT shared
between worker processes.
"""

import asyncio
import logging
import random
import time
from functools import partial
from typing import Dict, Optional, Tuple

from deepverify.config import settings
from deepverify.core.file_validator import encode_data_url, validate_image
from deepverify.core.session_events import SessionEvent, SessionEventBus, session_bus
from deepverify.detection.mock_verifier import validate_text, verify_image, verify_text
from deepverify.errors import AnalysisInProgress, ValidationError
from deepverify.navigation import HOME_PATH
from deepverify.schemas.auth import Session
from deepverify.schemas.pages import PageSnapshot, PageStatus
from deepverify.schemas.verification import Modality, VerificationResult

logger = logging.getLogger(__name__)


class AnalysisPage:
    def __init__(self, session: Session, kind: Modality, registry: "PageRegistry"):
        self.session = session
        self.kind = kind
        self.status = PageStatus.IDLE
        self.result: Optional[VerificationResult] = None
        self._registry = registry
        self._text: str = ""
        self._image: Optional[bytes] = None
        self._image_mime: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self.last_seen = time.time()
        self._subscription = registry.bus.subscribe(session.uid, self._on_session_change)

    @property
    def uid(self) -> str:
        return self.session.uid

    @property
    def analyzing(self) -> bool:
        return self.status is PageStatus.ANALYZING

    @property
    def mounted(self) -> bool:
        return self._subscription.active

    def has_input(self) -> bool:
        if self.kind is Modality.TEXT:
            return bool(self._text)
        return self._image is not None

    def can_analyze(self) -> bool:
        if self.analyzing:
            return False
        if self.kind is Modality.TEXT:
            return bool(self._text.strip())
        return self._image is not None

    # ------------------------------------------------------------------ #
    # Input                                                               #
    # ------------------------------------------------------------------ #

    def set_text(self, text: str) -> None:
        """Replace the text draft. A changed draft drops a resolved verdict."""
        self._require_kind(Modality.TEXT)
        changed = text != self._text
        self._text = text
        if changed and self.status is PageStatus.RESOLVED:
            self.result = None
            self.status = PageStatus.IDLE

    def upload_image(self, filename: str, payload: bytes, mime: Optional[str] = None) -> None:
        """
        Validate and hold an image. Any previous verdict is discarded.

        Pass `mime` when the payload was already run through validate_image().
        """
        self._require_kind(Modality.IMAGE)
        if self.analyzing:
            raise AnalysisInProgress()
        if mime is None:
            mime = validate_image(filename, payload)
        self._image = payload
        self._image_mime = mime
        self.result = None
        self.status = PageStatus.IDLE
        logger.info(f"[PAGE] {self.uid} uploaded {filename} ({len(payload)} bytes)")

    def clear(self) -> None:
        """Drop input and result. A pending analysis is cancelled."""
        self._cancel_pending()
        self._text = ""
        self._image = None
        self._image_mime = None
        self.result = None
        self.status = PageStatus.IDLE

    # ------------------------------------------------------------------ #
    # Analysis                                                            #
    # ------------------------------------------------------------------ #

    def check_ready(self) -> None:
        """Raise ValidationError when there is nothing to analyze."""
        if self.kind is Modality.TEXT:
            validate_text(self._text)
        elif self._image is None:
            raise ValidationError("Please upload an image first")

    def analyze(self, rng=random) -> bool:
        """
        Start the mock analysis. Returns False, changing nothing, when one is
        already pending. Raises ValidationError for empty text / no image.
        """
        if self.analyzing:
            logger.info(f"[PAGE] {self.uid}/{self.kind.value} analyze ignored: already analyzing")
            return False

        self.check_ready()
        if self.kind is Modality.TEXT:
            run = partial(verify_text, self._text, rng=rng)
        else:
            run = partial(verify_image, self._image, rng=rng)

        self.status = PageStatus.ANALYZING
        self.result = None
        self._task = asyncio.create_task(self._run(run))
        logger.info(f"[PAGE] {self.uid}/{self.kind.value} analyzing")
        return True

    async def _run(self, run) -> None:
        try:
            result = await run()
        except Exception as e:
            logger.error(f"[PAGE] {self.uid}/{self.kind.value} analysis failed: {e}")
            self.status = PageStatus.IDLE
        else:
            self.result = result
            self.status = PageStatus.RESOLVED
        finally:
            # A cancelled run may finish after a newer one has started.
            if self._task is asyncio.current_task():
                self._task = None

    async def wait(self) -> None:
        """Wait for the pending analysis, if any, to finish."""
        task = self._task
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.info(f"[PAGE] {self.uid}/{self.kind.value} pending analysis cancelled")
        self._task = None
        if self.analyzing:
            self.status = PageStatus.IDLE

    # ------------------------------------------------------------------ #
    # Lifecycle                                                           #
    # ------------------------------------------------------------------ #

    def snapshot(self) -> PageSnapshot:
        if self.kind is Modality.TEXT:
            preview = self._text
        elif self._image is not None:
            preview = encode_data_url(self._image, self._image_mime)
        else:
            preview = None
        return PageSnapshot(
            page=self.kind,
            status=self.status,
            analyzing=self.analyzing,
            has_input=self.has_input(),
            can_analyze=self.can_analyze(),
            input_preview=preview or None,
            result=self.result,
            back=HOME_PATH,
        )

    def teardown(self) -> None:
        self.clear()
        self._subscription.unsubscribe()

    def _on_session_change(self, uid: str, event: SessionEvent) -> None:
        logger.info(f"[PAGE] {uid}/{self.kind.value} torn down on {event.value}")
        self._registry.leave(uid, self.kind)

    def _require_kind(self, kind: Modality) -> None:
        if self.kind is not kind:
            raise ValidationError(f"Not available on the {self.kind.value} analysis page")


class PageRegistry:
    """Mounted pages keyed by (uid, page kind)."""

    def __init__(self, bus: SessionEventBus = session_bus):
        self.bus = bus
        self._pages: Dict[Tuple[str, Modality], AnalysisPage] = {}

    def mount(self, session: Session, kind: Modality) -> AnalysisPage:
        """Return the user's page of this kind, creating it on first entry."""
        now = time.time()
        self.cleanup_stale_pages(now)
        key = (session.uid, kind)
        page = self._pages.get(key)
        if page is None:
            page = AnalysisPage(session, kind, self)
            self._pages[key] = page
            logger.info(f"[PAGE] Mounted {kind.value} page for {session.uid}")
        else:
            page.session = session
        page.last_seen = now
        return page

    def cleanup_stale_pages(self, now: Optional[float] = None) -> int:
        """Tear down pages nobody has touched within the idle TTL."""
        if now is None:
            now = time.time()
        ttl = settings.page_idle_ttl_sec
        stale = [key for key, page in self._pages.items() if now - page.last_seen > ttl]
        for uid, kind in stale:
            self.leave(uid, kind)
            logger.warning(f"[CLEANUP] Removed idle {kind.value} page for {uid}")
        return len(stale)

    def get(self, uid: str, kind: Modality) -> Optional[AnalysisPage]:
        return self._pages.get((uid, kind))

    def leave(self, uid: str, kind: Modality) -> bool:
        page = self._pages.pop((uid, kind), None)
        if page is None:
            return False
        page.teardown()
        return True

    def teardown_all(self) -> None:
        for uid, kind in list(self._pages):
            self.leave(uid, kind)

    def __len__(self) -> int:
        return len(self._pages)


page_registry = PageRegistry()
