"""
Page routes: Home, Text Analysis, Image Analysis.

Every route requires a session. Opening an analysis page mounts it for the
user; `/leave` tears it down. Analyze calls return immediately in the
ANALYZING state unless `?wait=true` is passed.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from deepverify.core.auth import get_current_session
from deepverify.core.file_validator import check_image_size, validate_image
from deepverify.core.rate_limiter import check_analysis_rate
from deepverify.errors import AnalysisInProgress
from deepverify.navigation import HOME_PATH, home_payload, resolve_feature
from deepverify.schemas.auth import Session
from deepverify.schemas.pages import HomeResponse, PageSnapshot
from deepverify.schemas.verification import Modality, TextAnalysisRequest
from deepverify.services.page_service import AnalysisPage, page_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


async def _start_analysis(page: AnalysisPage, wait: bool) -> PageSnapshot:
    # Only a call that will actually start a run counts against the throttle.
    if page.analyzing:
        raise AnalysisInProgress()
    page.check_ready()
    check_analysis_rate(page.uid)
    if not page.analyze():
        raise AnalysisInProgress()
    if wait:
        await page.wait()
    return page.snapshot()


def _leave(session: Session, kind: Modality) -> dict:
    left = page_registry.leave(session.uid, kind)
    return {"left": left, "redirect": HOME_PATH}


# ---------------------------------------------------------------------------
# Home / navigation
# ---------------------------------------------------------------------------


@router.get("/home", response_model=HomeResponse)
async def home(session: Session = Depends(get_current_session)):
    return home_payload(session.email)


@router.get("/navigate")
async def navigate(path: str = Query(...), session: Session = Depends(get_current_session)):
    """Resolve a feature card click. Disabled placeholders go nowhere."""
    card = resolve_feature(path)
    if card is None:
        raise HTTPException(status_code=404, detail="Feature not available")
    return {"redirect": card.path}


# ---------------------------------------------------------------------------
# Text Analysis
# ---------------------------------------------------------------------------


@router.get("/text-analysis", response_model=PageSnapshot)
async def open_text_page(session: Session = Depends(get_current_session)):
    return page_registry.mount(session, Modality.TEXT).snapshot()


@router.put("/text-analysis/text", response_model=PageSnapshot)
async def update_text(payload: TextAnalysisRequest, session: Session = Depends(get_current_session)):
    page = page_registry.mount(session, Modality.TEXT)
    page.set_text(payload.text or "")
    return page.snapshot()


@router.post("/text-analysis/analyze", response_model=PageSnapshot)
async def analyze_text(
    payload: Optional[TextAnalysisRequest] = None,
    wait: bool = False,
    session: Session = Depends(get_current_session),
):
    page = page_registry.mount(session, Modality.TEXT)
    if payload is not None and payload.text is not None and not page.analyzing:
        page.set_text(payload.text)
    return await _start_analysis(page, wait)


@router.delete("/text-analysis", response_model=PageSnapshot)
async def clear_text(session: Session = Depends(get_current_session)):
    page = page_registry.mount(session, Modality.TEXT)
    page.clear()
    return page.snapshot()


@router.post("/text-analysis/leave")
async def leave_text_page(session: Session = Depends(get_current_session)):
    return _leave(session, Modality.TEXT)


# ---------------------------------------------------------------------------
# Image Analysis
# ---------------------------------------------------------------------------


@router.get("/image-analysis", response_model=PageSnapshot)
async def open_image_page(session: Session = Depends(get_current_session)):
    return page_registry.mount(session, Modality.IMAGE).snapshot()


@router.post("/image-analysis/upload", response_model=PageSnapshot)
async def upload_image(file: UploadFile, session: Session = Depends(get_current_session)):
    page = page_registry.mount(session, Modality.IMAGE)
    if file.size is not None:
        check_image_size(file.size)
    content = await file.read()
    filename = file.filename or "uploaded_image"
    if page.analyzing:
        raise AnalysisInProgress()
    # Pillow decode runs off the event loop
    mime = await run_in_threadpool(validate_image, filename, content)
    page.upload_image(filename, content, mime=mime)
    return page.snapshot()


@router.post("/image-analysis/analyze", response_model=PageSnapshot)
async def analyze_image(wait: bool = False, session: Session = Depends(get_current_session)):
    page = page_registry.mount(session, Modality.IMAGE)
    return await _start_analysis(page, wait)


@router.delete("/image-analysis", response_model=PageSnapshot)
async def clear_image(session: Session = Depends(get_current_session)):
    page = page_registry.mount(session, Modality.IMAGE)
    page.clear()
    return page.snapshot()


@router.post("/image-analysis/leave")
async def leave_image_page(session: Session = Depends(get_current_session)):
    return _leave(session, Modality.IMAGE)
