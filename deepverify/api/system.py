"""
System / health routes.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from deepverify.services.page_service import page_registry

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {"status": "healthy", "mounted_pages": len(page_registry)}


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    return "User-agent: *\nDisallow: /"
