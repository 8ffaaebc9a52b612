"""
DeepVerify API entry point.

    uvicorn deepverify.main:app --port 8000
"""

import logging
import os

from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load environment variables before anything reads them
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from deepverify.api import auth, pages, system  # noqa: E402
from deepverify.config import settings  # noqa: E402
from deepverify.errors import DeepVerifyError, SessionAbsent  # noqa: E402
from deepverify.integrations import firebase, redis_client  # noqa: E402
from deepverify.services.page_service import page_registry  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    firebase.initialize()
    redis_client.initialize()
    yield
    page_registry.teardown_all()
    logger.info("[SHUTDOWN] All mounted pages torn down")


app = FastAPI(title="DeepVerify API", lifespan=lifespan)


def _cors_headers(headers: dict | None = None) -> dict:
    """Error responses skip the CORS middleware; add the headers by hand."""
    headers = dict(headers or {})
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Credentials"] = "true"
    headers["Access-Control-Allow-Methods"] = "*"
    headers["Access-Control-Allow-Headers"] = "*"
    return headers


@app.exception_handler(SessionAbsent)
async def session_absent_handler(request: Request, exc: SessionAbsent):
    logger.info(f"[AUTH] {request.url.path}: {exc.message} -> {settings.auth_entry_path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "redirect": settings.auth_entry_path},
        headers=_cors_headers({"Location": settings.auth_entry_path}),
    )


@app.exception_handler(DeepVerifyError)
async def deepverify_error_handler(request: Request, exc: DeepVerifyError):
    logger.info(f"[ERROR HANDLER] {exc.status_code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=_cors_headers(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info(f"[ERROR HANDLER] {exc.status_code} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=_cors_headers(getattr(exc, "headers", None)),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"[ERROR HANDLER] Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
        headers=_cors_headers(),
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system.router)
app.include_router(auth.router)
app.include_router(pages.router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("deepverify.main:app", host="0.0.0.0", port=port, log_level="info")
