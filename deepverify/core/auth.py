"""
Session boundary: resolve the caller's auth session from a provider ID token,
and sign out.

The Firebase client is accessed at call-time via the integration module so it
picks up the instance initialized during the FastAPI lifespan. Provider calls
block on HTTPS (revocation checks, key fetches), so they run in a worker
thread. Session events are published back on the event loop.
"""

import asyncio
import logging
from typing import Optional

from fastapi import Header, HTTPException
from firebase_admin import auth

from deepverify.core.session_events import SessionEvent, session_bus
from deepverify.errors import SessionAbsent
from deepverify.integrations import firebase as firebase_module
from deepverify.schemas.auth import Session

logger = logging.getLogger(__name__)


def _get_client():
    client = firebase_module.client
    if not client:
        raise HTTPException(status_code=503, detail="Authentication service unavailable.")
    return client


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise SessionAbsent()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise SessionAbsent()
    return token.strip()


async def _notify_revoked(client, token: str) -> None:
    """Look up whose token was revoked and push the change to their pages."""
    try:
        claims = await asyncio.to_thread(client.verify_id_token, token, check_revoked=False)
    except (auth.InvalidIdTokenError, ValueError):
        return
    uid = claims.get("uid")
    if uid:
        session_bus.publish(uid, SessionEvent.TOKEN_REVOKED)


async def resolve_session(token: str) -> Session:
    """Verify `token` with the identity provider. Raises SessionAbsent if it is not usable."""
    client = _get_client()
    try:
        claims = await asyncio.to_thread(client.verify_id_token, token)
    except auth.RevokedIdTokenError:
        logger.info("[AUTH] Revoked ID token presented")
        await _notify_revoked(client, token)
        raise SessionAbsent("Session has been revoked")
    except auth.UserDisabledError:
        logger.info("[AUTH] Token belongs to a disabled user")
        raise SessionAbsent("User account is disabled")
    except (auth.InvalidIdTokenError, ValueError) as e:
        logger.info(f"[AUTH] Invalid ID token: {e}")
        raise SessionAbsent()
    except auth.CertificateFetchError as e:
        logger.error(f"[AUTH] Could not reach identity provider: {e}")
        raise HTTPException(status_code=503, detail="Authentication service unavailable.")

    uid = claims.get("uid")
    if not uid:
        raise SessionAbsent()
    return Session(uid=uid, email=claims.get("email"), token=token)


async def get_current_session(authorization: Optional[str] = Header(None)) -> Session:
    """FastAPI dependency: the verified session or SessionAbsent."""
    return await resolve_session(extract_bearer_token(authorization))


async def sign_out(session: Session) -> None:
    """Revoke the user's refresh tokens and push SIGNED_OUT to their pages."""
    client = _get_client()
    try:
        await asyncio.to_thread(client.revoke_refresh_tokens, session.uid)
    except auth.UserNotFoundError:
        logger.warning(f"[AUTH] Sign-out for unknown user {session.uid}")
    session_bus.publish(session.uid, SessionEvent.SIGNED_OUT)
    logger.info(f"[AUTH] Signed out {session.uid}")
