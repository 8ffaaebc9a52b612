"""
Session routes: current user and sign-out.
"""

from fastapi import APIRouter, Depends

from deepverify.config import settings
from deepverify.core.auth import get_current_session, sign_out
from deepverify.schemas.auth import LogoutResponse, Session, SessionUser

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/session", response_model=SessionUser)
async def current_session(session: Session = Depends(get_current_session)):
    return SessionUser(uid=session.uid, email=session.email)


@router.post("/logout", response_model=LogoutResponse)
async def logout(session: Session = Depends(get_current_session)):
    """Sign out with the provider; every mounted page of the user is torn down."""
    await sign_out(session)
    return LogoutResponse(message="Logged out successfully", redirect=settings.auth_entry_path)
