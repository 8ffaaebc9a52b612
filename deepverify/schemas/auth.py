from typing import Optional

from pydantic import BaseModel


class SessionUser(BaseModel):
    uid: str
    email: Optional[str] = None


class LogoutResponse(BaseModel):
    message: str
    redirect: str


class Session(SessionUser):
    """Authenticated-user context threaded through page initialization."""

    token: str
