"""
Firebase Auth integration (hosted identity provider).

`client` starts as None. Call `initialize()` inside the FastAPI lifespan
context manager before handling any requests. Consuming modules reference
`firebase.client` at call time so tests can swap in a mock.
"""

import json
import logging

import firebase_admin
from firebase_admin import auth, credentials

from deepverify.config import settings

logger = logging.getLogger(__name__)

# Set by initialize(). None until the lifespan has run.
client = None  # FirebaseAuthClient | None


class FirebaseAuthClient:
    """Thin wrapper binding the firebase_admin auth calls to one App."""

    def __init__(self, app: firebase_admin.App):
        self._app = app

    def verify_id_token(self, token: str, check_revoked: bool | None = None) -> dict:
        if check_revoked is None:
            check_revoked = settings.check_revoked_tokens
        return auth.verify_id_token(token, app=self._app, check_revoked=check_revoked)

    def revoke_refresh_tokens(self, uid: str) -> None:
        auth.revoke_refresh_tokens(uid, app=self._app)


def initialize() -> None:
    """Initialize Firebase Admin SDK and bind the module-level `client`."""
    global client

    if not firebase_admin._apps:
        if settings.firebase_service_account:
            try:
                sa_info = json.loads(settings.firebase_service_account)
                cred = credentials.Certificate(sa_info)
                firebase_admin.initialize_app(cred)
            except Exception as e:
                logger.error(f"Error initializing Firebase with service account: {e}")
                firebase_admin.initialize_app()
        else:
            firebase_admin.initialize_app()

    client = FirebaseAuthClient(firebase_admin.get_app())
    logger.info("[STARTUP] Firebase Auth initialized")
