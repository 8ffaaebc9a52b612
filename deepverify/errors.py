"""
Exception taxonomy.

ValidationError is recovered locally (the user sees a notification, the page
state is unchanged). SessionAbsent is only ever handled by redirecting to the
auth entry point.
"""


class DeepVerifyError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DeepVerifyError):
    """Bad user input: empty text, missing or oversized image."""

    status_code = 400


class SessionAbsent(DeepVerifyError):
    """No active auth session for the request."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AnalysisInProgress(DeepVerifyError):
    status_code = 409

    def __init__(self, message: str = "Analysis already in progress"):
        super().__init__(message)
