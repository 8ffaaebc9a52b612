from deepverify.schemas.verification import Label, Modality, TextAnalysisRequest, VerificationResult
from deepverify.schemas.pages import FeatureCard, HomeResponse, PageSnapshot, PageStatus
from deepverify.schemas.auth import LogoutResponse, Session, SessionUser

__all__ = [
    "Label",
    "Modality",
    "TextAnalysisRequest",
    "VerificationResult",
    "FeatureCard",
    "HomeResponse",
    "PageSnapshot",
    "PageStatus",
    "LogoutResponse",
    "Session",
    "SessionUser",
]
