from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from deepverify.schemas.verification import Modality, VerificationResult


class PageStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    RESOLVED = "resolved"


class PageSnapshot(BaseModel):
    page: Modality
    status: PageStatus
    analyzing: bool
    has_input: bool
    can_analyze: bool
    input_preview: Optional[str] = None   # raw text or image data URL
    result: Optional[VerificationResult] = None
    back: str = "/home"


class FeatureCard(BaseModel):
    title: str
    description: str
    path: str
    disabled: bool = False


class HomeResponse(BaseModel):
    email: Optional[str] = None
    features: List[FeatureCard]
    about: List[str]
