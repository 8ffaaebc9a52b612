from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field


class Label(str, Enum):
    TRUE = "TRUE"
    FAKE = "FAKE"


class Modality(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class VerificationResult(BaseModel):
    label: Label
    confidence: float = Field(description="Synthetic score in (floor, 100]")
    details: str
    headline: str   # e.g., "Likely Authentic", "Potentially Manipulated"

    @computed_field
    @property
    def confidence_display(self) -> str:
        return f"{self.confidence:.1f}%"


class TextAnalysisRequest(BaseModel):
    text: Optional[str] = None
