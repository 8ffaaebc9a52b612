"""
Page paths and the Home feature catalogue.

The Real-time News card is a placeholder: it is listed but disabled and its
path resolves to nothing.
"""

from typing import Optional

from deepverify.schemas.pages import FeatureCard, HomeResponse
from deepverify.schemas.verification import Modality

HOME_PATH = "/home"
TEXT_ANALYSIS_PATH = "/text-analysis"
IMAGE_ANALYSIS_PATH = "/image-analysis"
PLACEHOLDER_PATH = "#"

FEATURES = [
    FeatureCard(
        title="Text Analysis",
        description="Analyze news articles and text content for authenticity",
        path=TEXT_ANALYSIS_PATH,
    ),
    FeatureCard(
        title="Image Analysis",
        description="Verify the authenticity of news images and detect manipulation",
        path=IMAGE_ANALYSIS_PATH,
    ),
    FeatureCard(
        title="Real-time News",
        description="Monitor and analyze live news videos (Coming soon)",
        path=PLACEHOLDER_PATH,
        disabled=True,
    ),
]

ABOUT = [
    "DeepVerify uses advanced machine learning algorithms to detect fake news and misinformation "
    "in crime reporting. Our system analyzes text, images, and cross-references with verified databases.",
    "By linking news with official crime records, we help build public trust and promote truthful information.",
]

PAGE_PATHS = {
    Modality.TEXT: TEXT_ANALYSIS_PATH,
    Modality.IMAGE: IMAGE_ANALYSIS_PATH,
}


def resolve_feature(path: str) -> Optional[FeatureCard]:
    """Return the enabled feature card for `path`, or None (disabled cards are inert)."""
    for card in FEATURES:
        if card.path == path and not card.disabled:
            return card
    return None


def home_payload(email: Optional[str]) -> HomeResponse:
    return HomeResponse(
        email=email,
        features=[card.model_copy() for card in FEATURES],
        about=list(ABOUT),
    )
