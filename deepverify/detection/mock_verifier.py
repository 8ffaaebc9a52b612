"""
Mock verification workflow.

Produces a synthetic TRUE/FAKE verdict after a fixed simulated delay. Text
verdicts come from a literal substring check; image verdicts come from an
independent random draw and never look at the pixels. No model is involved.

`rng` defaults to the `random` module; tests pass a seeded `random.Random`.
"""

import asyncio
import logging
import math
import random
from typing import Optional

from deepverify.config import settings
from deepverify.core.file_validator import check_image_size
from deepverify.errors import ValidationError
from deepverify.schemas.verification import Label, VerificationResult

logger = logging.getLogger(__name__)

FAKE_MARKERS = ("fake", "false")

TEXT_DETAILS = {
    Label.FAKE: (
        "This news article contains multiple indicators of misinformation. "
        "Cross-referencing with verified sources shows inconsistencies."
    ),
    Label.TRUE: (
        "This news article appears authentic based on language patterns "
        "and cross-referencing with verified databases."
    ),
}

IMAGE_DETAILS = {
    Label.FAKE: (
        "Image analysis detected potential manipulation. EXIF data inconsistencies "
        "and pixel-level artifacts suggest possible editing."
    ),
    Label.TRUE: (
        "Image appears authentic. Metadata is consistent, no signs of manipulation "
        "detected in the analyzed regions."
    ),
}

TEXT_HEADLINES = {Label.TRUE: "Likely Authentic", Label.FAKE: "Potentially Fake"}
IMAGE_HEADLINES = {Label.TRUE: "Likely Authentic", Label.FAKE: "Potentially Manipulated"}


def draw_confidence(floor: float, rng=random) -> float:
    """Uniform value in (floor, 100]."""
    value = floor + (1.0 - rng.random()) * (100.0 - floor)
    # Draws within half an ULP of the floor round onto it.
    return max(value, math.nextafter(floor, 100.0))



def classify_text(text: str) -> Label:
    lowered = text.lower()
    if any(marker in lowered for marker in FAKE_MARKERS):
        return Label.FAKE
    return Label.TRUE


def classify_image(rng=random) -> Label:
    if rng.random() > 1.0 - settings.image_fake_probability:
        return Label.FAKE
    return Label.TRUE


def validate_text(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise ValidationError("Please enter some text to analyze")
    return text


def build_text_result(text: str, rng=random) -> VerificationResult:
    label = classify_text(text)
    return VerificationResult(
        label=label,
        confidence=draw_confidence(settings.text_confidence_floor, rng),
        details=TEXT_DETAILS[label],
        headline=TEXT_HEADLINES[label],
    )


def build_image_result(rng=random) -> VerificationResult:
    label = classify_image(rng)
    return VerificationResult(
        label=label,
        confidence=draw_confidence(settings.image_confidence_floor, rng),
        details=IMAGE_DETAILS[label],
        headline=IMAGE_HEADLINES[label],
    )


async def verify_text(text: str, *, delay: Optional[float] = None, rng=random) -> VerificationResult:
    """Validate, wait out the simulated latency, then return the text verdict."""
    validate_text(text)
    if delay is None:
        delay = settings.text_analysis_delay_sec

    await asyncio.sleep(delay)
    result = build_text_result(text, rng)
    logger.info(f"[ANALYSIS] Text verdict {result.label.value} ({result.confidence:.1f}%) for {len(text)} chars")
    return result


async def verify_image(payload: bytes, *, delay: Optional[float] = None, rng=random) -> VerificationResult:
    """Reject oversized payloads up front, then return a random image verdict."""
    check_image_size(len(payload))
    if delay is None:
        delay = settings.image_analysis_delay_sec

    await asyncio.sleep(delay)
    result = build_image_result(rng)
    logger.info(f"[ANALYSIS] Image verdict {result.label.value} ({result.confidence:.1f}%) for {len(payload)} bytes")
    return result
