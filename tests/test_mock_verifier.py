"""
Unit tests for deepverify/detection/mock_verifier.py.

Delays are passed as 0 so nothing sleeps; the random source is scripted with
FixedRandom where an exact draw matters.
"""

import random

import pytest

from deepverify.config import settings
from deepverify.detection.mock_verifier import (
    IMAGE_DETAILS,
    TEXT_DETAILS,
    classify_text,
    draw_confidence,
    verify_image,
    verify_text,
)
from deepverify.errors import ValidationError
from deepverify.schemas.verification import Label
from tests.conftest import FixedRandom

TEXT_FAKE = (
    "This news article contains multiple indicators of misinformation. "
    "Cross-referencing with verified sources shows inconsistencies."
)
TEXT_TRUE = (
    "This news article appears authentic based on language patterns and "
    "cross-referencing with verified databases."
)
IMAGE_FAKE = (
    "Image analysis detected potential manipulation. EXIF data inconsistencies and "
    "pixel-level artifacts suggest possible editing."
)
IMAGE_TRUE = (
    "Image appears authentic. Metadata is consistent, no signs of manipulation "
    "detected in the analyzed regions."
)


# ---------------------------------------------------------------------------
# Text classification
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", [
    "Breaking: this is FAKE news",
    "That claim is False.",
    "fakery everywhere",
    "a statement proven falsehood",
])
def test_classify_text_flags_markers_case_insensitively(text):
    assert classify_text(text) is Label.FAKE


@pytest.mark.parametrize("text", ["Local bakery wins award", "f a k e", "fals e"])
def test_classify_text_without_markers_is_true(text):
    assert classify_text(text) is Label.TRUE


async def test_verify_text_fake_scenario():
    result = await verify_text("Breaking: this is FAKE news", delay=0)
    assert result.label is Label.FAKE
    assert 70.0 < result.confidence <= 100.0
    assert result.details == TEXT_FAKE
    assert result.headline == "Potentially Fake"


async def test_verify_text_true_scenario():
    result = await verify_text("Local bakery wins award", delay=0)
    assert result.label is Label.TRUE
    assert 70.0 < result.confidence <= 100.0
    assert result.details == TEXT_TRUE
    assert result.headline == "Likely Authentic"


@pytest.mark.parametrize("text", ["", "   ", "\n\t "])
async def test_verify_text_rejects_blank_input(text):
    with pytest.raises(ValidationError) as exc:
        await verify_text(text, delay=0)
    assert exc.value.status_code == 400


async def test_verify_text_keeps_surrounding_whitespace_in_classification():
    result = await verify_text("   false alarm   ", delay=0)
    assert result.label is Label.FAKE


# ---------------------------------------------------------------------------
# Image classification
# ---------------------------------------------------------------------------


async def test_verify_image_draw_above_threshold_is_fake():
    result = await verify_image(b"\x89PNG", delay=0, rng=FixedRandom(0.75, 0.5))
    assert result.label is Label.FAKE
    assert result.details == IMAGE_FAKE
    assert result.headline == "Potentially Manipulated"
    assert result.confidence == pytest.approx(87.5)


async def test_verify_image_draw_at_threshold_is_true():
    result = await verify_image(b"\x89PNG", delay=0, rng=FixedRandom(0.6, 0.0))
    assert result.label is Label.TRUE
    assert result.details == IMAGE_TRUE
    assert result.confidence == pytest.approx(100.0)


async def test_verify_image_rejects_oversized_payload_before_sleeping(monkeypatch):
    slept = []

    async def fake_sleep(delay):
        slept.append(delay)

    monkeypatch.setattr("deepverify.detection.mock_verifier.asyncio.sleep", fake_sleep)
    payload = b"\0" * (settings.max_image_upload_bytes + 1)
    with pytest.raises(ValidationError) as exc:
        await verify_image(payload)
    assert exc.value.status_code == 413
    assert slept == []


async def test_verify_image_accepts_exactly_five_mib():
    payload = b"\0" * 5_242_880
    result = await verify_image(payload, delay=0)
    assert 75.0 < result.confidence <= 100.0


async def test_verify_image_fake_rate_is_roughly_forty_percent():
    rng = random.Random(1234)
    labels = [(await verify_image(b"x", delay=0, rng=rng)).label for _ in range(2000)]
    fake_share = labels.count(Label.FAKE) / len(labels)
    assert 0.35 < fake_share < 0.45


# ---------------------------------------------------------------------------
# Confidence and detail templates
# ---------------------------------------------------------------------------


def test_draw_confidence_bounds():
    assert draw_confidence(70.0, FixedRandom(0.0)) == pytest.approx(100.0)
    assert draw_confidence(70.0, FixedRandom(0.999999)) > 70.0


@pytest.mark.parametrize("floor", [70.0, 75.0])
def test_largest_random_draw_stays_above_floor(floor):
    # 1 - 2**-53 is the largest value random() can return.
    assert draw_confidence(floor, FixedRandom(1.0 - 2**-53)) > floor


def test_confidence_stays_in_range_over_many_draws():
    rng = random.Random(7)
    for _ in range(500):
        assert 70.0 < draw_confidence(70.0, rng) <= 100.0
        assert 75.0 < draw_confidence(75.0, rng) <= 100.0


def test_exactly_two_detail_strings_per_modality():
    assert set(TEXT_DETAILS) == {Label.TRUE, Label.FAKE}
    assert set(IMAGE_DETAILS) == {Label.TRUE, Label.FAKE}
    assert TEXT_DETAILS[Label.FAKE] == TEXT_FAKE
    assert IMAGE_DETAILS[Label.TRUE] == IMAGE_TRUE


async def test_confidence_display_has_one_decimal():
    result = await verify_image(b"x", delay=0, rng=FixedRandom(0.1, 0.5))
    assert result.confidence_display == "87.5%"


async def test_verify_text_uses_configured_delay(monkeypatch):
    slept = []

    async def fake_sleep(delay):
        slept.append(delay)

    monkeypatch.setattr("deepverify.detection.mock_verifier.asyncio.sleep", fake_sleep)
    await verify_text("hello")
    assert slept == [settings.text_analysis_delay_sec] == [2.0]
