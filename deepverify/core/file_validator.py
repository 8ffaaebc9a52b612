"""
Image upload validation and in-memory encoding.

Sets PIL.Image.MAX_IMAGE_PIXELS so a tiny file cannot expand into a
decompression bomb while Pillow verifies it.
"""

import base64
import io
import logging
import os

from PIL import Image, UnidentifiedImageError

from deepverify.config import settings
from deepverify.errors import ValidationError

Image.MAX_IMAGE_PIXELS = 40_000_000

logger = logging.getLogger(__name__)

_FORMAT_MIME = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "bmp": "image/bmp",
}


def check_image_size(filesize: int) -> None:
    """Raises ValidationError (413) for anything over the upload cap."""
    if filesize > settings.max_image_upload_bytes:
        raise ValidationError(
            f"Image size should be less than {settings.max_image_upload_mb}MB",
            status_code=413,
        )


def validate_image(filename: str, payload: bytes) -> str:
    """Check extension, size and content. Returns the image MIME type."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in settings.allowed_image_extensions:
        raise ValidationError("Unsupported file format.", status_code=415)

    check_image_size(len(payload))

    if not payload:
        raise ValidationError("Please upload an image first")

    try:
        with Image.open(io.BytesIO(payload)) as img:
            img.verify()
            actual_format = (img.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as e:
        logger.warning(f"Rejected corrupted upload ({filename}): {e}")
        raise ValidationError("Invalid file content or format mismatch.")

    mime = _FORMAT_MIME.get(actual_format)
    if mime is None:
        logger.warning(f"Rejected upload ({filename}) with format {actual_format!r}")
        raise ValidationError("Invalid file content or format mismatch.")
    return mime


def encode_data_url(payload: bytes, mime: str) -> str:
    """Encode an accepted image for in-memory display."""
    return f"data:{mime};base64,{base64.b64encode(payload).decode('ascii')}"
