"""Validation helpers for base64-encoded input images."""

import base64
import binascii
from typing import Optional

from cortana_ocr_api.errors import InvalidInputError

# Leading bytes (hex) of the accepted formats.
IMAGE_SIGNATURES = {
    "ffd8": "jpeg",
    "8950": "png",
    "4749": "gif",
}


def detect_image_format(data: bytes) -> Optional[str]:
    """Return the image format named by the leading bytes, or None."""
    header = data[:4].hex().lower()
    for signature, image_format in IMAGE_SIGNATURES.items():
        if header.startswith(signature):
            return image_format
    return None


def is_valid_base64_image(value: str) -> bool:
    """Check that value decodes to bytes starting with a known image signature."""
    try:
        decode_base64_image(value)
    except InvalidInputError:
        return False
    return True


def decode_base64_image(value: Optional[str]) -> bytes:
    """Decode a request image, raising InvalidInputError when it is unusable.

    Args:
        value: Base64 text from the request body (may be missing).

    Returns:
        The decoded image bytes.

    Raises:
        InvalidInputError: If the value is empty, not base64, or not a
            JPEG/PNG/GIF.
    """
    if not value:
        raise InvalidInputError("Invalid base64_image.")
    try:
        data = base64.b64decode(value)
    except (binascii.Error, ValueError, TypeError) as e:
        raise InvalidInputError("Invalid base64_image.") from e
    if detect_image_format(data) is None:
        raise InvalidInputError("Invalid base64_image.")
    return data
