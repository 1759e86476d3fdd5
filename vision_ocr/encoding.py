"""Base64 encoding of image bytes for embedding in a provider request."""

import base64
import logging

from .errors import PayloadTooLargeError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"

# Leading signatures of the image types the provider accepts
_SIGNATURES: list[tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]


def encode_image(data: bytes, max_bytes: int | None = None) -> str:
    """Encode raw image bytes as base64 text.

    Raises PayloadTooLargeError if ``max_bytes`` is given and exceeded.
    """
    if max_bytes is not None and len(data) > max_bytes:
        logger.warning("Image rejected: %d bytes exceeds limit of %d", len(data), max_bytes)
        raise PayloadTooLargeError(len(data), max_bytes)
    return base64.b64encode(data).decode("ascii")


def guess_media_type(data: bytes) -> str:
    """Detect the image media type from its leading bytes, falling back to PNG."""
    for signature, media_type in _SIGNATURES:
        if data.startswith(signature):
            return media_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return DEFAULT_MEDIA_TYPE
