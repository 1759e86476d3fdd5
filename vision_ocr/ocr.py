"""Extraction pipeline: resolve source -> encode -> build prompt -> call model -> format.

Each stage feeds the next; nothing is shared between calls, so separate
extractions may run concurrently on the same client.
"""

import logging
import time
from typing import Any

import httpx

from .config import settings
from .encoding import encode_image, guess_media_type
from .formatting import format_result
from .models import OutputFormat
from .prompts import build_messages
from .provider_client import AnthropicClient
from .source import resolve_source

logger = logging.getLogger(__name__)


async def extract_from_bytes(
    image_bytes: bytes,
    fmt: OutputFormat,
    client: AnthropicClient,
    max_bytes: int | None = None,
) -> Any | None:
    """Run extraction on already-loaded image bytes.

    Returns a string (text, markdown) or a decoded JSON value, or None if
    the provider produced no valid result.
    """
    start = time.monotonic()

    image_b64 = encode_image(image_bytes, max_bytes if max_bytes is not None else settings.MAX_IMAGE_BYTES)
    media_type = guess_media_type(image_bytes)
    messages = build_messages(image_b64, fmt, media_type)

    # Log sizes only, never image content
    logger.info(
        "Extracting: format=%s size=%d bytes media_type=%s",
        fmt.value, len(image_bytes), media_type,
    )

    raw = await client.extract(messages)
    if raw is None:
        return None

    result = format_result(raw, fmt)
    logger.info("Extraction finished in %dms", int((time.monotonic() - start) * 1000))
    return result


async def extract_from_image(
    source: str,
    fmt: OutputFormat,
    client: AnthropicClient,
    http_client: httpx.AsyncClient | None = None,
) -> Any | None:
    """Resolve ``source`` (URL or path) and run extraction on it.

    Source and size errors propagate before the provider is called.
    """
    image_bytes = await resolve_source(source, http_client)
    return await extract_from_bytes(image_bytes, fmt, client)


class Ocr:
    """Bind an image source so it can be extracted in several formats.

    Example:
        async with AnthropicClient() as client:
            text = await Ocr("scan.png", client).extract(OutputFormat.MARKDOWN)
    """

    def __init__(
        self,
        source: str,
        client: AnthropicClient,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.source = source
        self._client = client
        self._http_client = http_client

    async def extract(self, fmt: OutputFormat = OutputFormat.TEXT) -> Any | None:
        return await extract_from_image(self.source, fmt, self._client, self._http_client)
