"""Resolve an image reference (URL or filesystem path) to raw bytes.

A single fetch attempt is made for URLs. For local paths the read itself
decides success; no existence pre-check is trusted. Bytes are returned
as-is with no content sniffing.
"""

import asyncio
import logging
import os
import stat
from urllib.parse import urlparse

import httpx

from .config import settings
from .errors import FetchError, FileReadError

logger = logging.getLogger(__name__)


def is_url(ref: str) -> bool:
    """Return True if ``ref`` parses as a locator with both a scheme and a host."""
    try:
        parsed = urlparse(ref)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


async def resolve_source(ref: str, http_client: httpx.AsyncClient | None = None) -> bytes:
    """Fetch or read the bytes behind ``ref``.

    Raises FetchError for remote failures and FileReadError for local ones.
    """
    if is_url(ref):
        if http_client is not None:
            return await fetch_url(ref, http_client)
        async with httpx.AsyncClient(
            timeout=float(settings.FETCH_TIMEOUT_SECONDS),
            follow_redirects=True,
        ) as client:
            return await fetch_url(ref, client)
    return await read_file(ref)


async def fetch_url(url: str, client: httpx.AsyncClient) -> bytes:
    try:
        resp = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning("Image fetch failed for %s: %s", url, e)
        raise FetchError(url, str(e) or e.__class__.__name__) from e

    if not resp.is_success:
        logger.warning("Image fetch for %s returned HTTP %d", url, resp.status_code)
        raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)

    logger.info("Fetched image from %s (%d bytes)", url, len(resp.content))
    return resp.content


async def read_file(path: str, max_bytes: int | None = None) -> bytes:
    """Read a regular file, at most one byte past ``max_bytes`` so oversize is still detectable."""
    limit = (max_bytes if max_bytes is not None else settings.MAX_IMAGE_BYTES) + 1
    try:
        data = await asyncio.to_thread(_read_regular_file, path, limit)
    except FileNotFoundError as e:
        raise FileReadError(path, "file not found") from e
    except IsADirectoryError as e:
        raise FileReadError(path, "not a regular file") from e
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e

    if not data:
        raise FileReadError(path, "file is empty")

    logger.info("Read image from %s (%d bytes)", path, len(data))
    return data


def _read_regular_file(path: str, limit: int) -> bytes:
    # Non-blocking open so a FIFO without a writer cannot stall the read
    fd = os.open(path, os.O_RDONLY | getattr(os, "O_NONBLOCK", 0))
    try:
        if not stat.S_ISREG(os.fstat(fd).st_mode):
            raise FileReadError(path, "not a regular file")
        with os.fdopen(fd, "rb", closefd=False) as f:
            return f.read(limit)
    finally:
        os.close(fd)
