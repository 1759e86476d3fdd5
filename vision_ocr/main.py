"""FastAPI OCR service: wraps the extraction pipeline behind an HTTP endpoint.

Images are processed in memory only; nothing is written to disk and image
content is never logged.
"""

import logging
import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .errors import MalformedStructuredOutput, PayloadTooLargeError, SourceUnavailable
from .models import ExtractResponse, OutputFormat
from .ocr import extract_from_bytes
from .provider_client import AnthropicClient
from .source import is_url, resolve_source

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_client: AnthropicClient | None = None
_http_client: httpx.AsyncClient | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the provider client on startup; missing credentials abort startup."""
    global _client, _http_client

    _client = AnthropicClient()
    _http_client = httpx.AsyncClient(
        timeout=float(settings.FETCH_TIMEOUT_SECONDS),
        follow_redirects=True,
    )
    logger.info("OCR service ready (model=%s)", _client.model)

    yield

    await _client.aclose()
    await _http_client.aclose()
    _client = None
    _http_client = None


app = FastAPI(title="Vision OCR", version=__version__, lifespan=lifespan)


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@app.post("/api/v1/extract", response_model=ExtractResponse)
async def extract(
    file: UploadFile | None = File(None),
    source: str | None = Form(None),
    output_format: OutputFormat = Form(OutputFormat.TEXT, alias="format"),
):
    """Extract text from an uploaded image or an image URL."""
    start = time.monotonic()

    if (file is None) == (not source):
        return _error(400, "Provide exactly one of 'file' or 'source'")

    if file is not None:
        image_bytes = await file.read()
        if not image_bytes:
            return _error(400, "Empty file uploaded")
    else:
        if not is_url(source):
            return _error(400, "'source' must be an absolute URL")
        try:
            image_bytes = await resolve_source(source, _http_client)
        except SourceUnavailable as e:
            return _error(422, str(e))

    logger.info("Processing extraction: format=%s size=%d bytes", output_format.value, len(image_bytes))

    try:
        result = await extract_from_bytes(image_bytes, output_format, _client)
    except PayloadTooLargeError as e:
        return _error(413, str(e))
    except MalformedStructuredOutput as e:
        return _error(422, str(e))

    if result is None:
        return _error(502, "Failed to extract text from image")

    return ExtractResponse(
        format=output_format,
        result=result,
        processing_time_ms=int((time.monotonic() - start) * 1000),
    )


@app.get("/health")
async def health():
    """Return service status and the configured model."""
    return {
        "status": "healthy",
        "model": _client.model if _client is not None else settings.OCR_MODEL,
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
