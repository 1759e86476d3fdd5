"""HTTP client for the hosted vision model (Anthropic Messages API).

Uses httpx with configurable timeouts and tenacity for retry with
exponential backoff on 429/5xx responses, connection errors and timeouts.
The model is forced to answer through a single tool whose input schema is
the one-string-field ``OcrResponse`` record.
"""

import logging
import time

import httpx
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import settings
from .errors import (
    ConfigurationError,
    ProviderError,
    ProviderInvocationFailure,
    ProviderResponseError,
    ProviderUnavailable,
)
from .models import OcrResponse

logger = logging.getLogger(__name__)

TOOL_NAME = "ocr_response"

RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504, 529}


class AnthropicClient:
    """Async client for structured OCR calls with retry and backoff."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        max_tokens: int | None = None,
        timeout: int | None = None,
        connect_timeout: int | None = None,
        retry_attempts: int | None = None,
        retry_delay: float | None = None,
        retry_backoff: float | None = None,
    ):
        self._api_key = api_key or settings.ANTHROPIC_API_KEY
        if not self._api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY is not set. Export it or add it to a .env file."
            )

        self.model = model or settings.OCR_MODEL
        self._base_url = (base_url or settings.ANTHROPIC_BASE_URL).rstrip("/")
        self._max_tokens = max_tokens if max_tokens is not None else settings.OCR_MAX_TOKENS
        self._retry_attempts = retry_attempts if retry_attempts is not None else settings.PROVIDER_RETRY_ATTEMPTS
        self._retry_delay = retry_delay if retry_delay is not None else settings.PROVIDER_RETRY_DELAY
        self._retry_backoff = retry_backoff if retry_backoff is not None else settings.PROVIDER_RETRY_BACKOFF

        read_timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT_SECONDS
        conn_timeout = connect_timeout if connect_timeout is not None else settings.PROVIDER_CONNECT_TIMEOUT

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": settings.ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
            timeout=httpx.Timeout(
                connect=float(conn_timeout),
                read=float(read_timeout),
                write=30.0,
                pool=30.0,
            ),
        )

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "AnthropicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def extract(self, messages: list[dict]) -> str | None:
        """Run the model and return the ``response`` text, or None on any provider failure."""
        start = time.monotonic()
        try:
            result = await self.generate(messages)
        except ProviderInvocationFailure as e:
            logger.error("Failed to extract text from image: %s", e)
            return None

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("Provider call completed in %dms (%d chars)", elapsed_ms, len(result.response))
        return result.response

    async def generate(self, messages: list[dict]) -> OcrResponse:
        """Send the request and validate the structured reply.

        Raises ProviderUnavailable (after retries), ProviderError or ProviderResponseError.
        """
        payload = self.build_payload(messages)
        return await self._generate_with_retry(payload)

    def build_payload(self, messages: list[dict]) -> dict:
        """Translate role/content parts into a Messages API body with a forced tool."""
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        conversation = [m for m in messages if m["role"] != "system"]

        payload = {
            "model": self.model,
            "max_tokens": self._max_tokens,
            "messages": conversation,
            "tools": [
                {
                    "name": TOOL_NAME,
                    "description": "Return the extracted content in the 'response' field.",
                    "input_schema": OcrResponse.model_json_schema(),
                }
            ],
            "tool_choice": {"type": "tool", "name": TOOL_NAME},
        }
        if system:
            payload["system"] = system
        return payload

    async def _generate_with_retry(self, payload: dict) -> OcrResponse:
        """Retry wrapper, configured per instance."""

        @retry(
            retry=retry_if_exception_type(ProviderUnavailable),
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                exp_base=self._retry_backoff,
                max=60,
            ),
            reraise=True,
            before_sleep=lambda state: logger.warning(
                "Provider unavailable, retrying in %.1fs (attempt %d/%d)",
                state.next_action.sleep,  # type: ignore[union-attr]
                state.attempt_number,
                self._retry_attempts,
            ),
        )
        async def _do_generate() -> OcrResponse:
            return await self._send(payload)

        return await _do_generate()

    async def _send(self, payload: dict) -> OcrResponse:
        """Send a single request to the Messages API."""
        try:
            resp = await self._client.post("/v1/messages", json=payload)
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            logger.warning("Provider connection failed: %s", e)
            raise ProviderUnavailable(f"Cannot connect to provider: {e}") from e
        except httpx.TimeoutException as e:
            logger.warning("Provider timeout: %s", e)
            raise ProviderUnavailable(f"Provider timeout: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Provider HTTP error: %s", e)
            raise ProviderError(f"Provider HTTP error: {e}") from e

        if resp.status_code in RETRYABLE_STATUS:
            detail = _error_detail(resp)
            logger.warning("Provider returned %d: %s", resp.status_code, detail)
            raise ProviderUnavailable(detail, {"status_code": resp.status_code})

        if resp.status_code != 200:
            detail = _error_detail(resp)
            logger.error("Provider error %d: %s", resp.status_code, detail)
            raise ProviderError(detail, {"status_code": resp.status_code})

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderResponseError("Provider response is not JSON") from e

        return parse_tool_response(data)


def parse_tool_response(data: dict) -> OcrResponse:
    """Pick the forced tool call out of a Messages API reply and validate its input."""
    blocks = data.get("content") if isinstance(data, dict) else None
    if not isinstance(blocks, list):
        raise ProviderResponseError("Provider response has no content blocks")

    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "tool_use" and block.get("name") == TOOL_NAME:
            try:
                return OcrResponse.model_validate(block.get("input"))
            except ValidationError as e:
                logger.warning("Provider response failed schema validation: %s", e)
                raise ProviderResponseError(
                    "Provider response does not match the schema",
                    {"stop_reason": data.get("stop_reason"), "errors": e.errors(include_url=False)},
                ) from e

    raise ProviderResponseError(
        f"Provider response has no '{TOOL_NAME}' tool call",
        {"stop_reason": data.get("stop_reason")},
    )


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
        return body["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {resp.status_code}"
