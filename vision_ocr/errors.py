"""Exceptions raised along the extraction pipeline.

Source, encoding, configuration and nested-JSON errors propagate to the
caller. Provider errors are raised by ``AnthropicClient.generate`` and
collapsed to ``None`` by ``AnthropicClient.extract``.
"""

from typing import Any


class OcrError(Exception):
    """Base exception for all OCR errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(OcrError):
    """Provider credentials or settings are missing. Raised before any request."""


class SourceUnavailable(OcrError):
    """The image reference could not be turned into bytes."""


class FetchError(SourceUnavailable):
    """Remote image fetch failed (non-2xx status or transport error)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {"url": url}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"Failed to fetch image from {url}: {reason}", details)
        self.url = url
        self.status_code = status_code


class FileReadError(SourceUnavailable):
    """Local image file is missing, unreadable, not a regular file, or empty."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read image file {path}: {reason}", {"path": path})
        self.path = path


class EncodingFailure(OcrError):
    """Image bytes could not be prepared for the request payload."""


class PayloadTooLargeError(EncodingFailure):
    """Image exceeds the maximum size accepted by the provider."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            f"Image size ({size} bytes) exceeds maximum ({max_size} bytes)",
            {"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size


class ProviderInvocationFailure(OcrError):
    """The provider call failed or returned an unexpected shape."""


class ProviderUnavailable(ProviderInvocationFailure):
    """Provider is temporarily unavailable (retryable: 429, 5xx, connection error, timeout)."""


class ProviderError(ProviderInvocationFailure):
    """Provider returned a non-retryable error (400, 401, 403, 404)."""


class ProviderResponseError(ProviderInvocationFailure):
    """Provider response does not match the one-string-field contract."""


class MalformedStructuredOutput(OcrError):
    """JSON format was requested but the response field is not valid JSON."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(
            f"Model response is not valid JSON: {reason}",
            {"preview": raw[:200]},
        )
        self.raw = raw
