"""Image-to-text extraction through a hosted vision model."""

from .errors import (
    ConfigurationError,
    EncodingFailure,
    FetchError,
    FileReadError,
    MalformedStructuredOutput,
    OcrError,
    PayloadTooLargeError,
    ProviderInvocationFailure,
    SourceUnavailable,
)
from .models import OutputFormat
from .ocr import Ocr, extract_from_bytes, extract_from_image
from .provider_client import AnthropicClient

__version__ = "1.0.0"

__all__ = [
    "AnthropicClient",
    "ConfigurationError",
    "EncodingFailure",
    "FetchError",
    "FileReadError",
    "MalformedStructuredOutput",
    "Ocr",
    "OcrError",
    "OutputFormat",
    "PayloadTooLargeError",
    "ProviderInvocationFailure",
    "SourceUnavailable",
    "extract_from_bytes",
    "extract_from_image",
]
