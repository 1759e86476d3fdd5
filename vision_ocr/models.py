"""Pydantic models and the output format enumeration."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"


class OcrResponse(BaseModel):
    """The one-field record the model must return."""

    model_config = ConfigDict(extra="forbid")

    response: StrictStr


class ExtractResponse(BaseModel):
    format: OutputFormat
    result: Any
    processing_time_ms: int
