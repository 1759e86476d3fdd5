"""Turn the raw ``response`` string into the caller's requested representation."""

import json
from typing import Any

from .errors import MalformedStructuredOutput
from .models import OutputFormat


def format_result(raw: str, fmt: OutputFormat) -> Any:
    """Decode JSON output; text and markdown pass through unchanged.

    Raises MalformedStructuredOutput if JSON was requested and ``raw`` does not parse.
    """
    if fmt is not OutputFormat.JSON:
        return raw

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedStructuredOutput(raw, str(e)) from e
