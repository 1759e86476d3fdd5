"""Shared test fixtures for the OCR pipeline tests."""

import json

import pytest
import pytest_asyncio

from vision_ocr.config import settings
from vision_ocr.provider_client import TOOL_NAME, AnthropicClient

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _tool_message(tool_input) -> dict:
    """Build a Messages API reply carrying a single forced tool call."""
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-5-sonnet-20240620",
        "stop_reason": "tool_use",
        "content": [
            {
                "type": "tool_use",
                "id": "toolu_01",
                "name": TOOL_NAME,
                "input": tool_input,
            }
        ],
    }


@pytest.fixture
def tool_message():
    return _tool_message


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes that start with a PNG signature; the pipeline never decodes them."""
    return PNG_SIGNATURE + b"\x00\x00\x00\rIHDR" + bytes(range(64))


@pytest.fixture
def image_file(tmp_path, png_bytes: bytes):
    path = tmp_path / "test_2.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "")


@pytest_asyncio.fixture
async def provider_client():
    """Create a provider client with fast retry settings for testing."""
    client = AnthropicClient(
        api_key="test-key",
        base_url="http://fake-provider",
        timeout=5,
        connect_timeout=2,
        retry_attempts=3,
        retry_delay=0.01,  # Fast retries for tests
        retry_backoff=1.0,  # No backoff for tests
    )
    yield client
    await client.aclose()


@pytest.fixture
def mock_json_response() -> str:
    """Model output for a json request: the response field holds a JSON literal."""
    return json.dumps({
        "header": "Invoice 2024-117",
        "table": [["Item", "Price"], ["Coffee", "3.50 EUR"]],
    })


@pytest.fixture
def mock_markdown_response() -> str:
    return "## Invoice 2024-117\n\n| Item | Price |\n|------|-------|\n| Coffee | 3.50 EUR |\n\n[caption: Logo]"
