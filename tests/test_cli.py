"""Tests for the command-line interface."""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from vision_ocr import __version__
from vision_ocr.cli import app
from vision_ocr.errors import FetchError, FileReadError, MalformedStructuredOutput
from vision_ocr.models import OutputFormat

runner = CliRunner()


@pytest.fixture
def mock_extract():
    with patch("vision_ocr.cli.extract_from_image", new_callable=AsyncMock) as mock:
        yield mock


class TestFlags:
    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_version(self, flag: str):
        result = runner.invoke(app, [flag])
        assert result.exit_code == 0
        assert f"vision-ocr: v{__version__}" in result.output

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag: str):
        result = runner.invoke(app, [flag])
        assert result.exit_code == 0
        assert "--type" in result.output

    def test_missing_image(self, api_key, mock_extract):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Please provide an image" in result.output
        mock_extract.assert_not_awaited()

    def test_unknown_format_rejected(self, api_key, mock_extract):
        result = runner.invoke(app, ["scan.png", "-t", "xml"])
        assert result.exit_code == 2
        mock_extract.assert_not_awaited()


class TestRun:
    def test_text_printed_verbatim(self, api_key, mock_extract):
        mock_extract.return_value = "Total: 3.50 EUR [unclear]"

        result = runner.invoke(app, ["scan.png"])
        assert result.exit_code == 0
        assert "Total: 3.50 EUR [unclear]" in result.output
        assert mock_extract.await_args.args[:2] == ("scan.png", OutputFormat.TEXT)

    def test_text_not_rewritten(self, api_key, mock_extract):
        raw = "Status :warning: ok\tcol2"
        mock_extract.return_value = raw

        result = runner.invoke(app, ["scan.png"])
        assert result.exit_code == 0
        assert raw + "\n" in result.output
        assert "\u26a0" not in result.output

    def test_json_pretty_printed(self, api_key, mock_extract):
        mock_extract.return_value = {"title": "Receipt", "total": 3.5}

        result = runner.invoke(app, ["scan.png", "--type", "json"])
        assert result.exit_code == 0
        assert '"title": "Receipt"' in result.output
        assert mock_extract.await_args.args[1] is OutputFormat.JSON

    def test_markdown(self, api_key, mock_extract):
        mock_extract.return_value = "## Receipt"

        result = runner.invoke(app, ["https://images.example/r.png", "-t", "markdown"])
        assert result.exit_code == 0
        assert "## Receipt" in result.output

    def test_missing_credentials_fail_fast(self, no_api_key, mock_extract):
        result = runner.invoke(app, ["scan.png"])
        assert result.exit_code == 1
        assert "ANTHROPIC_API_KEY" in result.output
        mock_extract.assert_not_awaited()

    def test_provider_failure_exits_nonzero(self, api_key, mock_extract):
        mock_extract.return_value = None

        result = runner.invoke(app, ["scan.png"])
        assert result.exit_code == 1
        assert "Failed to extract text" in result.output

    def test_missing_file(self, api_key, mock_extract):
        mock_extract.side_effect = FileReadError("missing.png", "file not found")

        result = runner.invoke(app, ["missing.png"])
        assert result.exit_code == 1
        assert "file not found" in result.output

    def test_unreachable_url(self, api_key, mock_extract):
        mock_extract.side_effect = FetchError("https://nonexistent.example/x.png", "HTTP 404", status_code=404)

        result = runner.invoke(app, ["https://nonexistent.example/x.png"])
        assert result.exit_code == 1
        assert "Failed to fetch" in result.output

    def test_malformed_json(self, api_key, mock_extract):
        mock_extract.side_effect = MalformedStructuredOutput("{not valid json", "Expecting property name")

        result = runner.invoke(app, ["scan.png", "-t", "json"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output
