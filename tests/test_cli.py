"""
test_cli.py — Tests for the `yt-captions` command group.

Covers:
    - `get` output formats, --output file writing, error exit codes
    - `tracks` listing and the empty case
    - the global --log-level option
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from yt_caption_scraper.cli import main
from yt_caption_scraper.errors import CaptionEndpointNotFoundError, InvalidVideoReferenceError
from yt_caption_scraper.locator import CaptionTrack


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from attaching handlers to CliRunner's temporary streams."""
    with patch("yt_caption_scraper.cli.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------

class TestGet:
    """Tests for `yt-captions get`."""

    @patch("yt_caption_scraper.cli.extract", return_value="Hello\nWorld")
    def test_text_to_stdout(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ"])

        assert result.exit_code == 0
        assert result.output == "Hello\nWorld\n"
        mock_extract.assert_called_once_with("dQw4w9WgXcQ", preferred_language=None, fmt="text")

    @patch("yt_caption_scraper.cli.extract")
    def test_json_is_pretty_printed(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        payload = {"video_id": "dQw4w9WgXcQ", "entry_count": 0, "transcriptions": []}
        mock_extract.return_value = payload

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "--format", "json", "--lang", "pt"])

        assert result.exit_code == 0
        assert json.loads(result.output) == payload
        mock_extract.assert_called_once_with("dQw4w9WgXcQ", preferred_language="pt", fmt="json")

    @patch("yt_caption_scraper.cli.extract", return_value="1\n00:00:01,500 --> 00:00:03,500\nHello\n")
    def test_output_file(self, mock_extract: MagicMock, runner: CliRunner, tmp_path) -> None:
        target = tmp_path / "talk.srt"

        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "-f", "srt", "-o", str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8").startswith("1\n00:00:01,500")

    @patch("yt_caption_scraper.cli.extract", side_effect=CaptionEndpointNotFoundError("dQw4w9WgXcQ"))
    def test_error_exits_nonzero(self, mock_extract: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ"])

        assert result.exit_code == 1
        assert "Error: Failed to locate a transcript for video: dQw4w9WgXcQ" in result.output

    def test_invalid_format_rejected(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["get", "dQw4w9WgXcQ", "--format", "xml"])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# tracks
# ---------------------------------------------------------------------------

class TestTracks:
    """Tests for `yt-captions tracks`."""

    @patch("yt_caption_scraper.cli.list_caption_tracks")
    def test_lists_tracks(self, mock_list: MagicMock, runner: CliRunner) -> None:
        mock_list.return_value = [
            CaptionTrack("en", "u1", name="English"),
            CaptionTrack("pt-BR", "u2", kind="asr"),
        ]

        result = runner.invoke(main, ["tracks", "https://youtu.be/dQw4w9WgXcQ"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "en: English (manual)"
        assert lines[1] == "pt-BR (auto-generated)"
        mock_list.assert_called_once_with("dQw4w9WgXcQ")

    @patch("yt_caption_scraper.cli.list_caption_tracks", return_value=[])
    def test_no_tracks(self, mock_list: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tracks", "dQw4w9WgXcQ"])
        assert result.exit_code == 0
        assert "No caption tracks found" in result.output

    @patch("yt_caption_scraper.cli.parse_video_id", side_effect=InvalidVideoReferenceError("x"))
    def test_bad_reference(self, mock_parse: MagicMock, runner: CliRunner) -> None:
        result = runner.invoke(main, ["tracks", "x"])
        assert result.exit_code == 1
        assert result.output.startswith("Error:")


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

class TestLogLevel:
    """Tests for the group-level --log-level option."""

    @patch("yt_caption_scraper.cli.extract", return_value="")
    def test_log_level_passed_to_logging_setup(
        self, mock_extract: MagicMock, runner: CliRunner, no_logging_setup: MagicMock,
    ) -> None:
        runner.invoke(main, ["--log-level", "debug", "get", "dQw4w9WgXcQ"])
        no_logging_setup.assert_called_once_with("debug")
