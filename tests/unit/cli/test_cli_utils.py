"""Unit tests for CLI error formatting."""

from pathlib import Path

import pytest

from apbuild.build import BuildToolError
from apbuild.cli_utils import ErrorFormatter
from apbuild.packages import DownloadError, EmptySourceError
from apbuild.packages.source import REMEDIATION


class TestErrorFormatter:
    """Tests for ErrorFormatter class."""

    def test_print_error_goes_to_stderr(self, capsys):
        ErrorFormatter.print_error("Title", "details")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Title" in captured.err
        assert "details" in captured.err

    def test_empty_source_prints_remediation(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_empty_source(EmptySourceError(Path("webrtc-audio-processing")))

        assert exc_info.value.code == 1
        assert REMEDIATION in capsys.readouterr().err

    def test_build_tool_error_output_unmodified(self, capsys):
        stderr = "ninja: error: loading 'build.ninja'\n  line two"

        with pytest.raises(SystemExit):
            ErrorFormatter.handle_build_tool_error(BuildToolError("ninja", "", stderr))

        assert stderr in capsys.readouterr().err

    def test_download_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_download_error(DownloadError("https://example.com/a.zip", status=503))

        err = capsys.readouterr().err
        assert exc_info.value.code == 1
        assert "503" in err
        assert "https://example.com/a.zip" in err

    def test_keyboard_interrupt_exit_code(self):
        with pytest.raises(SystemExit) as exc_info:
            ErrorFormatter.handle_keyboard_interrupt()

        assert exc_info.value.code == 130

    def test_unexpected_error_without_traceback(self, capsys):
        try:
            raise ValueError("bad value")
        except ValueError as e:
            with pytest.raises(SystemExit) as exc_info:
                ErrorFormatter.handle_unexpected_error(e, verbose=False)

        err = capsys.readouterr().err
        assert exc_info.value.code == 1
        assert "ValueError: bad value" in err
        assert "Traceback" not in err
