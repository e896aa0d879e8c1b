"""
Unit tests for the error hierarchy (errors.py).
"""

import pytest

from annotation_stripper.errors import (
    MalformedImportError,
    SourceIOError,
    TransformError,
    UnterminatedTokenError,
)
from annotation_stripper.models.results import FileKind


class TestLocate:
    """Tests for TransformError.locate()."""

    @pytest.mark.unit
    def test_locate_first_line(self):
        """Test an offset on the first line."""
        error = TransformError("boom", 4).locate("abc def")

        assert (error.line, error.column) == (1, 5)

    @pytest.mark.unit
    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_locate_line_terminators(self, newline):
        """Test that LF, CRLF and CR each end one line."""
        source = newline.join(["a", "bc", "  /*"])
        error = TransformError("boom", source.index("/*")).locate(source)

        assert (error.line, error.column) == (3, 3)

    @pytest.mark.unit
    def test_locate_clamps_offset(self):
        """Test that an offset past the end is located at the end."""
        error = TransformError("boom", 50).locate("ab\ncd")

        assert (error.line, error.column) == (2, 3)

    @pytest.mark.unit
    def test_str_without_location(self):
        """Test the message before locate() was called."""
        assert str(UnterminatedTokenError("never closed", 3)) == "UnterminatedToken at offset 3: never closed"


class TestErrorReport:
    """Tests for TransformError.to_report()."""

    @pytest.mark.unit
    def test_report_fields(self):
        """Test the structured report of a located error."""
        error = MalformedImportError("no semicolon", 11).locate("class C {}\nimport a")
        error.path = "C.java"

        report = error.to_report()

        assert report.error_kind == "MalformedImport"
        assert report.file_kind is FileKind.COMPILATION_UNIT
        assert report.path == "C.java"
        assert (report.offset, report.line, report.column) == (11, 2, 1)
        assert report.detail == "no semicolon"
        assert str(error) == "C.java: MalformedImport at line 2, column 1: no semicolon"


class TestSourceIOError:
    """Tests for SourceIOError."""

    @pytest.mark.unit
    def test_message(self):
        """Test that the message names the path and reason."""
        error = SourceIOError("a/B.java", "Could not open file for reading: denied")

        assert str(error) == "a/B.java: Could not open file for reading: denied"
        assert error.reason.startswith("Could not open")
