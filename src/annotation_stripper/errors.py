"""
Error hierarchy for source transformation.

Every error raised while transforming one file is fatal for that file: the
pipeline never emits partial output. Errors carry the offset of the offending
construct in the ORIGINAL (untranslated) source text so callers can report
line and column numbers the user can find in their editor.
"""

from typing import Optional

from .models.results import ErrorReport, FileKind


class TransformError(Exception):
    """
    Base class for all per-file transformation failures.

    Attributes:
        error_kind: Stable identifier of the failure (e.g. "MalformedEscape")
        offset: Character offset of the failure in the source text
        detail: Human-readable description
        line: 1-based line number (set by locate())
        column: 1-based column number (set by locate())
        file_kind: Kind of compilation unit being processed
        path: Source path, when the text came from a file
    """

    error_kind = "TransformError"

    def __init__(self, detail: str, offset: int):
        super().__init__(detail)
        self.detail = detail
        self.offset = offset
        self.line: Optional[int] = None
        self.column: Optional[int] = None
        self.file_kind: FileKind = FileKind.COMPILATION_UNIT
        self.path: Optional[str] = None

    def locate(self, source: str) -> "TransformError":
        """
        Compute line and column of the error offset within source.

        Lines are counted the way the scanner counts them: CR, LF and CRLF
        each end one line.

        Args:
            source: Text the offset refers to

        Returns:
            self, for chaining in raise statements
        """
        offset = min(max(self.offset, 0), len(source))
        line = 1
        line_start = 0
        position = 0
        while position < offset:
            char = source[position]
            if char == "\r":
                if position + 1 < len(source) and source[position + 1] == "\n":
                    position += 1
                line += 1
                line_start = position + 1
            elif char == "\n":
                line += 1
                line_start = position + 1
            position += 1
        self.line = line
        self.column = offset - line_start + 1
        return self

    def to_report(self) -> ErrorReport:
        """Build the structured error report for this failure."""
        return ErrorReport(
            path=self.path,
            file_kind=self.file_kind,
            error_kind=self.error_kind,
            offset=self.offset,
            line=self.line,
            column=self.column,
            detail=self.detail,
        )

    def __str__(self) -> str:
        location = f"offset {self.offset}"
        if self.line is not None:
            location = f"line {self.line}, column {self.column}"
        prefix = f"{self.path}: " if self.path else ""
        return f"{prefix}{self.error_kind} at {location}: {self.detail}"


class MalformedEscapeError(TransformError):
    """A Unicode escape introducer not followed by four hexadecimal digits."""

    error_kind = "MalformedEscape"


class UnterminatedTokenError(TransformError):
    """A block comment, string, text block or char literal that never closes."""

    error_kind = "UnterminatedToken"


class MalformedAnnotationError(TransformError):
    """An annotation marker without a name, or an argument list that never balances."""

    error_kind = "MalformedAnnotation"


class MalformedImportError(TransformError):
    """An import declaration that is not terminated by a semicolon."""

    error_kind = "MalformedImport"


class SourceIOError(Exception):
    """Raised when a source file cannot be read, decoded or written back."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
