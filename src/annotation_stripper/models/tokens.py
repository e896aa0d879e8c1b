"""
Token model produced by the lexical scanner.

Tokens are half-open spans over the escape-translated text. The token sequence
for a file is contiguous and exhaustive: concatenating every token's text gives
back the whole translated text.
"""

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Classification of a scanned span."""

    WHITESPACE = "whitespace"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING_LITERAL = "string_literal"
    CHAR_LITERAL = "char_literal"
    NUMBER_LITERAL = "number_literal"
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    PUNCTUATION = "punctuation"
    ANNOTATION_MARKER = "annotation_marker"


# Kinds that are invisible to every stage after the scanner
TRIVIA_KINDS = frozenset(
    {TokenKind.WHITESPACE, TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT}
)


@dataclass(frozen=True)
class Token:
    """
    A classified span of translated source text.

    Attributes:
        kind: Token classification
        start: Start offset (inclusive) in translated text
        end: End offset (exclusive) in translated text
        text: The spanned text
    """

    kind: TokenKind
    start: int
    end: int
    text: str

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid token span [{self.start}, {self.end})")
        if len(self.text) != self.end - self.start:
            raise ValueError("Token text length does not match its span")

    @property
    def is_trivia(self) -> bool:
        """Whitespace and comments."""
        return self.kind in TRIVIA_KINDS

    def is_punctuation(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCTUATION and self.text == text

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, [{self.start},{self.end}])"
