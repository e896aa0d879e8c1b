"""
Unicode escape translation.

Java translates `\\uXXXX` escapes before any other lexical step, so an escape
can spell a comment delimiter, a quote or an annotation marker. This module
performs that translation over the whole text and keeps an offset table back
to the original spelling so retained text can be emitted unchanged.

Rules:
- A backslash is eligible when it is preceded by an even number of contiguous
  raw backslashes.
- An eligible backslash followed by one or more `u` must be followed by exactly
  four hexadecimal digits, otherwise the file is rejected.
- A character produced by an escape never takes part in another escape.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..errors import MalformedEscapeError
from ..logging_config import get_logger

logger = get_logger(__name__)

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class TranslatedText:
    """
    Escape-translated view of a source text.

    Attributes:
        raw: Original text
        text: Translated text, the input of the scanner
        offsets: For each index of text (plus one past the end), the index in
            raw where that character's spelling starts. None when no escape
            was found, in which case both texts are identical.
        escape_count: Number of escapes translated
    """

    raw: str
    text: str
    offsets: Optional[List[int]] = None
    escape_count: int = 0

    def raw_offset(self, index: int) -> int:
        """Map an offset in translated text to the original text."""
        if self.offsets is None:
            return index
        return self.offsets[index]

    @property
    def has_escapes(self) -> bool:
        return self.escape_count > 0


def translate_escapes(raw: str) -> TranslatedText:
    """
    Translate every Unicode escape in raw.

    Args:
        raw: Source text as read from disk

    Returns:
        TranslatedText with translated text and offset table

    Raises:
        MalformedEscapeError: If an eligible `\\u` is not followed by four hex
            digits (offset of the backslash)

    Examples:
        >>> translate_escapes("\\\\u0040Deprecated").text
        '@Deprecated'
        >>> translate_escapes("\\\\\\\\u0040").text  # escaped backslash, no escape
        '\\\\\\\\u0040'
    """
    if "\\u" not in raw:
        return TranslatedText(raw=raw, text=raw)

    chars: List[str] = []
    offsets: List[int] = []
    escape_count = 0
    backslashes = 0
    position = 0
    length = len(raw)

    while position < length:
        char = raw[position]
        if char == "\\":
            if backslashes % 2 == 0 and position + 1 < length and raw[position + 1] == "u":
                digits_start = position + 1
                while digits_start < length and raw[digits_start] == "u":
                    digits_start += 1
                digits = raw[digits_start : digits_start + 4]
                if len(digits) != 4 or not all(d in HEX_DIGITS for d in digits):
                    raise MalformedEscapeError(
                        f"Unicode escape must be followed by four hexadecimal digits, "
                        f"found {digits!r}",
                        position,
                    )
                chars.append(chr(int(digits, 16)))
                offsets.append(position)
                escape_count += 1
                backslashes = 0
                position = digits_start + 4
                continue
            backslashes += 1
        else:
            backslashes = 0
        chars.append(char)
        offsets.append(position)
        position += 1

    offsets.append(length)

    if escape_count == 0:
        return TranslatedText(raw=raw, text=raw)

    logger.debug("unicode_escapes_translated", count=escape_count)
    return TranslatedText(raw=raw, text="".join(chars), offsets=offsets, escape_count=escape_count)
