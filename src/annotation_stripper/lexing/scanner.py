"""
Lexical scanner for escape-translated Java source text.

Produces a contiguous, exhaustive token sequence. At each position the rules
apply in this order:

1. `//` starts a line comment running to the next line terminator
2. `/*` starts a block comment running to the matching `*/`
3. `\"\"\"`, `"` or `'` start a text block, string or char literal
4. `@` is an annotation marker
5. identifiers/keywords, numeric literals and punctuation by maximal munch

Comments and literals are opaque: nothing inside them is looked at again by
later stages. A comment or literal that reaches the end of the text (or, for
ordinary string and char literals, a line terminator) is rejected with
UnterminatedTokenError. Every step advances by at least one character, so the
scan is linear in the input size.
"""

from typing import List

from ..errors import UnterminatedTokenError
from ..logging_config import get_logger
from ..models.tokens import Token, TokenKind

logger = get_logger(__name__)

# Reserved words plus the boolean and null literals. Contextual words
# (module, record, requires, var, yield, sealed, permits, ...) are identifiers.
KEYWORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "final", "finally", "float", "for", "goto",
        "if", "implements", "import", "instanceof", "int", "interface", "long",
        "native", "new", "package", "private", "protected", "public", "return",
        "short", "static", "strictfp", "super", "switch", "synchronized",
        "this", "throw", "throws", "transient", "try", "void", "volatile",
        "while", "_", "true", "false", "null",
    }
)

# Longest first for maximal munch
OPERATORS = (
    ">>>=", "<<=", ">>=", ">>>", "...", "->", "::", "++", "--", "&&", "||",
    "==", "!=", "<=", ">=", "+=", "-=", "*=", "/=", "&=", "|=", "^=", "%=",
    "<<", ">>",
)

WHITESPACE_CHARS = frozenset(" \t\f\r\n")
LINE_TERMINATORS = frozenset("\r\n")


def is_identifier_start(char: str) -> bool:
    return char == "$" or char.isidentifier()


def is_identifier_part(char: str) -> bool:
    return char == "$" or ("a" + char).isidentifier()


def tokenize(text: str) -> List[Token]:
    """
    Split translated source text into classified tokens.

    Args:
        text: Escape-translated source text

    Returns:
        List of tokens covering text exactly, in order

    Raises:
        UnterminatedTokenError: If a block comment or literal is not closed
            (offset of its opening delimiter)

    Examples:
        >>> [t.kind.value for t in tokenize("@A int x;")]
        ['annotation_marker', 'identifier', 'whitespace', 'keyword', 'whitespace', 'identifier', 'punctuation']
    """
    tokens: List[Token] = []
    position = 0
    length = len(text)

    while position < length:
        char = text[position]

        if char in WHITESPACE_CHARS:
            end = _scan_whitespace(text, position)
            kind = TokenKind.WHITESPACE
        elif text.startswith("//", position):
            end = _scan_line_comment(text, position)
            kind = TokenKind.LINE_COMMENT
        elif text.startswith("/*", position):
            end = _scan_block_comment(text, position)
            kind = TokenKind.BLOCK_COMMENT
        elif text.startswith('"""', position):
            end = _scan_text_block(text, position)
            kind = TokenKind.STRING_LITERAL
        elif char == '"':
            end = _scan_quoted(text, position, '"', "string literal")
            kind = TokenKind.STRING_LITERAL
        elif char == "'":
            end = _scan_quoted(text, position, "'", "character literal")
            kind = TokenKind.CHAR_LITERAL
        elif char == "@":
            end = position + 1
            kind = TokenKind.ANNOTATION_MARKER
        elif char.isdigit() or (
            char == "." and position + 1 < length and text[position + 1].isdigit()
        ):
            end = _scan_number(text, position)
            kind = TokenKind.NUMBER_LITERAL
        elif is_identifier_start(char):
            end = _scan_identifier(text, position)
            kind = TokenKind.KEYWORD if text[position:end] in KEYWORDS else TokenKind.IDENTIFIER
        else:
            end = _scan_punctuation(text, position)
            kind = TokenKind.PUNCTUATION

        tokens.append(Token(kind, position, end, text[position:end]))
        position = end

    logger.debug("source_scanned", tokens=len(tokens), length=length)
    return tokens


def _scan_whitespace(text: str, position: int) -> int:
    end = position + 1
    while end < len(text) and text[end] in WHITESPACE_CHARS:
        end += 1
    return end


def _scan_line_comment(text: str, position: int) -> int:
    end = position + 2
    while end < len(text) and text[end] not in LINE_TERMINATORS:
        end += 1
    return end


def _scan_block_comment(text: str, position: int) -> int:
    close = text.find("*/", position + 2)
    if close == -1:
        raise UnterminatedTokenError("Block comment is never closed", position)
    return close + 2


def _scan_text_block(text: str, position: int) -> int:
    end = position + 3
    length = len(text)
    while end < length:
        if text[end] == "\\":
            end += 2
        elif text.startswith('"""', end):
            return end + 3
        else:
            end += 1
    raise UnterminatedTokenError("Text block is never closed", position)


def _scan_quoted(text: str, position: int, quote: str, description: str) -> int:
    end = position + 1
    length = len(text)
    while end < length:
        char = text[end]
        if char == quote:
            return end + 1
        if char in LINE_TERMINATORS:
            break
        if char == "\\":
            end += 1
            if end < length and text[end] in LINE_TERMINATORS:
                break
        end += 1
    raise UnterminatedTokenError(f"{description.capitalize()} is never closed", position)


def _scan_number(text: str, position: int) -> int:
    is_hex = text.startswith(("0x", "0X"), position)
    end = position + 1
    length = len(text)
    while end < length:
        char = text[end]
        if char.isalnum() or char == "_":
            end += 1
        elif char == "." and not text.startswith("..", end):
            end += 1
        elif char in "+-" and (
            text[end - 1] in "pP" or (not is_hex and text[end - 1] in "eE")
        ):
            end += 1
        else:
            break
    return end


def _scan_identifier(text: str, position: int) -> int:
    end = position + 1
    while end < len(text) and is_identifier_part(text[end]):
        end += 1
    return end


def _scan_punctuation(text: str, position: int) -> int:
    for operator in OPERATORS:
        if text.startswith(operator, position):
            return position + len(operator)
    return position + 1
