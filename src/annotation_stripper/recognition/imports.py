"""
Import declaration recognition.

`import` is a reserved word, so every `import` keyword token outside comments
and literals starts an import declaration: `import [static] name ;`.
"""

from typing import List

from ..errors import MalformedImportError
from ..logging_config import get_logger
from ..models.annotations import ImportDeclaration
from ..models.tokens import Token, TokenKind
from .annotations import significant_tokens

logger = get_logger(__name__)


def recognize_imports(tokens: List[Token]) -> List[ImportDeclaration]:
    """
    Find every import declaration in a token sequence.

    Args:
        tokens: Token sequence from the scanner

    Returns:
        Import declarations in source order

    Raises:
        MalformedImportError: If a declaration has no name or no `;`

    Examples:
        >>> from annotation_stripper.lexing.scanner import tokenize
        >>> [d.name for d in recognize_imports(tokenize("import static a . b /**/ . C;"))]
        ['a.b.C']
    """
    significant = significant_tokens(tokens)
    imports: List[ImportDeclaration] = []
    index = 0
    count = len(significant)

    while index < count:
        token = significant[index]
        if token.kind is not TokenKind.KEYWORD or token.text != "import":
            index += 1
            continue

        cursor = index + 1
        is_static = False
        if cursor < count and significant[cursor].kind is TokenKind.KEYWORD and significant[cursor].text == "static":
            is_static = True
            cursor += 1

        parts = []
        while cursor < count and not significant[cursor].is_punctuation(";"):
            parts.append(significant[cursor].text)
            cursor += 1

        if cursor == count:
            raise MalformedImportError("Import declaration is not terminated by ';'", token.start)
        if not parts:
            raise MalformedImportError("Import declaration has no name", token.start)

        imports.append(
            ImportDeclaration(
                start=token.start,
                end=significant[cursor].end,
                name="".join(parts),
                is_static=is_static,
            )
        )
        index = cursor + 1

    logger.debug("imports_recognized", count=len(imports))
    return imports
