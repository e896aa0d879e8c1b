"""
Annotation usage recognition.

Walks the significant tokens (everything except whitespace and comments) and
turns every annotation marker into an AnnotationUsage: the marker, the dotted
name that follows it and, when the next significant token is `(`, the whole
balanced argument list. Annotations nested inside argument lists are recorded
too, with their nesting depth and the index of the enclosing usage.

Balancing uses an explicit stack rather than recursion, so pathological
nesting cannot exhaust the interpreter stack.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..errors import MalformedAnnotationError
from ..logging_config import get_logger
from ..models.annotations import AnnotationUsage
from ..models.tokens import Token, TokenKind

logger = get_logger(__name__)

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = frozenset(OPENERS.values())


@dataclass
class _OpenUsage:
    """An annotation whose argument list is still open."""

    slot: int
    start: int
    name: str
    depth: int
    parent: Optional[int]
    delimiters: List[str] = field(default_factory=lambda: ["("])


def significant_tokens(tokens: List[Token]) -> List[Token]:
    """Drop whitespace and comments."""
    return [t for t in tokens if not t.is_trivia]


def recognize_annotations(tokens: List[Token]) -> List[AnnotationUsage]:
    """
    Find every annotation usage in a token sequence.

    `@interface` introduces an annotation type declaration and is skipped.

    Args:
        tokens: Token sequence from the scanner

    Returns:
        Usages ordered by the position of their marker

    Raises:
        MalformedAnnotationError: If a marker is not followed by a name, or an
            argument list is unbalanced or never closed
    """
    significant = significant_tokens(tokens)
    usages: List[Optional[AnnotationUsage]] = []
    open_usages: List[_OpenUsage] = []
    index = 0
    count = len(significant)

    while index < count:
        token = significant[index]

        if token.kind is TokenKind.ANNOTATION_MARKER:
            following = significant[index + 1] if index + 1 < count else None
            if following is not None and following.kind is TokenKind.KEYWORD and following.text == "interface":
                index += 2
                continue

            name, last = _read_name(significant, index + 1, token)
            parent = open_usages[-1].slot if open_usages else None
            depth = len(open_usages)
            after = last + 1

            if after < count and significant[after].is_punctuation("("):
                open_usages.append(_OpenUsage(len(usages), token.start, name, depth, parent))
                usages.append(None)
                index = after + 1
            else:
                usages.append(
                    AnnotationUsage(
                        start=token.start,
                        end=significant[last].end,
                        name=name,
                        depth=depth,
                        parent=parent,
                    )
                )
                index = after
            continue

        if open_usages and token.kind is TokenKind.PUNCTUATION:
            current = open_usages[-1]
            if token.text in OPENERS:
                current.delimiters.append(token.text)
            elif token.text in CLOSERS:
                expected = OPENERS[current.delimiters[-1]]
                if token.text != expected:
                    raise MalformedAnnotationError(
                        f"Unbalanced '{token.text}' in arguments of @{current.name}, "
                        f"expected '{expected}'",
                        current.start,
                    )
                current.delimiters.pop()
                if not current.delimiters:
                    open_usages.pop()
                    usages[current.slot] = AnnotationUsage(
                        start=current.start,
                        end=token.end,
                        name=current.name,
                        has_arguments=True,
                        depth=current.depth,
                        parent=current.parent,
                    )
            elif token.text == ";":
                raise MalformedAnnotationError(
                    f"Arguments of @{current.name} run into a declaration boundary",
                    current.start,
                )

        index += 1

    if open_usages:
        innermost = open_usages[-1]
        raise MalformedAnnotationError(
            f"Argument list of @{innermost.name} is never closed", innermost.start
        )

    result = [u for u in usages if u is not None]
    logger.debug("annotations_recognized", count=len(result))
    return result


def _read_name(significant: List[Token], index: int, marker: Token) -> Tuple[str, int]:
    """
    Read a dotted name starting at significant[index].

    Returns:
        Tuple of (dotted_name, index_of_last_name_token)
    """
    if index >= len(significant) or significant[index].kind is not TokenKind.IDENTIFIER:
        found = significant[index].text if index < len(significant) else "end of input"
        raise MalformedAnnotationError(
            f"Annotation marker must be followed by a name, found {found!r}", marker.start
        )

    parts = [significant[index].text]
    last = index
    while (
        last + 2 < len(significant)
        and significant[last + 1].is_punctuation(".")
        and significant[last + 2].kind is TokenKind.IDENTIFIER
    ):
        parts.append(significant[last + 2].text)
        last += 2

    return ".".join(parts), last
