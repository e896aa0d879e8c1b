"""
Removal engine: select targeted annotation usages and import declarations and
turn them into an edit plan.

The engine never touches the token stream or the text; it only decides which
spans of the translated text disappear, including the whitespace that goes
with them according to the configured WhitespacePolicy.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Set, Tuple

from ..lexing.scanner import is_identifier_part
from ..logging_config import get_logger
from ..models.annotations import AnnotationUsage, ImportDeclaration
from ..models.edit_plan import Deletion, EditPlan, WhitespacePolicy
from .matcher import NameMatcher

logger = get_logger(__name__)

HORIZONTAL_WHITESPACE = frozenset(" \t\f")
WHITESPACE = frozenset(" \t\f\r\n")


@dataclass
class RemovalOutcome:
    """Edit plan plus what was selected to build it."""

    plan: EditPlan
    removed_annotations: List[AnnotationUsage] = field(default_factory=list)
    removed_imports: List[ImportDeclaration] = field(default_factory=list)
    matched_names: Set[str] = field(default_factory=set)
    matched_patterns: Set[str] = field(default_factory=set)


def build_edit_plan(
    text: str,
    usages: Sequence[AnnotationUsage],
    imports: Sequence[ImportDeclaration],
    matcher: NameMatcher,
    policy: WhitespacePolicy = WhitespacePolicy.LINE,
    remove_annotations: bool = True,
    remove_imports: bool = False,
) -> RemovalOutcome:
    """
    Build the edit plan for one file.

    Imports are decided first so that removed imports can resolve simple
    annotation names. Only top-level usages are planned; usages nested in an
    argument list stay or go with their enclosing usage.

    Args:
        text: Escape-translated source text
        usages: Recognized annotation usages, in marker order
        imports: Recognized import declarations
        matcher: Name matcher for this file
        policy: Whitespace handling for removed annotations
        remove_annotations: Whether annotation usages are removed
        remove_imports: Whether matching import declarations are removed

    Returns:
        RemovalOutcome with the plan and the selected usages and imports
    """
    removed_imports: List[ImportDeclaration] = []
    if remove_imports:
        for declaration in imports:
            if matcher.matches_import(declaration):
                matcher.register_removed_import(declaration)
                removed_imports.append(declaration)

    removed_annotations: List[AnnotationUsage] = []
    if remove_annotations:
        removed_annotations = select_annotations(usages, matcher)

    spans: List[Tuple[int, int, str, str]] = [
        (d.start, d.end, "import", d.name) for d in removed_imports
    ]
    spans.extend((u.start, u.end, "annotation", u.name) for u in removed_annotations)
    spans.sort()

    deletions: List[Deletion] = []
    for start, end, reason, name in spans:
        if reason == "import":
            start, end = _import_extent(text, start, end, policy)
        else:
            start, end = annotation_extent(text, start, end, policy, deletions)
        deletions.append(Deletion(start, end, reason, name))

    plan = EditPlan.from_deletions(deletions)

    logger.debug(
        "edit_plan_built",
        annotations=len(removed_annotations),
        imports=len(removed_imports),
        deletions=len(plan),
        deleted_chars=plan.deleted_length(),
    )

    return RemovalOutcome(
        plan=plan,
        removed_annotations=removed_annotations,
        removed_imports=removed_imports,
        matched_names=set(matcher.matched_names),
        matched_patterns=set(matcher.matched_patterns),
    )


def select_annotations(
    usages: Sequence[AnnotationUsage], matcher: NameMatcher
) -> List[AnnotationUsage]:
    """
    Select targeted top-level usages.

    A usage nested in an argument list is never selected on its own: it goes
    with its removed enclosing usage or stays with its kept one, so no
    argument list is left with a missing value.

    Args:
        usages: Usages in marker order (parents precede their children)
        matcher: Name matcher for this file

    Returns:
        Maximal, non-overlapping usages to remove
    """
    selected: List[AnnotationUsage] = []

    for usage in usages:
        if usage.parent is not None:
            continue
        if matcher.matches_annotation(usage.name):
            selected.append(usage)

    return selected


def annotation_extent(
    text: str,
    start: int,
    end: int,
    policy: WhitespacePolicy,
    earlier: Iterable[Deletion] = (),
) -> Tuple[int, int]:
    """
    Widen an annotation span by the whitespace that goes with it.

    Args:
        text: Escape-translated source text
        start: Annotation start
        end: Annotation end
        policy: Whitespace policy
        earlier: Deletions already planned before start

    Returns:
        Tuple of (start, end) of the deletion

    Examples:
        >>> annotation_extent("@A\\nint x;", 0, 2, WhitespacePolicy.LINE)
        (0, 3)
        >>> annotation_extent("new @A Object", 4, 6, WhitespacePolicy.LINE)
        (4, 7)
        >>> annotation_extent("new@A Object", 3, 5, WhitespacePolicy.LINE)
        (3, 5)
    """
    length = len(text)

    if policy is WhitespacePolicy.NONE:
        return start, end

    if policy is WhitespacePolicy.FOLLOWING:
        cursor = end
        while cursor < length and text[cursor] in WHITESPACE:
            cursor += 1
        if cursor < length:
            end = _keep_separator(text, start, end, cursor, earlier)
        return start, end

    line_start = max(text.rfind("\n", 0, start), text.rfind("\r", 0, start)) + 1

    cursor = end
    while cursor < length and text[cursor] in HORIZONTAL_WHITESPACE:
        cursor += 1
    rest_blank = cursor == length or text[cursor] in "\r\n"

    if rest_blank and _is_blank(text, line_start, start, earlier):
        if text.startswith("\r\n", cursor):
            cursor += 2
        elif cursor < length:
            cursor += 1
        return line_start, cursor

    if rest_blank:
        while start > line_start and text[start - 1] in HORIZONTAL_WHITESPACE:
            start -= 1
        return start, cursor
    return start, _keep_separator(text, start, end, cursor, earlier)


def _keep_separator(
    text: str, start: int, end: int, cursor: int, earlier: Iterable[Deletion]
) -> int:
    """
    End a deletion at cursor unless that would join two identifier characters.

    In that case the blanks between end and cursor are left in place, so
    `new@A Foo` keeps the blank that separates `new` from `Foo`.
    """
    if cursor == end or cursor >= len(text) or not is_identifier_part(text[cursor]):
        return cursor
    before = _retained_before(start, earlier)
    if before > 0 and is_identifier_part(text[before - 1]):
        return end
    return cursor


def _retained_before(position: int, earlier: Iterable[Deletion]) -> int:
    """Offset just past the last character before position that no earlier deletion removes."""
    spans = sorted(earlier, key=lambda d: d.start, reverse=True)
    for deletion in spans:
        if deletion.start < position <= deletion.end:
            position = deletion.start
    return position


def _is_blank(text: str, start: int, end: int, earlier: Iterable[Deletion]) -> bool:
    """Whether text[start:end] holds only blanks once earlier deletions are applied."""
    position = start
    overlapping = sorted(
        (d for d in earlier if d.end > start and d.start < end), key=lambda d: d.start
    )
    for deletion in overlapping:
        if deletion.end <= position:
            continue
        if deletion.start > position and not _only(text, position, deletion.start, HORIZONTAL_WHITESPACE):
            return False
        position = max(position, deletion.end)
    return _only(text, position, end, HORIZONTAL_WHITESPACE)


def _only(text: str, start: int, end: int, allowed: frozenset) -> bool:
    return all(char in allowed for char in text[start:end])


def _import_extent(text: str, start: int, end: int, policy: WhitespacePolicy) -> Tuple[int, int]:
    """Widen an import declaration through the first line terminator, if one follows."""
    if policy is WhitespacePolicy.NONE:
        return start, end
    length = len(text)
    cursor = end
    while cursor < length and text[cursor] in WHITESPACE:
        char = text[cursor]
        cursor += 1
        if char == "\n" or (char == "\r" and not text.startswith("\n", cursor)):
            return start, cursor
    return start, end
