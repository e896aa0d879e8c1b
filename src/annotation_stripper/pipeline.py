"""
Annotation stripping pipeline.

One call transforms one source text:

    escape translation -> scanning -> annotation/import recognition
        -> removal planning -> serialization

The pipeline is pure: everything it needs (targets, whitespace policy, file
kind) is passed in, nothing is read from global settings, and no state
survives between calls. Any error aborts the file; no partial output is ever
returned.
"""

import time
from typing import Iterable, Optional, Union

from .errors import TransformError
from .lexing.escapes import TranslatedText, translate_escapes
from .lexing.scanner import tokenize
from .logging_config import get_logger
from .models.results import FileKind, TransformResult
from .models.edit_plan import WhitespacePolicy
from .models.targets import RemovalTargets
from .recognition.annotations import recognize_annotations
from .recognition.imports import recognize_imports
from .removal.engine import build_edit_plan
from .removal.matcher import NameMatcher
from .removal.serializer import serialize

logger = get_logger(__name__)

TargetsLike = Union[RemovalTargets, Iterable[str]]


def transform(text: str, targets: TargetsLike = ()) -> str:
    """
    Remove targeted annotation usages from a Java source text.

    Args:
        text: Source text (ordinary compilation unit or module declaration)
        targets: RemovalTargets, or plain annotation names (simple or qualified)

    Returns:
        Transformed text

    Raises:
        TransformError: MalformedEscapeError, UnterminatedTokenError or
            MalformedAnnotationError, located in the original text

    Examples:
        >>> transform("@Deprecated\\nint foo;\\n", {"Deprecated"})
        'int foo;\\n'
        >>> transform("class C { int foo; }", {"foo"})
        'class C { int foo; }'
    """
    return transform_source(text, targets).output


def transform_source(
    text: str,
    targets: TargetsLike = (),
    *,
    file_kind: FileKind = FileKind.COMPILATION_UNIT,
    whitespace_policy: WhitespacePolicy = WhitespacePolicy.LINE,
    remove_annotations: bool = True,
    remove_imports: bool = False,
    path: Optional[str] = None,
) -> TransformResult:
    """
    Run the full pipeline and return the detailed result.

    Args:
        text: Source text
        targets: RemovalTargets, or plain annotation names
        file_kind: Compilation unit kind, carried into results and errors
        whitespace_policy: Whitespace removed together with an annotation
        remove_annotations: Whether matching annotation usages are removed
        remove_imports: Whether matching import declarations are removed
        path: Source path, for error reporting only

    Returns:
        TransformResult with output text, edit plan and match statistics

    Raises:
        TransformError: On the first lexical or structural error
    """
    start_time = time.time()
    removal_targets = coerce_targets(targets)
    translated: Optional[TranslatedText] = None

    try:
        translated = translate_escapes(text)
        tokens = tokenize(translated.text)
        usages = recognize_annotations(tokens)
        imports = recognize_imports(tokens)

        matcher = NameMatcher(removal_targets, imports)
        outcome = build_edit_plan(
            translated.text,
            usages,
            imports,
            matcher,
            policy=whitespace_policy,
            remove_annotations=remove_annotations,
            remove_imports=remove_imports,
        )
        output = serialize(translated, outcome.plan)

    except TransformError as error:
        if translated is not None:
            error.offset = translated.raw_offset(error.offset)
        error.file_kind = file_kind
        error.path = path
        error.locate(text)
        raise

    logger.debug(
        "source_transformed",
        path=path,
        file_kind=file_kind.value,
        annotations_found=len(usages),
        annotations_removed=len(outcome.removed_annotations),
        imports_removed=len(outcome.removed_imports),
        processing_time_ms=round((time.time() - start_time) * 1000, 2),
    )

    return TransformResult(
        output=output,
        file_kind=file_kind,
        edit_plan=outcome.plan,
        removed_annotations=outcome.removed_annotations,
        removed_imports=outcome.removed_imports,
        matched_names=sorted(outcome.matched_names),
        matched_patterns=sorted(outcome.matched_patterns),
    )


def coerce_targets(targets: TargetsLike) -> RemovalTargets:
    """Accept a RemovalTargets instance or an iterable of names."""
    if isinstance(targets, RemovalTargets):
        return targets
    if isinstance(targets, str):
        targets = [targets]
    return RemovalTargets(names=frozenset(targets))
