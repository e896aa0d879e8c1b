"""
Multi-file runner.

Each file is transformed independently by a worker thread; there is no shared
mutable state between files, so results are simply collected once all
workers finish. A failing file is reported and left untouched; the other files
are still processed.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .errors import SourceIOError, TransformError
from .files.reader import SourceFile, read_source, write_source
from .logging_config import get_logger
from .models.edit_plan import WhitespacePolicy
from .models.results import FileOutcome, RunSummary
from .models.targets import RemovalTargets
from .pipeline import transform_source

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """
    Options shared by every file of a run.

    Attributes:
        targets: Names and patterns to remove
        in_place: Rewrite changed files instead of printing results
        strict: Fail when a matcher or an input root turned out redundant
        remove_annotations: Remove matching annotation usages
        remove_imports: Remove matching import declarations
        whitespace_policy: Whitespace removed together with annotations
        max_workers: Worker threads (0 = one per CPU)
        default_encoding: Encoding tried first when reading
        detect_encoding: Fall back to charset detection
    """

    targets: RemovalTargets
    in_place: bool = False
    strict: bool = False
    remove_annotations: bool = True
    remove_imports: bool = False
    whitespace_policy: WhitespacePolicy = WhitespacePolicy.LINE
    max_workers: int = 0
    default_encoding: str = "utf-8"
    detect_encoding: bool = True


def process_file(source: SourceFile, options: RunOptions) -> Tuple[FileOutcome, Optional[str]]:
    """
    Transform one file.

    Args:
        source: File to process
        options: Run options

    Returns:
        Tuple of (outcome, output_text); output_text is None when the file failed
    """
    path = str(source.path)
    outcome = FileOutcome(path=path, origin=source.origin, file_kind=source.file_kind)

    try:
        decoded = read_source(source.path, options.default_encoding, options.detect_encoding)
        result = transform_source(
            decoded.text,
            options.targets,
            file_kind=source.file_kind,
            whitespace_policy=options.whitespace_policy,
            remove_annotations=options.remove_annotations,
            remove_imports=options.remove_imports,
            path=path,
        )
    except TransformError as e:
        logger.error("transform_failed", path=path, error_kind=e.error_kind, line=e.line, column=e.column)
        outcome.error = e.to_report()
        outcome.error_message = str(e)
        return outcome, None
    except SourceIOError as e:
        logger.error("read_failed", path=path, reason=e.reason)
        outcome.error_message = str(e)
        return outcome, None

    outcome.changed = result.changed
    outcome.removed_annotations = len(result.removed_annotations)
    outcome.removed_imports = len(result.removed_imports)
    outcome.matched_names = result.matched_names
    outcome.matched_patterns = result.matched_patterns

    if options.in_place and result.changed:
        try:
            write_source(source.path, result.output, decoded.encoding)
        except SourceIOError as e:
            logger.error("write_failed", path=path, reason=e.reason)
            outcome.error_message = str(e)
            return outcome, None
        outcome.written = True
        logger.info("Removing symbols from file", path=path)

    return outcome, result.output


def run(
    sources: Sequence[SourceFile],
    options: RunOptions,
    emit: Optional[Callable[[str], None]] = None,
) -> RunSummary:
    """
    Process files in parallel and summarize the run.

    Args:
        sources: Files to process
        options: Run options
        emit: Receives "<path>:\\n<output>\\n" for every file when not
            editing in place, in input order

    Returns:
        RunSummary with per-file outcomes and strict mode findings
    """
    workers = options.max_workers or os.cpu_count() or 1
    workers = max(1, min(workers, len(sources)))

    logger.debug("processing_files", files_count=len(sources), workers=workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(process_file, source, options) for source in sources]
        results = [future.result() for future in futures]

    outcomes: List[FileOutcome] = []
    for outcome, output in results:
        outcomes.append(outcome)
        if emit is not None and not options.in_place and output is not None:
            emit(f"{outcome.path}:\n{output}\n")

    summary = summarize(outcomes, options)

    logger.debug(
        "run_completed",
        files=len(outcomes),
        changed=summary.files_changed,
        failed=len(summary.failed),
    )
    return summary


def summarize(outcomes: List[FileOutcome], options: RunOptions) -> RunSummary:
    """
    Aggregate per-file outcomes and compute strict mode violations.

    Args:
        outcomes: Per-file outcomes
        options: Run options

    Returns:
        RunSummary
    """
    matched_names: Set[str] = set()
    matched_patterns: Set[str] = set()
    modified_origins: Set[str] = set()
    origins: List[str] = []

    for outcome in outcomes:
        matched_names.update(outcome.matched_names)
        matched_patterns.update(outcome.matched_patterns)
        if outcome.origin not in origins:
            origins.append(outcome.origin)
        if outcome.changed:
            modified_origins.add(outcome.origin)

    summary = RunSummary(
        outcomes=outcomes,
        unmatched_names=sorted(set(options.targets.names) - matched_names),
        unmatched_patterns=[p for p in options.targets.patterns if p not in matched_patterns],
        unmodified_origins=[o for o in origins if o not in modified_origins],
    )

    if options.strict:
        violations = []
        violations.extend(f"name was never matched: {n}" for n in summary.unmatched_names)
        violations.extend(f"pattern was never matched: {p}" for p in summary.unmatched_patterns)
        if options.remove_annotations and not any(o.removed_annotations for o in outcomes):
            violations.append("no annotation was removed")
        violations.extend(f"no file was modified under: {o}" for o in summary.unmodified_origins)
        summary.strict_violations = violations

    return summary
