"""
Command-line interface for stripping annotations from Java sources.

Usage:
    # Print the transformed file to stdout
    annotation-stripper -n Deprecated Foo.java

    # Rewrite every .java file under src/ in place
    annotation-stripper -n Nullable -n NonNull -i src/

    # Also drop the matching imports, fail if a matcher was redundant
    annotation-stripper -p 'org[.]jspecify[.].*' --imports -i --strict src/

    # Filter stdin to stdout
    annotation-stripper -n Serial < Foo.java
"""

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from annotation_stripper.config import settings
from annotation_stripper.errors import TransformError
from annotation_stripper.files.reader import decode_source, discover_sources
from annotation_stripper.logging_config import get_logger, setup_logging
from annotation_stripper.models.edit_plan import WhitespacePolicy
from annotation_stripper.models.targets import RemovalTargets
from annotation_stripper.pipeline import transform_source
from annotation_stripper.runner import RunOptions, run
from annotation_stripper.version import version_string

PROG = "annotation-stripper"

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Remove annotation usages (and optionally their imports) from Java sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Matchers:
  -n takes a simple name (Nullable) or a fully-qualified name
  (org.jspecify.annotations.Nullable); a qualified name only matches usages
  that are written qualified or imported under that name.
  -p takes a regular expression searched in the name as written.

Examples:
  %(prog)s -n Deprecated Foo.java
  %(prog)s -n Nullable -i src/
  %(prog)s -p 'org[.]jspecify' --imports -i --strict src/
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories (searched recursively for .java files); stdin if omitted",
    )
    parser.add_argument(
        "-n",
        "--name",
        action="append",
        default=[],
        metavar="NAME",
        help="Annotation name to remove (repeatable)",
    )
    parser.add_argument(
        "-p",
        "--pattern",
        action="append",
        default=[],
        metavar="REGEX",
        help="Regular expression matching annotation names to remove (repeatable)",
    )
    parser.add_argument(
        "-i",
        "--in-place",
        action="store_true",
        help="Rewrite changed files instead of printing them",
    )
    parser.add_argument(
        "-s",
        "--strict",
        action="store_true",
        help="(with -i only) fail if any matcher or input path led to no change",
    )
    parser.add_argument(
        "--imports",
        action="store_true",
        help="Also remove import declarations matching the names and patterns",
    )
    parser.add_argument(
        "--no-annotations",
        action="store_true",
        help="Keep annotation usages (only meaningful with --imports)",
    )
    parser.add_argument(
        "--whitespace",
        choices=[p.value for p in WhitespacePolicy],
        default=None,
        help=f"Whitespace removed with an annotation (default: {settings.whitespace_policy.value})",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Worker threads (default: one per CPU)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render logs as JSON lines",
    )
    parser.add_argument("--version", action="version", version=version_string())

    return parser


def _fail(message: str, code: int) -> int:
    print(f"{PROG}: {message}", file=sys.stderr)
    return code


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code: 0 on success, 1 on usage errors and strict mode failures,
        2 when files could not be processed
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else None, json_output=args.json_logs or None)

    if not args.name and not args.pattern:
        return _fail("no matcher specified", 1)
    if args.strict and not args.in_place:
        return _fail("--strict requires --in-place", 1)
    if args.no_annotations and not args.imports:
        return _fail("--no-annotations without --imports leaves nothing to remove", 1)
    if args.jobs is not None and args.jobs < 1:
        return _fail("--jobs must be at least 1", 1)

    try:
        targets = RemovalTargets(names=args.name, patterns=args.pattern)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        return _fail(f"invalid matcher: {messages}", 1)

    options = RunOptions(
        targets=targets,
        in_place=args.in_place,
        strict=args.strict,
        remove_annotations=not args.no_annotations,
        remove_imports=args.imports,
        whitespace_policy=WhitespacePolicy(args.whitespace) if args.whitespace else settings.whitespace_policy,
        max_workers=args.jobs or settings.max_workers,
        default_encoding=settings.default_encoding,
        detect_encoding=settings.detect_encoding,
    )

    if not args.paths:
        if args.in_place:
            return _fail("no input files", 1)
        return _filter_stdin(options)

    try:
        sources = discover_sources(args.paths, settings.source_suffix, settings.module_file_name)
    except FileNotFoundError as e:
        return _fail(str(e), 2)

    if not sources:
        return _fail("no valid input files", 1)

    summary = run(sources, options, emit=sys.stdout.write)

    if summary.failed:
        print(f"{PROG}: errors occurred during the process:", file=sys.stderr)
        for outcome in summary.failed:
            print(f"- {outcome.error_message}", file=sys.stderr)
        return 2

    if summary.strict_violations:
        print(f"{PROG}: strict mode failed:", file=sys.stderr)
        for violation in summary.strict_violations:
            print(f"- {violation}", file=sys.stderr)
        return 1

    return 0


def _filter_stdin(options: RunOptions) -> int:
    """Transform stdin to stdout."""
    data = sys.stdin.buffer.read()
    try:
        decoded = decode_source(data, options.default_encoding, options.detect_encoding)
    except UnicodeDecodeError as e:
        return _fail(f"could not decode stdin: {e.reason}", 2)

    try:
        result = transform_source(
            decoded.text,
            options.targets,
            whitespace_policy=options.whitespace_policy,
            remove_annotations=options.remove_annotations,
            remove_imports=options.remove_imports,
        )
    except TransformError as e:
        logger.error("transform_failed", error_kind=e.error_kind, line=e.line, column=e.column)
        return _fail(str(e), 2)

    sys.stdout.write(result.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
