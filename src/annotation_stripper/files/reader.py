"""
Source file discovery, decoding and write-back.

Files are read as bytes and decoded without newline translation so that line
terminators survive a round trip unchanged. UTF-8 is tried first; when it
fails, charset-normalizer picks the most plausible encoding and the same
encoding is used to write the file back.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

import charset_normalizer

from ..errors import SourceIOError
from ..logging_config import get_logger
from ..models.results import FileKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """
    A discovered source file.

    Attributes:
        path: File path
        origin: Command-line root the file was found under
        file_kind: Compilation unit kind derived from the file name
    """

    path: Path
    origin: str
    file_kind: FileKind = FileKind.COMPILATION_UNIT


@dataclass(frozen=True)
class DecodedSource:
    """Decoded text together with the encoding it was read with."""

    text: str
    encoding: str


def file_kind_for(path: Path, module_file_name: str = "module-info.java") -> FileKind:
    """Module declarations are recognized by their file name."""
    if path.name == module_file_name:
        return FileKind.MODULE_DECLARATION
    return FileKind.COMPILATION_UNIT


def discover_sources(
    roots: Sequence[str],
    suffix: str = ".java",
    module_file_name: str = "module-info.java",
) -> List[SourceFile]:
    """
    Expand command-line roots into the list of files to process.

    A file root is taken as is, whatever its suffix. A directory root is walked
    recursively for files ending in suffix. Symbolic links are never followed
    or processed.

    Args:
        roots: Paths given on the command line
        suffix: File suffix selected inside directories
        module_file_name: File name of module declarations

    Returns:
        Source files, directory contents in sorted order

    Raises:
        FileNotFoundError: If a root does not exist
    """
    sources: List[SourceFile] = []

    for root in roots:
        root_path = Path(root)

        if root_path.is_symlink():
            logger.info("symlink_skipped", path=root)
            continue
        if not root_path.exists():
            raise FileNotFoundError(f"File does not exist: {root}")

        if root_path.is_file():
            sources.append(SourceFile(root_path, root, file_kind_for(root_path, module_file_name)))
            continue

        if root_path.is_dir():
            found = 0
            for directory, dirnames, filenames in os.walk(root_path):
                dirnames.sort()
                for filename in sorted(filenames):
                    entry = Path(directory) / filename
                    if not filename.endswith(suffix) or entry.is_symlink() or not entry.is_file():
                        continue
                    sources.append(SourceFile(entry, root, file_kind_for(entry, module_file_name)))
                    found += 1
            logger.debug("directory_walked", root=root, files=found)

    return sources


def decode_source(data: bytes, default_encoding: str = "utf-8", detect: bool = True) -> DecodedSource:
    """
    Decode raw file bytes.

    Args:
        data: File content
        default_encoding: Encoding tried first
        detect: Whether to fall back to charset-normalizer detection

    Returns:
        DecodedSource with text and the encoding used

    Raises:
        UnicodeDecodeError: If decoding fails and detection is disabled or
            finds nothing
    """
    try:
        return DecodedSource(data.decode(default_encoding), default_encoding)
    except UnicodeDecodeError:
        if not detect:
            raise

    detected = charset_normalizer.from_bytes(data).best()
    if detected is None:
        raise UnicodeDecodeError(default_encoding, data, 0, len(data), "no plausible encoding detected")

    logger.debug("encoding_detected", encoding=detected.encoding)
    return DecodedSource(str(detected), detected.encoding)


def read_source(path: Path, default_encoding: str = "utf-8", detect: bool = True) -> DecodedSource:
    """
    Read and decode a source file.

    Raises:
        SourceIOError: If the file cannot be read or decoded
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise SourceIOError(str(path), f"Could not open file for reading: {e.strerror or e}") from e

    try:
        return decode_source(data, default_encoding, detect)
    except UnicodeDecodeError as e:
        raise SourceIOError(str(path), f"Could not decode file: {e.reason}") from e


def write_source(path: Path, text: str, encoding: str) -> None:
    """
    Overwrite a source file with text in the given encoding.

    Raises:
        SourceIOError: If the file cannot be encoded or written
    """
    try:
        data = text.encode(encoding)
    except UnicodeEncodeError as e:
        raise SourceIOError(str(path), f"Could not encode file as {encoding}: {e.reason}") from e

    try:
        path.write_bytes(data)
    except OSError as e:
        raise SourceIOError(str(path), f"Could not open file for writing: {e.strerror or e}") from e
