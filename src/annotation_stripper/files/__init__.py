# Source file handling

from .reader import (
    DecodedSource,
    SourceFile,
    decode_source,
    discover_sources,
    file_kind_for,
    read_source,
    write_source,
)

__all__ = [
    "DecodedSource",
    "SourceFile",
    "decode_source",
    "discover_sources",
    "file_kind_for",
    "read_source",
    "write_source",
]
