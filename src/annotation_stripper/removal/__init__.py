# Selection of removals and reconstruction of the output text

from .matcher import NameMatcher
from .engine import RemovalOutcome, annotation_extent, build_edit_plan, select_annotations
from .serializer import render_translated, serialize

__all__ = [
    "NameMatcher",
    "RemovalOutcome",
    "annotation_extent",
    "build_edit_plan",
    "select_annotations",
    "render_translated",
    "serialize",
]
