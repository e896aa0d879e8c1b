# Structural recognition over the token stream

from .annotations import recognize_annotations, significant_tokens
from .imports import recognize_imports

__all__ = [
    "recognize_annotations",
    "recognize_imports",
    "significant_tokens",
]
