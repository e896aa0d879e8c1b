# Early lexical phases: escape translation and scanning

from .escapes import TranslatedText, translate_escapes
from .scanner import KEYWORDS, tokenize

__all__ = [
    "TranslatedText",
    "translate_escapes",
    "tokenize",
    "KEYWORDS",
]
