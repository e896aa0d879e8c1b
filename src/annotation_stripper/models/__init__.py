# Data models for the annotation stripping pipeline

from .tokens import TRIVIA_KINDS, Token, TokenKind
from .annotations import AnnotationUsage, ImportDeclaration
from .edit_plan import Deletion, EditPlan, WhitespacePolicy
from .targets import RemovalTargets
from .results import ErrorReport, FileKind, FileOutcome, RunSummary, TransformResult

__all__ = [
    "Token",
    "TokenKind",
    "TRIVIA_KINDS",
    "AnnotationUsage",
    "ImportDeclaration",
    "Deletion",
    "EditPlan",
    "WhitespacePolicy",
    "RemovalTargets",
    "ErrorReport",
    "FileKind",
    "FileOutcome",
    "RunSummary",
    "TransformResult",
]
