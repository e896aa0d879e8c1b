"""
Result and report models exposed to callers of the pipeline and the runner.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .annotations import AnnotationUsage, ImportDeclaration
from .edit_plan import EditPlan


class FileKind(str, Enum):
    """Kind of compilation unit being transformed."""

    COMPILATION_UNIT = "compilation_unit"
    MODULE_DECLARATION = "module_declaration"


class ErrorReport(BaseModel):
    """Structured description of a failed transformation."""

    path: Optional[str] = Field(default=None, description="Source path, if any")
    file_kind: FileKind = Field(description="Kind of the failing file")
    error_kind: str = Field(description="MalformedEscape | UnterminatedToken | MalformedAnnotation | MalformedImport")
    offset: int = Field(description="Character offset in the original text", ge=0)
    line: Optional[int] = Field(default=None, description="1-based line", ge=1)
    column: Optional[int] = Field(default=None, description="1-based column", ge=1)
    detail: str = Field(default="", description="Human-readable detail")


class TransformResult(BaseModel):
    """
    Outcome of transforming one source text.

    Offsets in edit_plan, removed_annotations and removed_imports refer to the
    escape-translated text; output is rebuilt from the original spelling.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    output: str = Field(description="Transformed source text")
    file_kind: FileKind = Field(default=FileKind.COMPILATION_UNIT)
    edit_plan: EditPlan = Field(default_factory=EditPlan)
    removed_annotations: List[AnnotationUsage] = Field(default_factory=list)
    removed_imports: List[ImportDeclaration] = Field(default_factory=list)
    matched_names: List[str] = Field(
        default_factory=list, description="Target names that matched at least once"
    )
    matched_patterns: List[str] = Field(
        default_factory=list, description="Target patterns that matched at least once"
    )

    @property
    def changed(self) -> bool:
        return not self.edit_plan.is_empty


class FileOutcome(BaseModel):
    """Per-file record produced by the runner."""

    path: str
    origin: str = Field(description="Command-line root the file was found under")
    file_kind: FileKind = FileKind.COMPILATION_UNIT
    changed: bool = False
    written: bool = False
    removed_annotations: int = Field(default=0, ge=0)
    removed_imports: int = Field(default=0, ge=0)
    matched_names: List[str] = Field(default_factory=list)
    matched_patterns: List[str] = Field(default_factory=list)
    error: Optional[ErrorReport] = None
    error_message: Optional[str] = None


class RunSummary(BaseModel):
    """Aggregated outcome of a multi-file run."""

    outcomes: List[FileOutcome] = Field(default_factory=list)
    unmatched_names: List[str] = Field(default_factory=list)
    unmatched_patterns: List[str] = Field(default_factory=list)
    unmodified_origins: List[str] = Field(default_factory=list)
    strict_violations: List[str] = Field(default_factory=list)

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.error_message is not None]

    @property
    def files_changed(self) -> int:
        return sum(1 for o in self.outcomes if o.changed)
