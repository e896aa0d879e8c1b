"""
Structural records recognized from the token stream.

AnnotationUsage covers one marker-anchored annotation (marker, qualified name
and optional argument list). ImportDeclaration covers one `import` statement.
Both use offsets into the escape-translated text.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AnnotationUsage:
    """
    A concrete annotation occurrence.

    Attributes:
        start: Offset of the annotation marker
        end: Offset just past the name, or past the closing parenthesis
        name: Dotted name as written, with comments and whitespace dropped
        has_arguments: Whether an argument list follows the name
        depth: Number of enclosing annotation argument lists
        parent: Index of the enclosing usage in recognition order, if any
    """

    start: int
    end: int
    name: str
    has_arguments: bool = False
    depth: int = 0
    parent: Optional[int] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Annotation usage requires a name")
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid annotation span [{self.start}, {self.end})")
        if self.depth < 0:
            raise ValueError("Nesting depth must be non-negative")

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def is_qualified(self) -> bool:
        return "." in self.name

    def contains(self, other: "AnnotationUsage") -> bool:
        """Check whether other lies strictly inside this usage's span."""
        return self.start <= other.start and other.end <= self.end and self != other

    def __repr__(self) -> str:
        return f"AnnotationUsage(@{self.name}, [{self.start},{self.end}], depth={self.depth})"


@dataclass(frozen=True)
class ImportDeclaration:
    """
    An `import` declaration.

    Attributes:
        start: Offset of the `import` keyword
        end: Offset just past the terminating semicolon
        name: Imported name with whitespace and comments dropped
            (e.g. "java.util.List", "java.util.*", "java.lang.Math.max")
        is_static: Whether this is an `import static` declaration
    """

    start: int
    end: int
    name: str
    is_static: bool = False

    @property
    def is_on_demand(self) -> bool:
        """Star import (`import a.b.*;`)."""
        return self.name.endswith("*")

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def owner_name(self) -> Optional[str]:
        """Name without its last segment, or None for a single-segment name."""
        if "." not in self.name:
            return None
        return self.name.rsplit(".", 1)[0]
