"""
Edit plan models.

An EditPlan is an ordered list of non-overlapping deletions over the
escape-translated text. It is built by the removal engine and consumed by the
serializer; nothing else mutates it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Literal

DeletionReason = Literal["annotation", "import"]


class WhitespacePolicy(str, Enum):
    """
    How much whitespace around a removed annotation is deleted with it.

    LINE: an annotation alone on its line takes the whole line with it;
        otherwise the annotation and the blanks that follow it go.
    FOLLOWING: the annotation and all following whitespace go, unless that
        whitespace runs to the end of the text.
    NONE: exactly the annotation span.
    """

    LINE = "line"
    FOLLOWING = "following"
    NONE = "none"


@dataclass(frozen=True)
class Deletion:
    """
    A span of translated text to drop from the output.

    Attributes:
        start: Start offset (inclusive)
        end: End offset (exclusive)
        reason: What produced the deletion ("annotation" | "import")
        name: Annotation or import name that matched
    """

    start: int
    end: int
    reason: DeletionReason
    name: str

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("Span positions must be non-negative")
        if self.start > self.end:
            raise ValueError("start must be <= end")
        if self.reason not in ("annotation", "import"):
            raise ValueError(f"Invalid reason '{self.reason}'")

    def length(self) -> int:
        return self.end - self.start


@dataclass
class EditPlan:
    """Ordered, non-overlapping deletions for one file."""

    deletions: List[Deletion] = field(default_factory=list)

    def __post_init__(self):
        previous_end = 0
        for deletion in self.deletions:
            if deletion.start < previous_end:
                raise ValueError(
                    f"Deletion [{deletion.start}, {deletion.end}) overlaps or precedes "
                    f"an earlier deletion ending at {previous_end}"
                )
            previous_end = deletion.end

    @classmethod
    def from_deletions(cls, deletions: Iterable[Deletion]) -> "EditPlan":
        """
        Build a plan from deletions in any order.

        Overlapping deletions are merged into one; the merged deletion keeps
        the reason and name of the one that starts first.

        Args:
            deletions: Deletions, possibly unsorted or overlapping

        Returns:
            EditPlan with sorted, disjoint deletions
        """
        merged: List[Deletion] = []
        for deletion in sorted(deletions, key=lambda d: (d.start, -d.end)):
            if deletion.length() == 0:
                continue
            if merged and deletion.start < merged[-1].end:
                last = merged[-1]
                if deletion.end > last.end:
                    merged[-1] = Deletion(last.start, deletion.end, last.reason, last.name)
                continue
            merged.append(deletion)
        return cls(merged)

    @property
    def is_empty(self) -> bool:
        return not self.deletions

    def deleted_length(self) -> int:
        """Total number of translated characters removed."""
        return sum(d.length() for d in self.deletions)

    def __iter__(self) -> Iterator[Deletion]:
        return iter(self.deletions)

    def __len__(self) -> int:
        return len(self.deletions)
