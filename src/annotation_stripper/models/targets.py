"""
Removal target set.

The set of annotation (and import) names to strip from one file. It is an
explicit, immutable parameter of every transformation; nothing reads it from
global state.
"""

import re
from typing import FrozenSet, Iterable, List, Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

_NAME_SEGMENT = re.compile(r"^[^\W\d][\w$]*$|^\$[\w$]*$")


class RemovalTargets(BaseModel):
    """
    Names and patterns selecting annotations to remove.

    Names without a dot are simple names and match any annotation with that
    simple name. Dotted names are qualified and only match usages whose
    qualified form is known to be exactly that name. Patterns are regular
    expressions searched in the name as written in the source.
    """

    model_config = ConfigDict(frozen=True)

    names: FrozenSet[str] = Field(
        default_factory=frozenset, description="Simple or fully-qualified annotation names"
    )
    patterns: List[str] = Field(
        default_factory=list, description="Regular expressions matched against written names"
    )

    _compiled: List[Pattern[str]] = PrivateAttr(default_factory=list)

    @field_validator("names", mode="before")
    @classmethod
    def _normalize_names(cls, value):
        if isinstance(value, str):
            value = [value]
        names = set()
        for raw in value or ():
            name = "".join(str(raw).split())
            if not name:
                raise ValueError("Target names must not be empty")
            for segment in name.split("."):
                if not _NAME_SEGMENT.match(segment):
                    raise ValueError(f"Invalid annotation name: {raw!r}")
            names.add(name)
        return frozenset(names)

    @field_validator("patterns")
    @classmethod
    def _validate_patterns(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e
        return value

    def model_post_init(self, __context) -> None:
        self._compiled = [re.compile(p) for p in self.patterns]

    @classmethod
    def of(cls, names: Iterable[str] = (), patterns: Optional[Iterable[str]] = None) -> "RemovalTargets":
        """Convenience constructor from plain iterables."""
        return cls(names=frozenset(names), patterns=list(patterns or []))

    @property
    def simple_names(self) -> FrozenSet[str]:
        return frozenset(n for n in self.names if "." not in n)

    @property
    def qualified_names(self) -> FrozenSet[str]:
        return frozenset(n for n in self.names if "." in n)

    @property
    def compiled_patterns(self) -> List[Pattern[str]]:
        return self._compiled

    @property
    def is_empty(self) -> bool:
        return not self.names and not self.patterns
