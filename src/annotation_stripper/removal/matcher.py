"""
Name matching against the removal target set.

Matching policy for annotation usages:
1. resolve the usage's qualified form: the written name when dotted,
   otherwise the file's single-type import for its simple name;
2. a qualified target matches only that resolved qualified form;
3. a simple target matches any usage with that simple name;
4. a usage whose simple name was brought in by a removed import matches when
   written as the simple name or as that import's qualified name;
5. a pattern matches when it is found anywhere in the written name.

A qualified target therefore never strips an unrelated annotation that merely
shares its simple name.
"""

from typing import Dict, Iterable, Optional, Set

from ..models.annotations import ImportDeclaration
from ..models.targets import RemovalTargets


class NameMatcher:
    """
    Match annotation and import names for one file.

    Records which target names and patterns matched so the runner can report
    redundant matchers in strict mode.
    """

    def __init__(self, targets: RemovalTargets, imports: Iterable[ImportDeclaration] = ()):
        self._simple = targets.simple_names
        self._qualified = targets.qualified_names
        self._patterns = targets.compiled_patterns
        self._imported: Dict[str, str] = {
            d.simple_name: d.name for d in imports if not d.is_static and not d.is_on_demand
        }
        self._removed_imports: Dict[str, str] = {}
        self.matched_names: Set[str] = set()
        self.matched_patterns: Set[str] = set()

    def resolve(self, name: str) -> Optional[str]:
        """Qualified form of an annotation name, if it can be known."""
        if "." in name:
            return name
        return self._imported.get(name)

    def matches_annotation(self, name: str) -> bool:
        """
        Check whether an annotation written as name is targeted.

        Args:
            name: Dotted annotation name as written (e.g. "Nullable", "a.b.Nullable")

        Returns:
            True if the usage must be removed
        """
        simple = name.rsplit(".", 1)[-1]

        qualified = self.resolve(name)
        if qualified is not None and qualified in self._qualified:
            self.matched_names.add(qualified)
            return True

        if simple in self._simple:
            self.matched_names.add(simple)
            return True

        removed = self._removed_imports.get(simple)
        if removed is not None and name in (simple, removed):
            return True

        return self._matches_pattern(name)

    def matches_import(self, declaration: ImportDeclaration) -> bool:
        """
        Check whether an import declaration is targeted.

        Static imports are matched by pattern on their full name, or by names
        and patterns on the class they import from.
        """
        if declaration.is_static:
            if self._matches_pattern(declaration.name):
                return True
            owner = declaration.owner_name
            return owner is not None and self._matches_type_name(owner)
        return self._matches_type_name(declaration.name)

    def register_removed_import(self, declaration: ImportDeclaration) -> None:
        """Remember a removed single-type import for annotation matching."""
        if declaration.is_static or declaration.is_on_demand or declaration.owner_name is None:
            return
        self._removed_imports[declaration.simple_name] = declaration.name

    def _matches_type_name(self, name: str) -> bool:
        if name in self._qualified:
            self.matched_names.add(name)
            return True
        simple = name.rsplit(".", 1)[-1]
        if simple in self._simple:
            self.matched_names.add(simple)
            return True
        return self._matches_pattern(name)

    def _matches_pattern(self, name: str) -> bool:
        for pattern in self._patterns:
            if pattern.search(name):
                self.matched_patterns.add(pattern.pattern)
                return True
        return False
