"""In-memory model of a locale catalog.

A catalog is a nested tree of groups (mappings) and leaves (translated
strings) for one language. A leaf is addressed by its key path, the
dot-separated names from the root ("events.form.title"). Plural variants
are sibling leaves whose names end in a CLDR category suffix
("items_one", "items_other").
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from infrastructure.i18n.models import PluralCategory

_MISSING = object()

PLURAL_SUFFIXES: Dict[str, PluralCategory] = {c.suffix: c for c in PluralCategory}

Placeholder = Callable[[str, Any], Any]


def split_plural_key(path: str) -> Tuple[str, Optional[PluralCategory]]:
    """Split a key path into its plural base and category.

    "cart.items_one" -> ("cart.items", PluralCategory.ONE)
    "cart.title" -> ("cart.title", None)
    """
    head, _, name = path.rpartition(".")
    for suffix, category in PLURAL_SUFFIXES.items():
        if name.endswith(suffix) and len(name) > len(suffix):
            base = name[: -len(suffix)]
            return (f"{head}.{base}" if head else base), category
    return path, None


def plural_variant(base: str, category: PluralCategory) -> str:
    """Key path of one plural variant of a base key."""
    return f"{base}{category.suffix}"


@dataclass
class PluralFamily:
    """Plural variants of one base key present in a catalog.

    Attributes:
        base: Base key path, without suffix.
        categories: Categories with a variant present.
    """

    base: str
    categories: Set[PluralCategory] = field(default_factory=set)

    def missing(self, required: Tuple[PluralCategory, ...]) -> List[PluralCategory]:
        return [c for c in required if c not in self.categories]

    def extra(self, required: Tuple[PluralCategory, ...]) -> List[PluralCategory]:
        return [c for c in PluralCategory.ordered(self.categories) if c not in required]

    def is_complete(self, required: Tuple[PluralCategory, ...]) -> bool:
        return not self.missing(required)


@dataclass
class MergeOutcome:
    """Key paths touched by one merge.

    Attributes:
        added: Leaves that did not exist before.
        updated: Existing leaves whose value changed.
        skipped: Leaves left alone (template mode, or identical value).
        conflicts: Patch leaves refused because a group exists at their key
            path, or a leaf exists on the way to it.
        invalid: Patch leaves refused because their value is not a string.
    """

    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)


class CatalogTree:
    """Nested catalog of one language.

    Args:
        data: Nested mapping of groups and leaves. Copied, never aliased.
        language: Language code of the catalog, if known.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, language: Optional[str] = None):
        self.language = language
        self._root: Dict[str, Any] = copy.deepcopy(dict(data)) if data else {}

    @classmethod
    def from_flat(cls, data: Mapping[str, Any], language: Optional[str] = None) -> "CatalogTree":
        """Build a tree from a mapping whose keys may be dotted key paths.

        Nested and flat forms can be mixed:
        {"nav.home": "Accueil", "nav": {"about": "À propos"}}
        """
        tree = cls(language=language)
        for path, value in _flatten(data):
            tree.set(path, value)
        return tree

    def key_paths(self) -> List[str]:
        """All leaf key paths, in document order. Null leaves are absent."""
        return [path for path, _ in self.leaves()]

    def leaves(self) -> Iterator[Tuple[str, Any]]:
        return iter([(path, value) for path, value in _flatten(self._root) if value is not None])

    def get(self, path: str, default: Any = None) -> Any:
        node = self._lookup(path)
        if node is _MISSING or isinstance(node, dict):
            return default
        return node

    def has(self, path: str) -> bool:
        """True when a leaf exists at the key path."""
        node = self._lookup(path)
        return node is not _MISSING and node is not None and not isinstance(node, dict)

    def set(self, path: str, value: Any) -> None:
        """Set a leaf, creating groups on the way.

        A leaf found where a group is needed is replaced by the group.
        """
        parts = path.split(".")
        node = self._root
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value

    def merge(
        self,
        patch: Any,
        template: bool = False,
        placeholder: Optional[Placeholder] = None,
    ) -> MergeOutcome:
        """Deep-merge a patch into the tree.

        In normal mode patch leaves overwrite existing leaves. In template
        mode a leaf is only set when nothing exists at its key path yet.
        A patch leaf never replaces a group, and never turns an existing
        leaf into a group; such leaves are listed as conflicts. Leaves whose
        value is not a string are listed as invalid. Neither is written.

        Args:
            patch: CatalogTree or mapping (nested or flat-dotted).
            template: Set-if-absent mode.
            placeholder: Optional callable (path, value) -> value applied
                to every leaf that gets written.

        Returns:
            MergeOutcome listing the key paths touched.
        """
        items = patch.leaves() if isinstance(patch, CatalogTree) else _flatten(patch)
        outcome = MergeOutcome()
        for path, value in items:
            current = self._lookup(path)
            if isinstance(current, dict) or self._leaf_on_path(path):
                outcome.conflicts.append(path)
                continue
            absent = current is _MISSING or current is None
            if template and not absent:
                outcome.skipped.append(path)
                continue
            if placeholder is not None:
                value = placeholder(path, value)
            if not isinstance(value, str):
                outcome.invalid.append(path)
                continue
            if current == value:
                outcome.skipped.append(path)
                continue
            self.set(path, value)
            if absent:
                outcome.added.append(path)
            else:
                outcome.updated.append(path)
        return outcome

    def plural_families(self) -> Dict[str, PluralFamily]:
        """Plural families by base key path."""
        families: Dict[str, PluralFamily] = {}
        for path in self.key_paths():
            base, category = split_plural_key(path)
            if category is None:
                continue
            families.setdefault(base, PluralFamily(base=base)).categories.add(category)
        return families

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._root)

    def __len__(self) -> int:
        return len(self.key_paths())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogTree):
            return NotImplemented
        return self._root == other._root

    def __repr__(self) -> str:
        return f"CatalogTree(language={self.language!r}, keys={len(self)})"

    def _lookup(self, path: str) -> Any:
        node: Any = self._root
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def _leaf_on_path(self, path: str) -> bool:
        """True when a leaf sits where a group of the key path should be."""
        node: Any = self._root
        for part in path.split(".")[:-1]:
            node = node.get(part)
            if node is None:
                return False
            if not isinstance(node, dict):
                return True
        return False


def _flatten(data: Mapping[str, Any], prefix: str = "") -> List[Tuple[str, Any]]:
    items: List[Tuple[str, Any]] = []
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.extend(_flatten(value, path))
        else:
            items.append((path, value))
    return items
