"""
Name normalization and approximate matching against in-memory snapshots.

Free-text references in an uploaded file ("ahmed  ben ali", "Matière")
are compared by canonical key, never by raw string. When several stored
entities share a key the first one in snapshot order wins.
"""

import re
import unicodedata
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

_WHITESPACE = re.compile(r"\s+")


def normalize_name(value: Optional[str]) -> str:
    """Canonical comparison key: diacritics folded, case folded, whitespace collapsed."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped.casefold()).strip()


def name_key(entity: Any) -> str:
    return normalize_name(entity.name)


def match_by_key(
    entities: Iterable[T],
    candidate: Hashable,
    key: Callable[[T], Hashable] = name_key,
) -> Optional[T]:
    """Return the first entity whose key equals ``candidate`` (already normalized)."""
    for entity in entities:
        if key(entity) == candidate:
            return entity
    return None


class ReferenceResolver(Generic[T]):
    """Resolves free-text mentions of one entity kind against a request snapshot.

    Failures are written to the row's error list as ``Unknown <kind>: <names>``.
    """

    def __init__(self, kind: str, entities: Sequence[T], key: Callable[[T], Hashable] = name_key) -> None:
        self.kind = kind
        self._index: Dict[Hashable, T] = {}
        for entity in entities:
            # setdefault keeps the first entity for a duplicated key
            self._index.setdefault(key(entity), entity)

    def find(self, name: str) -> Optional[T]:
        return self._index.get(normalize_name(name))

    def resolve(self, name: str, errors: List[str], required: bool = False) -> Optional[T]:
        if not name:
            if required:
                errors.append(f"{self.kind.capitalize()} is required")
            return None
        match = self.find(name)
        if match is None:
            errors.append(f"Unknown {self.kind}: {name}")
        return match

    def resolve_many(self, names: Sequence[str], errors: List[str]) -> List[T]:
        """Resolve every name; all unresolved names are reported in a single message."""
        found: List[T] = []
        missing: List[str] = []
        for name in names:
            match = self.find(name)
            if match is None:
                missing.append(name)
            else:
                found.append(match)
        if missing:
            errors.append(f"Unknown {self.kind}: {', '.join(missing)}")
        return found
