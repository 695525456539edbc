"""Per-run object-name registry and the lookup predicates handed to parsers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from .config import STANDARD_OBJECTS
from .models import MetadataIndexes

NamePredicate = Callable[[str], bool]
NameResolver = Callable[[str], str]


class ObjectRegistry:
    """Case-insensitive object-name canonicalization. First casing seen wins."""

    def __init__(self, seed: Iterable[str] = STANDARD_OBJECTS) -> None:
        self._names: Dict[str, str] = {}
        for name in seed:
            self.register(name)

    def register(self, name: str) -> str:
        return self._names.setdefault(name.lower(), name)

    def resolve(self, name: str) -> str:
        """Canonical casing for *name*; unseen names become their own canonical form."""
        return self.register(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __len__(self) -> int:
        return len(self._names)


@dataclass(frozen=True)
class ExtractionContext:
    """Lookup capabilities threaded into every parser call.

    Any predicate may be ``None``; parsers then fall back to the
    "predicate unavailable" behavior.
    """

    resolve: Optional[NameResolver] = None
    is_object_name: Optional[NamePredicate] = None
    is_apex_class: Optional[NamePredicate] = None
    is_field_name: Optional[NamePredicate] = None

    def resolve_name(self, name: str) -> str:
        return self.resolve(name) if self.resolve else name

    @classmethod
    def from_indexes(cls, registry: ObjectRegistry, indexes: MetadataIndexes) -> "ExtractionContext":
        field_names = indexes.field_names
        apex_classes = indexes.apex_class_names

        def is_object_name(name: str) -> bool:
            return name in registry and name not in field_names

        return cls(
            resolve=registry.resolve,
            is_object_name=is_object_name,
            is_apex_class=apex_classes.__contains__,
            is_field_name=field_names.__contains__,
        )
