from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping

from .raw_schema import DraftEntity, DraftEntityMapItem, coerce_model

EntityEncoding = Literal["list", "map"]


@dataclass(frozen=True)
class EntityTable:
    """
    Entity lookup for a rich-text document.

    The wire format ships either an ordered list of ``{key, value}`` pairs or a keyed
    map. Both are built into the same table; callers only ever use ``lookup``. Keys are
    compared as strings, so ``3`` and ``"3"`` find the same entity.
    """

    encoding: EntityEncoding
    _entries: Mapping[str, DraftEntity] = field(default_factory=dict, repr=False)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Any]) -> "EntityTable":
        entries: dict[str, DraftEntity] = {}
        for pair in pairs:
            item = coerce_model(DraftEntityMapItem, pair)
            # The first pair wins for duplicate keys, matching a front-to-back search.
            entries.setdefault(str(item.key), item.value)
        return cls("list", entries)

    @classmethod
    def from_mapping(cls, mapping: Mapping[Any, Any]) -> "EntityTable":
        entries = {str(k): coerce_model(DraftEntity, v) for k, v in mapping.items()}
        return cls("map", entries)

    @classmethod
    def from_wire(cls, entity_map: Any) -> "EntityTable":
        if entity_map is None:
            return cls("map", {})
        if isinstance(entity_map, EntityTable):
            return entity_map
        if isinstance(entity_map, Mapping):
            return cls.from_mapping(entity_map)
        return cls.from_pairs(entity_map)

    def lookup(self, key: str | int | None) -> DraftEntity | None:
        if key is None:
            return None
        return self._entries.get(str(key))

    def __len__(self) -> int:
        return len(self._entries)


def lookup(table: EntityTable | None, key: str | int | None) -> DraftEntity | None:
    if table is None:
        return None
    return table.lookup(key)
