from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from .exceptions import InvalidCatalogError


@dataclass(frozen=True)
class ItemDefinition:
    """
    One purchasable item and the rules used to restock it.

    - rarity: informational label only, never read by the engine.
    - stock_chance: probability in [0, 1] that the item appears at all.
    - min_quantity / max_quantity: inclusive bounds of the restocked count.
    """

    name: str
    rarity: str
    stock_chance: float
    min_quantity: int
    max_quantity: int

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidCatalogError("Item name must be a non-empty string.")
        if not 0.0 <= self.stock_chance <= 1.0:
            raise InvalidCatalogError(
                f"Item {self.name!r}: stock_chance={self.stock_chance} is outside [0, 1]."
            )
        if not 1 <= self.min_quantity <= self.max_quantity:
            raise InvalidCatalogError(
                f"Item {self.name!r}: quantity range "
                f"[{self.min_quantity}, {self.max_quantity}] must satisfy 1 <= min <= max."
            )

    @classmethod
    def from_mapping(cls, entry: Mapping[str, Any]) -> "ItemDefinition":
        try:
            return cls(
                name=str(entry["name"]),
                rarity=str(entry.get("rarity", "Common")),
                stock_chance=float(entry["stock_chance"]),
                min_quantity=int(entry["min"]),
                max_quantity=int(entry["max"]),
            )
        except KeyError as e:
            raise InvalidCatalogError(
                f"Catalog entry {dict(entry)!r} is missing required field {e.args[0]!r}."
            ) from e


class Catalog:
    """Ordered, read-only collection of item definitions with unique names."""

    def __init__(self, items: Iterable[ItemDefinition]) -> None:
        self._items = tuple(items)
        self._by_name: dict[str, ItemDefinition] = {}
        for item in self._items:
            if item.name in self._by_name:
                raise InvalidCatalogError(f"Duplicate item name in catalog: {item.name!r}")
            self._by_name[item.name] = item

    def __iter__(self) -> Iterator[ItemDefinition]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> ItemDefinition | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [item.name for item in self._items]


DEFAULT_CATALOG = Catalog(
    [
        ItemDefinition("Smart Remote", "Common", 0.9, 8, 12),
        ItemDefinition("Slap hand", "Rare", 0.7, 3, 6),
        ItemDefinition("Jade Clover", "Rare", 0.6, 2, 5),
        ItemDefinition("Advanced Remote", "Epic", 0.4, 1, 3),
        ItemDefinition("Brainrot Swapper 6000", "Legendary", 0.1, 1, 1),
    ]
)


def load_catalog(entries: Iterable[Mapping[str, Any]] | None = None) -> Catalog:
    """
    Build a catalog from configuration entries.

    Each entry is a mapping with `name`, `rarity`, `stock_chance`, `min` and
    `max`. When `entries` is None the built-in gear catalog is returned.
    """
    if entries is None:
        return DEFAULT_CATALOG
    return Catalog(ItemDefinition.from_mapping(entry) for entry in entries)
