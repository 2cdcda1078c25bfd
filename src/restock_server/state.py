from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .catalog import Catalog
from .exceptions import InvalidAmountError, NotFoundError

log = logging.getLogger(__name__)

DEFAULT_RESTOCK_INTERVAL = 300


def is_int(value: object) -> bool:
    # bool is an int subclass; True is not a stock amount.
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class InventorySnapshot:
    """Consistent read of the inventory at one point in time."""

    stock: dict[str, int] = field(default_factory=dict)
    epoch_id: str | None = None
    seconds_until_restock: int | None = None
    restock_interval: int = DEFAULT_RESTOCK_INTERVAL
    generation: int = 0


class InventoryState:
    """
    Current stock counts and the restock epoch they belong to.

    This class is not thread-safe on its own. It is owned by a
    `RestockEngine`, which serialises every call under its lock; nothing else
    should mutate it.

    `generation` counts epoch stamps. It starts at 0 (no restock yet) and
    grows by one every time a new epoch is stamped, which gives waiters a
    comparable notion of "newer" alongside the opaque `epoch_id`.
    """

    def __init__(self, catalog: Catalog, restock_interval: int = DEFAULT_RESTOCK_INTERVAL) -> None:
        if not is_int(restock_interval) or restock_interval <= 0:
            raise InvalidAmountError(
                f"Restock interval must be a positive integer, got {restock_interval!r}."
            )
        self.catalog = catalog
        self.restock_interval = restock_interval
        self.stock: dict[str, int] = {}
        self.epoch_id: str | None = None
        self.generation = 0
        self.seconds_until_restock: int | None = None

    def snapshot(self) -> InventorySnapshot:
        return InventorySnapshot(
            stock=dict(self.stock),
            epoch_id=self.epoch_id,
            seconds_until_restock=self.seconds_until_restock,
            restock_interval=self.restock_interval,
            generation=self.generation,
        )

    def replace(self, new_stock: Mapping[str, int], new_epoch_id: str) -> None:
        self.stock = dict(new_stock)
        self._stamp(new_epoch_id)

    def set_item_stock(self, name: str, amount: int, new_epoch_id: str | None = None) -> None:
        """
        Override one item's count.

        With `new_epoch_id` the edit counts as a restock: the epoch is stamped
        and the countdown reset. Without it only the count changes.
        """
        if name not in self.catalog:
            raise NotFoundError(f"Item {name!r} is not in the catalog.")
        if not is_int(amount) or amount < 0:
            raise InvalidAmountError(
                f"Stock amount must be a non-negative integer, got {amount!r}."
            )

        # Keep every catalog name present even if no restock has run yet.
        stock = {item_name: self.stock.get(item_name, 0) for item_name in self.catalog.names()}
        stock[name] = amount
        self.stock = stock

        if new_epoch_id is not None:
            self._stamp(new_epoch_id)

    def set_restock_interval(self, seconds: int) -> None:
        if not is_int(seconds) or seconds <= 0:
            raise InvalidAmountError(
                f"Restock interval must be a positive integer, got {seconds!r}."
            )
        self.restock_interval = seconds
        # Restart the countdown from the new value rather than pro-rating.
        self.seconds_until_restock = seconds

    def tick(self) -> bool:
        """
        Advance the countdown by one second.

        Returns True when the countdown has run out and a restock is due. An
        uninitialised countdown is reset to the interval instead.
        """
        if not is_int(self.seconds_until_restock):
            log.warning(
                "Restock countdown was %r; resetting it to %ss without restocking.",
                self.seconds_until_restock,
                self.restock_interval,
            )
            self.seconds_until_restock = self.restock_interval
        else:
            self.seconds_until_restock -= 1
        return self.seconds_until_restock <= 0

    def _stamp(self, epoch_id: str) -> None:
        self.epoch_id = epoch_id
        self.generation += 1
        self.seconds_until_restock = self.restock_interval
