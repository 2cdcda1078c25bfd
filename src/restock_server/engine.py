from __future__ import annotations

import logging
import random
import threading
import uuid
from typing import Callable

from .catalog import Catalog
from .state import InventorySnapshot, InventoryState
from .waiters import Waiter, WaiterRegistry

log = logging.getLogger(__name__)


def new_epoch_id() -> str:
    """Fresh 128-bit random token identifying one restock."""
    return uuid.uuid4().hex


class RestockEngine:
    """
    Single writer for the inventory and the waiter registry.

    Every mutation (timer tick, forced restock, admin edit, interval change)
    and every waiter registration runs under one re-entrant lock, so a tick
    and a request never interleave and a waiter can never register against an
    epoch that is being replaced.

    Parameters
    ----------
    state : InventoryState
        Inventory owned by this engine.

    registry : WaiterRegistry
        Long-poll waiters released on every new epoch.

    rng : random.Random | None
        Source of randomness for restocks. Pass a seeded instance for
        reproducible results.

    notify_on_stock_edit : bool, default=True
        Whether an admin stock edit stamps a new epoch and wakes waiters like
        a real restock, or only changes the count.

    epoch_factory : callable
        Produces new epoch ids. Defaults to `new_epoch_id`.
    """

    def __init__(
        self,
        state: InventoryState,
        registry: WaiterRegistry,
        rng: random.Random | None = None,
        notify_on_stock_edit: bool = True,
        epoch_factory: Callable[[], str] = new_epoch_id,
    ) -> None:
        self.state = state
        self.registry = registry
        self.rng = rng or random.Random()
        self.notify_on_stock_edit = notify_on_stock_edit
        self.epoch_factory = epoch_factory
        self._lock = threading.RLock()

    @property
    def catalog(self) -> Catalog:
        return self.state.catalog

    def snapshot(self) -> InventorySnapshot:
        with self._lock:
            return self.state.snapshot()

    def roll_stock(self) -> dict[str, int]:
        """Draw a new count for every catalog item, in catalog order."""
        stock: dict[str, int] = {}
        for item in self.catalog:
            count = 0
            if self.rng.random() < item.stock_chance:
                count = self.rng.randint(item.min_quantity, item.max_quantity)
            stock[item.name] = count
        return stock

    def restock(self) -> InventorySnapshot:
        with self._lock:
            stock = self.roll_stock()
            epoch_id = self.epoch_factory()
            self.state.replace(stock, epoch_id)
            log.info(
                "Restock %s (generation %d): %s",
                epoch_id,
                self.state.generation,
                stock,
            )
            self.registry.notify_all(epoch_id)
            return self.state.snapshot()

    def set_item_stock(self, name: str, amount: int) -> InventorySnapshot:
        with self._lock:
            epoch_id = self.epoch_factory() if self.notify_on_stock_edit else None
            self.state.set_item_stock(name, amount, new_epoch_id=epoch_id)
            log.info("Stock of %r set to %d.", name, amount)
            if epoch_id is not None:
                self.registry.notify_all(epoch_id)
            return self.state.snapshot()

    def set_restock_interval(self, seconds: int) -> InventorySnapshot:
        with self._lock:
            self.state.set_restock_interval(seconds)
            log.info("Restock interval updated to %d seconds.", seconds)
            return self.state.snapshot()

    def tick(self) -> bool:
        """One timer step. Returns True when it triggered a restock."""
        with self._lock:
            if self.state.tick():
                self.restock()
                return True
            return False

    def wait(self, known_epoch_id: str | None) -> Waiter:
        with self._lock:
            return self.registry.wait(known_epoch_id, self.state.epoch_id)

    def cancel(self, waiter: Waiter) -> bool:
        return self.registry.cancel(waiter)
