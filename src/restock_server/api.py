from __future__ import annotations

import asyncio
import logging
import random
import threading
from concurrent import futures

from .catalog import Catalog, load_catalog
from .conf import StockServerSettings, get_settings
from .engine import RestockEngine
from .state import DEFAULT_RESTOCK_INTERVAL, InventorySnapshot, InventoryState
from .timer import RestockTimer
from .waiters import WaiterRegistry

log = logging.getLogger(__name__)

_UNSET = object()


class StockServer:
    """
    The operations a request-handling layer calls into.

    Owns the engine, its state and registry, and the timer that drives
    automatic restocks. Construction performs the first restock, so a server
    is never observed without an epoch.

    Parameters
    ----------
    catalog : Catalog
        Items that can be restocked.

    restock_interval : int, default=300
        Seconds between automatic restocks.

    max_waiters : int | None
        Long-poll capacity. None means unbounded.

    max_wait_seconds : float | None
        Default suspension limit of `wait_for_next_restock`. None waits until
        the next restock or until the caller is cancelled.

    notify_on_stock_edit : bool, default=True
        Whether `set_item_stock` counts as a restock for waiters.

    tick_seconds : float, default=1.0
        Timer period.

    rng : random.Random | None
        Randomness source for restocks.
    """

    def __init__(
        self,
        catalog: Catalog,
        restock_interval: int = DEFAULT_RESTOCK_INTERVAL,
        max_waiters: int | None = None,
        max_wait_seconds: float | None = None,
        notify_on_stock_edit: bool = True,
        tick_seconds: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        self.engine = RestockEngine(
            InventoryState(catalog, restock_interval),
            WaiterRegistry(max_waiters),
            rng=rng,
            notify_on_stock_edit=notify_on_stock_edit,
        )
        self.timer = RestockTimer(self.engine, period=tick_seconds)
        self.max_wait_seconds = max_wait_seconds
        self.engine.restock()

    @classmethod
    def from_settings(cls, conf: StockServerSettings) -> "StockServer":
        return cls(
            load_catalog(conf.catalog),
            restock_interval=conf.restock_interval,
            max_waiters=conf.max_waiters,
            max_wait_seconds=conf.max_wait_seconds,
            notify_on_stock_edit=conf.notify_on_stock_edit,
            tick_seconds=conf.tick_seconds,
        )

    def start(self) -> None:
        self.timer.start()

    def stop(self) -> None:
        self.timer.stop()

    def get_snapshot(self) -> InventorySnapshot:
        return self.engine.snapshot()

    def force_restock(self) -> InventorySnapshot:
        return self.engine.restock()

    def set_item_stock(self, name: str, amount: int) -> InventorySnapshot:
        """
        Administrative override of one item's count.

        Raises
        ------
        NotFoundError
            `name` is not in the catalog.
        InvalidAmountError
            `amount` is negative or not an integer.
        """
        return self.engine.set_item_stock(name, amount)

    def set_restock_interval(self, seconds: int) -> InventorySnapshot:
        """
        Change the restock interval and restart the countdown from it.

        Raises
        ------
        InvalidAmountError
            `seconds` is not a positive integer.
        """
        return self.engine.set_restock_interval(seconds)

    async def wait_for_next_restock(
        self, known_epoch_id: str | None, timeout: float | None | object = _UNSET
    ) -> str | None:
        """
        Wait until the inventory moves past `known_epoch_id`.

        Returns the current epoch immediately if the caller is already behind,
        otherwise suspends until the next restock and returns its epoch.

        Returns None when `timeout` (default: `max_wait_seconds`) expires
        first. If the awaiting task is cancelled, e.g. because the client
        disconnected, the waiter is removed and CancelledError propagates.

        Raises
        ------
        WaiterLimitExceeded
            The registry is at capacity.
        """
        if timeout is _UNSET:
            timeout = self.max_wait_seconds

        waiter = self.engine.wait(known_epoch_id)
        try:
            return await asyncio.wait_for(asyncio.wrap_future(waiter.future), timeout)
        except asyncio.TimeoutError:
            pass
        finally:
            self.engine.cancel(waiter)

        # A restock may have landed between the timeout and the cancel.
        if waiter.future.cancelled():
            log.debug("Long-poll for %r timed out after %ss.", known_epoch_id, timeout)
            return None
        return waiter.result()

    def wait_for_next_restock_blocking(
        self, known_epoch_id: str | None, timeout: float | None | object = _UNSET
    ) -> str | None:
        """Thread-blocking variant of `wait_for_next_restock` for sync callers."""
        if timeout is _UNSET:
            timeout = self.max_wait_seconds

        waiter = self.engine.wait(known_epoch_id)
        try:
            return waiter.result(timeout=timeout)
        except futures.TimeoutError:
            pass
        finally:
            self.engine.cancel(waiter)

        if waiter.future.cancelled():
            return None
        return waiter.result()


# Process-wide instance, built lazily from Django settings.
_server: StockServer | None = None
_server_lock = threading.Lock()


def get_server() -> StockServer:
    """
    Return the process-wide StockServer, building it on first use.

    Building performs the initial restock but does not start the timer; the
    app config (or the caller) decides that.
    """
    global _server
    with _server_lock:
        if _server is None:
            _server = StockServer.from_settings(get_settings())
            log.info("Stock server ready with %d catalog items.", len(_server.engine.catalog))
        return _server


def reset_server() -> None:
    """Stop and discard the process-wide server. Mainly for tests."""
    global _server
    with _server_lock:
        if _server is not None:
            _server.stop()
        _server = None
