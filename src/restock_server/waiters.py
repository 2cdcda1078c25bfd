from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, InvalidStateError

from .exceptions import AlreadyClosedError, WaiterLimitExceeded

log = logging.getLogger(__name__)


class Waiter:
    """
    One suspended "notify me on the next restock" request.

    The waiter wraps a `concurrent.futures.Future` that is resolved at most
    once: either `deliver()` sets the new epoch id, or `close()` cancels it.
    The future's own state machine decides which one wins when both race.
    """

    def __init__(self, known_epoch_id: str | None) -> None:
        self.known_epoch_id = known_epoch_id
        self.future: Future[str] = Future()

    def __repr__(self) -> str:
        return f"<Waiter known={self.known_epoch_id!r} done={self.done}>"

    @property
    def done(self) -> bool:
        return self.future.done()

    def deliver(self, epoch_id: str) -> None:
        try:
            self.future.set_result(epoch_id)
        except InvalidStateError as e:
            raise AlreadyClosedError(f"{self!r} was already resolved or cancelled.") from e

    def close(self) -> bool:
        """Cancel without a result. Returns False if already resolved."""
        return self.future.cancel()

    def result(self, timeout: float | None = None) -> str:
        return self.future.result(timeout=timeout)


class WaiterRegistry:
    """
    Set of pending waiters, released all at once on the next restock.

    Parameters
    ----------
    max_waiters : int | None
        Capacity limit. `wait()` raises WaiterLimitExceeded once this many
        waiters are pending. None disables the limit.
    """

    def __init__(self, max_waiters: int | None = None) -> None:
        self.max_waiters = max_waiters
        self._waiters: list[Waiter] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._waiters)

    def wait(self, known_epoch_id: str | None, current_epoch_id: str | None) -> Waiter:
        """
        Return a waiter for a client that last saw `known_epoch_id`.

        If a restock has happened since (and there has been one at all), the
        returned waiter is already resolved with `current_epoch_id` and is
        not registered. Otherwise it is pending until notify_all or cancel.
        """
        waiter = Waiter(known_epoch_id)

        if current_epoch_id is not None and known_epoch_id != current_epoch_id:
            waiter.deliver(current_epoch_id)
            return waiter

        with self._lock:
            if self.max_waiters is not None and len(self._waiters) >= self.max_waiters:
                log.warning("Refusing long-poll: %d waiters pending.", len(self._waiters))
                raise WaiterLimitExceeded(
                    f"Too many pending waiters (limit={self.max_waiters})."
                )
            self._waiters.append(waiter)
        return waiter

    def notify_all(self, epoch_id: str) -> int:
        """Deliver `epoch_id` to every pending waiter, then empty the registry."""
        with self._lock:
            waiters, self._waiters = self._waiters, []

        delivered = 0
        for waiter in waiters:
            try:
                waiter.deliver(epoch_id)
            except AlreadyClosedError:
                log.warning("Skipping closed waiter %r during restock notification.", waiter)
                continue
            delivered += 1

        if waiters:
            log.info("Notified %d of %d waiters of restock %s.", delivered, len(waiters), epoch_id)
        return delivered

    def cancel(self, waiter: Waiter) -> bool:
        """
        Close `waiter` and drop it from the registry.

        Safe to call after notify_all already released it: returns False and
        leaves the delivered result alone.
        """
        cancelled = waiter.close()
        with self._lock:
            try:
                self._waiters.remove(waiter)
            except ValueError:
                pass
        return cancelled
