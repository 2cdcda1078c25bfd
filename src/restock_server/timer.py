from __future__ import annotations

import logging
import threading
import time

from .engine import RestockEngine

log = logging.getLogger(__name__)


class RestockTimer:
    """
    Process-wide countdown driving automatic restocks.

    A daemon thread calls `engine.tick()` once per `period` seconds. Ticks are
    scheduled against a monotonic deadline, so a slow tick shortens the next
    wait instead of pushing every later tick back.

    A failing tick is logged and the timer keeps running.
    """

    def __init__(self, engine: RestockEngine, period: float = 1.0) -> None:
        self.engine = engine
        self.period = period
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._start_lock:
            if self.running:
                return
            # Each run gets its own stop event so a restart never revives a
            # loop that outlived stop()'s join timeout.
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop,), name="restock-timer", daemon=True
            )
            self._thread.start()
        log.info("Restock timer started (period=%ss).", self.period)

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._start_lock:
            thread, self._thread = self._thread, None
            self._stop.set()
        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                log.warning("Restock timer thread still finishing its last tick.")
            else:
                log.info("Restock timer stopped.")

    def _run(self, stop: threading.Event) -> None:
        next_at = time.monotonic() + self.period
        while not stop.wait(max(0.0, next_at - time.monotonic())):
            next_at += self.period
            try:
                self.engine.tick()
            except Exception:
                log.exception("Restock timer tick failed.")
