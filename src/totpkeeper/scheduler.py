"""Periodic refresh of displayed codes.

One background thread ticks every ``tick_interval`` seconds. Every tick
reports the seconds left in the window; codes are only recomputed when the
window rolls over, so a 100 ms tick does not regenerate unchanged codes.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

from totpkeeper.clock import TimeWindowClock
from totpkeeper.registry import AccountRegistry

logger = logging.getLogger(__name__)

Listener = Callable[["CodeSnapshot"], None]


@dataclass
class CodeSnapshot:
    """What a display needs after one tick."""
    counter: int
    seconds_remaining: int
    progress_percent: float
    codes: dict[str, str | None] = field(default_factory=dict)
    refreshed: bool = False


class RefreshScheduler:
    """Owns the repeating timer that drives code recomputation."""

    def __init__(
        self,
        registry: AccountRegistry,
        clock: TimeWindowClock | None = None,
        tick_interval: float = 0.1,
    ) -> None:
        self.registry = registry
        self.clock = clock or TimeWindowClock(time_step=registry.time_step)
        self.tick_interval = tick_interval
        self._listeners: list[Listener] = []
        self._codes: dict[str, str | None] = {}
        self._last_counter: int | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @property
    def codes(self) -> dict[str, str | None]:
        return dict(self._codes)

    def refresh(self, now: int | None = None) -> dict[str, str | None]:
        """Recompute every account's code, at ``now`` or the clock's current time."""
        if now is None:
            now = self.clock.unix_time()
        self._codes = self.registry.codes(for_time=now)
        self._last_counter = self.clock.counter(now)
        logger.debug("Refreshed %d codes for counter %d", len(self._codes), self._last_counter)
        return self.codes

    def tick(self) -> CodeSnapshot:
        """Run one scheduler step and notify listeners."""
        now = self.clock.unix_time()
        counter = self.clock.counter(now)
        # Recompute on the first tick of each window. Comparing counters
        # rather than testing is_rollover() also catches a tick that lands
        # late and misses the rollover second.
        refreshed = counter != self._last_counter
        if refreshed:
            self.refresh(now)

        snapshot = CodeSnapshot(
            counter=counter,
            seconds_remaining=self.clock.seconds_remaining(now),
            progress_percent=self.clock.progress_percent(now),
            codes=self.codes,
            refreshed=refreshed,
        )
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Refresh listener failed")
        return snapshot

    def run_forever(self) -> None:
        """Tick until stop() is called. Blocks the calling thread."""
        logger.info("Refresh scheduler started (tick=%.2fs)", self.tick_interval)
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(self.tick_interval)
        logger.info("Refresh scheduler stopped")

    def start(self) -> None:
        """Run the tick loop on a daemon thread."""
        if self.running:
            logger.warning("Refresh scheduler already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run_forever, name="totpkeeper-refresh", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
