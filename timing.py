# =========  timing.py  =========
"""
One-shot rotation countdown.

start() arms (or re-arms) the countdown, stop() disarms it, and on expiry the
single listener is called once before the timer disarms itself.  A countdown
that was stopped or superseded never fires, even if its thread had already
woken up: every arm bumps a generation number that the callback checks under
the lock.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60.0


class RotationTimer:
    def __init__(self,
                 minutes: int,
                 on_tick: Callable[[], None],
                 timer_factory: Callable[..., threading.Timer] = threading.Timer):
        if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes < 1:
            raise ValueError(f"rotation minutes must be a whole number >= 1, got {minutes!r}")
        self.minutes = minutes
        self._on_tick = on_tick
        self._factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def interval(self) -> float:
        return self.minutes * SECONDS_PER_MINUTE

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            gen = self._generation
            t = self._factory(self.interval, self._fire, args=(gen,))
            t.daemon = True
            self._timer = t
            t.start()
        log.debug("rotation timer armed for %.0f s", self.interval)

    def stop(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._generation += 1

    def _fire(self, gen: int) -> None:
        with self._lock:
            if gen != self._generation or self._timer is None:
                return              # stopped or restarted meanwhile
            self._timer = None
        self._on_tick()
