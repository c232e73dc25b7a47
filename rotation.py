"""
rotation.py – game rotation state machine

    idle ──begin──▶ displaying ──dwell──▶ running ──tick──▶ displaying …
                        │                    │
                        └────── cancel ──────┴──▶ stopped (terminal)

Every transition takes the current RotationSession and returns a new one;
the engine itself only holds its collaborators.  Timer ticks and user input
arrive through EventManager and are handled on the calling thread, one batch
at a time, with a cancel in a batch always beating a tick in the same batch.
"""
from __future__ import annotations

import dataclasses
import logging
import random
import shlex
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

import config
from catalogue import GameRecord, emulator_dir
from errors import LaunchFailure
from events import CANCEL, TICK, EventManager
from process import ProcessHandle, start_process
from timing import RotationTimer

log = logging.getLogger(__name__)

IDLE       = "idle"
DISPLAYING = "displaying"
RUNNING    = "running"
STOPPED    = "stopped"

POLL_INTERVAL = 0.05      # seconds between input checks


@dataclass(frozen=True)
class RotationSession:
    playable: Tuple[GameRecord, ...]
    phase: str = IDLE
    current: Optional[GameRecord] = None
    process: Optional[ProcessHandle] = None
    cancelled: bool = False
    timer_armed: bool = False
    launches: int = 0

    def evolve(self, **changes) -> "RotationSession":
        # cancelled never goes back to False
        changes["cancelled"] = self.cancelled or changes.get("cancelled", False)
        return dataclasses.replace(self, **changes)


class RotationEngine:
    def __init__(self,
                 display,
                 emulator_path: Optional[str] = None,
                 extra_args: Optional[str] = None,
                 dwell_seconds: Optional[float] = None,
                 rotation_minutes: Optional[int] = None,
                 launcher: Callable[..., ProcessHandle] = start_process,
                 timer=None,
                 events=EventManager,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.display = display
        self.emulator_path = emulator_path or config.EMULATOR_PATH
        self.extra_args = config.EXTRA_ARGS if extra_args is None else extra_args
        self.dwell_seconds = config.DWELL_SECONDS if dwell_seconds is None else dwell_seconds
        self.launcher = launcher
        self.events = events
        if rotation_minutes is None:
            rotation_minutes = config.ROTATION_MINUTES
        self.timer = timer or RotationTimer(rotation_minutes, lambda: events.post({"type": TICK}))
        self.rng = rng or random.Random()
        self.clock = clock
        self.sleep = sleep
        self.latest: Optional[RotationSession] = None     # last session reached by run()

    # ── driver ────────────────────────────────────────────────────────────
    def run(self, playable: Iterable[GameRecord]) -> RotationSession:
        session = self.begin(RotationSession(tuple(playable)))
        self.latest = session
        if session.phase == IDLE:
            log.info("no playable games – nothing to rotate")
            return session

        try:
            while session.phase != STOPPED:
                if session.phase == DISPLAYING:
                    session = self.dwell(session)
                else:
                    session = self.step(session)
                self.latest = session
        except LaunchFailure:
            self.latest = self.stop(session, cancelled=False)
            raise
        return session

    def step(self, session: RotationSession) -> RotationSession:
        """Handle one batch of queued events while a game is running."""
        self.display.pump()
        kinds = {a.get("type") for a in self.events.drain()}
        if CANCEL in kinds:
            return self.stop(session)
        if TICK in kinds:
            return self.advance(session)
        self.sleep(POLL_INTERVAL)
        return session

    # ── transitions ───────────────────────────────────────────────────────
    def begin(self, session: RotationSession) -> RotationSession:
        if session.phase != IDLE or not session.playable:
            return session
        return self._show_next(session)

    def dwell(self, session: RotationSession) -> RotationSession:
        if session.phase != DISPLAYING:
            return session
        end = self.clock() + self.dwell_seconds
        while True:
            if self._cancel_requested():
                return self.stop(session)
            remaining = end - self.clock()
            if remaining <= 0:
                break
            self.sleep(min(POLL_INTERVAL, remaining))
        return self.launch(session)

    def launch(self, session: RotationSession) -> RotationSession:
        game = session.current
        try:
            # an unbalanced quote in the extra args is a ValueError from shlex
            args = [game.name, *shlex.split(self.extra_args)]
            handle = self.launcher(self.emulator_path, args,
                                   working_dir=emulator_dir(self.emulator_path),
                                   capture_stdout=False)
        except (OSError, ValueError) as exc:
            raise LaunchFailure(f"Could not start {game.name}: {exc}", game=game.name) from exc

        self.timer.start()
        log.info("launched %s (pid %s)", game.name, handle.pid)
        return session.evolve(phase=RUNNING, process=handle, timer_armed=True,
                              launches=session.launches + 1)

    def advance(self, session: RotationSession) -> RotationSession:
        """Slot expired: let the old game close in its own time, show the next one."""
        if session.phase != RUNNING:
            return session
        self.timer.stop()
        self._request_close(session.process)
        return self._show_next(session.evolve(process=None, timer_armed=False))

    def stop(self, session: RotationSession, cancelled: bool = True) -> RotationSession:
        if session.phase == STOPPED:
            return session
        self.timer.stop()
        self._request_close(session.process)
        self.display.close()
        log.info("rotation stopped after %d game(s)", session.launches)
        return session.evolve(phase=STOPPED, process=None, timer_armed=False,
                              cancelled=cancelled)

    # ── helpers ───────────────────────────────────────────────────────────
    def pick(self, session: RotationSession) -> GameRecord:
        return self.rng.choice(session.playable)

    def _show_next(self, session: RotationSession) -> RotationSession:
        game = self.pick(session)
        self.display.set_metadata(game.description, game.year_manufacturer)
        self.display.show_full_screen()
        log.info("next up: %s – %s", game.name, game.description)
        return session.evolve(phase=DISPLAYING, current=game)

    def _cancel_requested(self) -> bool:
        self.display.pump()
        return any(a.get("type") == CANCEL for a in self.events.drain())

    @staticmethod
    def _request_close(handle: Optional[ProcessHandle]) -> None:
        if handle is not None and not handle.has_exited():
            handle.request_close()
