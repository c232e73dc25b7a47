#!/usr/bin/env python3
"""
events.py  – central hub

• Translates raw Pygame events to high-level action dicts.
• Exposes a thread-safe queue so the rotation timer thread and any
  global input hook can inject the same actions.

Actions
-------
{"type": "cancel"}   user activity – ends the whole rotation
{"type": "tick"}     rotation slot expired – advance to the next game
"""

from __future__ import annotations
import queue
from pygame.locals import *

import config

Action = dict      # alias for readability

CANCEL = "cancel"
TICK   = "tick"


class EventManager:
    _fifo: "queue.Queue[Action]" = queue.Queue()      # global, thread-safe

    # ── SDL / keyboard path ────────────────────────────────────────────
    @classmethod
    def handle(cls, event) -> None:
        """Translate one Pygame event → action and enqueue it."""
        act = cls.translate(event)
        if act:
            cls._fifo.put(act)

    # ── external / programmatic path ───────────────────────────────────
    @classmethod
    def post(cls, action: Action) -> None:
        """
        Any thread may call this to inject an already-formed action dict, e.g.:
            EventManager.post({"type": "cancel"})
        """
        cls._fifo.put(action)

    # ── main-loop consumer ─────────────────────────────────────────────
    @classmethod
    def poll(cls) -> Action | None:
        """Return next queued action or None (non-blocking)."""
        try:
            return cls._fifo.get_nowait()
        except queue.Empty:
            return None

    @classmethod
    def drain(cls) -> list[Action]:
        """Return every queued action, oldest first."""
        batch: list[Action] = []
        while (act := cls.poll()) is not None:
            batch.append(act)
        return batch

    @classmethod
    def clear(cls) -> None:
        cls.drain()

    # ── translator ────────────────────────────────────────────────────
    @staticmethod
    def translate(event) -> Action | None:
        if event.type in (QUIT, KEYDOWN, MOUSEBUTTONDOWN):
            return {"type": CANCEL}

        if event.type == MOUSEMOTION:
            dx, dy = event.rel
            if max(abs(dx), abs(dy)) >= config.MOUSE_MOVE_THRESHOLD:
                return {"type": CANCEL}

        return None
