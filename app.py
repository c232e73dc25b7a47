#!/usr/bin/env python3
"""
app.py – arcade screensaver

Builds the playable list (catalogue × verification × user selection), then
hands it to the RotationEngine.  Any failure that stops the show is logged
and put on screen once; an empty list quietly does nothing.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import config
from catalogue import GameRecord, SelectableGame, select_playable
from display import GameCard
from errors import ArcadeSaverError
from gamelist_builder import build_game_list, load_game_list
from rotation import RotationEngine

log = logging.getLogger(__name__)


def _records_from_selection(selection: List[SelectableGame]) -> List[GameRecord]:
    """Cached entries were reconciled when the list was built."""
    return [
        GameRecord(name=g.name, description=g.description, year=g.year,
                   manufacturer=g.manufacturer, driver_status="good")
        for g in selection
    ]


class ArcadeSaver:
    def __init__(self, card: Optional[GameCard] = None, engine: Optional[RotationEngine] = None):
        self.card = card or GameCard()
        self.engine = engine or RotationEngine(self.card)

    def load_playable(self) -> List[GameRecord]:
        if config.RUN_GAMELIST_BUILDER:
            reconciled, selection = build_game_list(config.EMULATOR_PATH, config.GAMELIST_PATH)
        else:
            selection = load_game_list(config.GAMELIST_PATH)
            if selection is None:
                log.info("no game list at %s", config.GAMELIST_PATH)
                return []
            reconciled = _records_from_selection(selection)

        playable = select_playable(reconciled, selection)
        log.info("%d playable game(s) selected", len(playable))
        return playable

    def run(self) -> int:
        try:
            self.engine.run(self.load_playable())
        except ArcadeSaverError as exc:
            log.error("%s %s", exc, exc.details)
            self.card.show_error(str(exc))
            return 1
        return 0


if __name__ == "__main__":
    raise SystemExit(ArcadeSaver().run())
