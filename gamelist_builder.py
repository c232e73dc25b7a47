"""
gamelist_builder.py  – selection-list cache creator

Asks the emulator for its catalogue and verified romsets, reconciles them and
stores the result as JSON together with the user's per-game `selected` flag.
Flags from an existing file survive a rebuild; new games start selected.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
import pathlib
import time
from typing import Iterable, List, Optional, Tuple

import config
from catalogue import (GameRecord, SelectableGame, Starter, fetch_catalogue,
                       fetch_verified, reconcile)
from process import start_process

log = logging.getLogger(__name__)

_FIELDS = {f.name for f in dataclasses.fields(SelectableGame)}


# ---------- load / save ---------------------------------------------------
def load_game_list(path: str | None = None) -> Optional[List[SelectableGame]]:
    """Return the stored list, or None when there is no usable file."""
    path = path or config.GAMELIST_PATH
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return [
            SelectableGame(**{k: v for k, v in rec.items() if k in _FIELDS})
            for rec in data["games"]
            if rec.get("name")
        ]
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        log.warning("ignoring unreadable game list %s: %s", path, exc)
        return None


def save_game_list(games: Iterable[SelectableGame], path: str | None = None) -> None:
    path = path or config.GAMELIST_PATH
    data = {
        "generated": time.time(),
        "games": [dataclasses.asdict(g) for g in games],
    }
    target = pathlib.Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------- merge ---------------------------------------------------------
def merge_selection(reconciled: Iterable[GameRecord],
                    previous: Optional[Iterable[SelectableGame]]) -> List[SelectableGame]:
    flags = {g.name: g.selected for g in (previous or [])}
    return [
        SelectableGame(
            name=g.name,
            description=g.description,
            year=g.year,
            manufacturer=g.manufacturer,
            selected=flags.get(g.name, True),
        )
        for g in reconciled
    ]


# ---------- builder -------------------------------------------------------
def build_game_list(emulator_path: str | None = None,
                    path: str | None = None,
                    starter: Starter = start_process,
                    ) -> Tuple[List[GameRecord], List[SelectableGame]]:
    """
    Fetch, reconcile and persist.  Returns (reconciled games, stored list).
    Fetch errors propagate; a failed write only costs the cache.
    """
    emulator_path = emulator_path or config.EMULATOR_PATH
    path = path or config.GAMELIST_PATH

    log.info("[gamelist_builder] querying %s …", emulator_path)
    verified = fetch_verified(emulator_path, starter)
    catalogue = fetch_catalogue(emulator_path, starter)
    reconciled = reconcile(catalogue, verified)

    games = merge_selection(reconciled, load_game_list(path))
    try:
        save_game_list(games, path)
        log.info("[gamelist_builder] %d playable games written → %s", len(games), path)
    except OSError as exc:
        log.warning("[gamelist_builder] could not write %s: %s", path, exc)

    return reconciled, games


# -------------------------------------------------------------------------
if __name__ == "__main__":
    import argparse
    ap = argparse.ArgumentParser(description="Rebuild the playable game list")
    ap.add_argument("emulator", nargs="?", default=config.EMULATOR_PATH,
                    help=f"MAME binary (default: {config.EMULATOR_PATH})")
    ap.add_argument("--out", default=config.GAMELIST_PATH,
                    help="where to write the list")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    build_game_list(args.emulator, args.out)
