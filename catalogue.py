"""
catalogue.py

Works out which arcade games can actually be played.

* `fetch_catalogue()` runs ``mame -listxml`` and parses every <game>/<machine>
  element into a GameRecord.
* `fetch_verified()` runs ``mame -verifyroms`` and keeps the romsets reported
  as good.
* `reconcile()` merges the two: a game is playable only when verification
  says its romset is good *and* the catalogue marks its driver good.  Records
  without a description or year are BIOS/support sets and never play.
"""

from __future__ import annotations

import io
import logging
import os
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional

from defusedxml import ElementTree as SafeET
from defusedxml.common import DefusedXmlException

from errors import CatalogueUnavailable, VerificationUnavailable
from process import ProcessHandle, start_process

log = logging.getLogger(__name__)

# ── Regex helpers ───────────────────────────────────────────────────────────
_GOOD_RE = re.compile(r"romset (\w+)(?:\s\[(\w+)\])? is good")

_GAME_TAGS = ("game", "machine")      # pre-0.162 MAME used <game>

Starter = Callable[..., ProcessHandle]


# ── Data structures ─────────────────────────────────────────────────────────
@dataclass(frozen=True)
class GameRecord:
    name: str
    description: str = ""
    year: str = ""
    manufacturer: str = ""
    driver_status: Optional[str] = None     # None → no <driver> element
    is_bios: bool = False

    @property
    def year_manufacturer(self) -> str:
        return f"{self.year} {self.manufacturer}".strip()


class VerificationEntry(NamedTuple):
    name: str
    alias: Optional[str] = None


@dataclass
class SelectableGame:
    name: str
    description: str = ""
    year: str = ""
    manufacturer: str = ""
    selected: bool = True


# ── Emulator invocation ─────────────────────────────────────────────────────
def emulator_dir(emulator_path: str) -> str:
    return os.path.dirname(os.path.abspath(emulator_path))


def _run_listing(emulator_path: str, flag: str, starter: Starter) -> str:
    handle = starter(emulator_path, [flag],
                     working_dir=emulator_dir(emulator_path),
                     capture_stdout=True)
    output = handle.read_all_output()
    handle.wait_for_exit()
    return output


# ── Catalogue ───────────────────────────────────────────────────────────────
def parse_catalogue(text: str) -> List[GameRecord]:
    """
    Parse ``-listxml`` output.  Missing optional fields become "", an empty
    document gives [], and broken XML keeps whatever parsed before the error.
    """
    games: List[GameRecord] = []
    if not text or not text.strip():
        return games

    source = io.BytesIO(text.encode("utf-8"))
    try:
        for _event, elem in SafeET.iterparse(source, events=("end",)):
            if elem.tag not in _GAME_TAGS:
                continue
            rec = _record_from_element(elem)
            if rec is not None:
                games.append(rec)
            elem.clear()
    except (SafeET.ParseError, DefusedXmlException) as exc:
        log.warning("catalogue XML unreadable after %d games: %s", len(games), exc)

    return games


def _record_from_element(elem) -> Optional[GameRecord]:
    name = elem.get("name")
    if not name:
        return None

    driver = elem.find("driver")
    return GameRecord(
        name=name,
        description=(elem.findtext("description") or "").strip(),
        year=(elem.findtext("year") or "").strip(),
        manufacturer=(elem.findtext("manufacturer") or "").strip(),
        driver_status=driver.get("status") if driver is not None else None,
        is_bios=(elem.get("isbios") == "yes"
                 or elem.get("isdevice") == "yes"
                 or elem.get("runnable") == "no"),
    )


def fetch_catalogue(emulator_path: str, starter: Starter = start_process) -> List[GameRecord]:
    try:
        output = _run_listing(emulator_path, "-listxml", starter)
    except OSError as exc:
        raise CatalogueUnavailable(
            f"Could not run {emulator_path}: {exc}",
            {"emulator": emulator_path},
        ) from exc

    if not output:
        raise CatalogueUnavailable(
            f"{emulator_path} exited without listing any games",
            {"emulator": emulator_path},
        )

    games = parse_catalogue(output)
    log.info("catalogue: %d games listed", len(games))
    return games


# ── Verification ────────────────────────────────────────────────────────────
def iter_verified(text: str) -> Iterator[VerificationEntry]:
    for m in _GOOD_RE.finditer(text or ""):
        yield VerificationEntry(m.group(1), m.group(2) or None)


def parse_verified(text: str) -> Dict[str, Optional[str]]:
    """Map romset name → alias (or None) for every ``is good`` line."""
    verified: Dict[str, Optional[str]] = {}
    for entry in iter_verified(text):
        verified.setdefault(entry.name, entry.alias)
    return verified


def fetch_verified(emulator_path: str, starter: Starter = start_process) -> Dict[str, Optional[str]]:
    try:
        output = _run_listing(emulator_path, "-verifyroms", starter)
    except OSError as exc:
        raise VerificationUnavailable(
            f"Could not run {emulator_path}: {exc}",
            {"emulator": emulator_path},
        ) from exc

    verified = parse_verified(output)
    log.info("verification: %d romsets good", len(verified))
    return verified


# ── Reconciliation ──────────────────────────────────────────────────────────
def is_playable(rec: GameRecord) -> bool:
    if rec.is_bios or not rec.description or not rec.year:
        return False
    return rec.driver_status == "good"


def reconcile(catalogue: Iterable[GameRecord],
              verified: Dict[str, Optional[str]]) -> List[GameRecord]:
    """
    Playable list, sorted by name.  Only verified names are looked up, so a
    game reported under an alias still appears under its own catalogue name.
    """
    by_name: Dict[str, GameRecord] = {}
    for rec in catalogue:
        by_name.setdefault(rec.name, rec)

    playable: Dict[str, GameRecord] = {}
    for name in verified:
        rec = by_name.get(name)
        if rec is not None and is_playable(rec):
            playable[name] = rec

    return sorted(playable.values(), key=lambda g: g.name)


def select_playable(reconciled: Iterable[GameRecord],
                    selection: Optional[Iterable[SelectableGame]]) -> List[GameRecord]:
    """Keep reconciled games the user left selected; no list means all."""
    reconciled = list(reconciled)
    if selection is None:
        return reconciled
    chosen = {g.name for g in selection if g.selected}
    return [g for g in reconciled if g.name in chosen]
