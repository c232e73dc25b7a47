from __future__ import annotations

import os

# headless pygame for the display tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from events import EventManager


@pytest.fixture(autouse=True)
def _empty_event_queue():
    EventManager.clear()
    yield
    EventManager.clear()


class FakeProcess:
    """Stands in for ProcessHandle."""

    def __init__(self, pid: int = 4242, output: str = "", exited: bool = False):
        self.pid = pid
        self.output = output
        self.exited = exited
        self.close_requests = 0
        self.waited = False

    def has_exited(self) -> bool:
        return self.exited

    def request_close(self) -> None:
        self.close_requests += 1

    def read_all_output(self) -> str:
        return self.output

    def wait_for_exit(self):
        self.waited = True
        self.exited = True
        return 0


class ListingStarter:
    """Fake start_process answering -listxml / -verifyroms from canned text."""

    def __init__(self, outputs: dict):
        self.outputs = outputs
        self.calls = []

    def __call__(self, path, args, working_dir=None, capture_stdout=False):
        self.calls.append((path, list(args), working_dir, capture_stdout))
        out = self.outputs[args[0]]
        if isinstance(out, Exception):
            raise out
        return FakeProcess(output=out)


LISTXML = """<?xml version="1.0"?>
<!DOCTYPE mame [
<!ELEMENT mame (machine+)>
	<!ATTLIST mame build CDATA #IMPLIED>
<!ELEMENT machine (description, year?, manufacturer?, driver?)>
	<!ATTLIST machine name CDATA #REQUIRED>
	<!ATTLIST machine isbios (yes|no) "no">
	<!ATTLIST machine isdevice (yes|no) "no">
	<!ATTLIST machine runnable (yes|no) "yes">
<!ELEMENT description (#PCDATA)>
<!ELEMENT year (#PCDATA)>
<!ELEMENT manufacturer (#PCDATA)>
<!ELEMENT driver EMPTY>
	<!ATTLIST driver status (good|imperfect|preliminary) #REQUIRED>
]>
<mame build="0.261">
	<machine name="pacman" cloneof="puckman">
		<description>Pac-Man (Midway)</description>
		<year>1980</year>
		<manufacturer>Namco (Midway license)</manufacturer>
		<driver status="good"/>
	</machine>
	<machine name="puckman">
		<description>Puck Man (Japan set 1)</description>
		<year>1980</year>
		<manufacturer>Namco</manufacturer>
		<driver status="good"/>
	</machine>
	<machine name="neogeo" isbios="yes">
		<description>Neo-Geo MV-6F</description>
		<year>1990</year>
		<manufacturer>SNK</manufacturer>
		<driver status="good"/>
	</machine>
	<machine name="z80" isdevice="yes" runnable="no">
		<description>Zilog Z80</description>
	</machine>
	<machine name="mk">
		<description>Mortal Kombat (rev 5.0 T-Unit 03/19/93)</description>
		<year>1992</year>
		<manufacturer>Midway</manufacturer>
		<driver status="imperfect"/>
	</machine>
	<machine name="dkong">
		<description>Donkey Kong (US set 1)</description>
		<year>1981</year>
		<manufacturer>Nintendo of America</manufacturer>
		<driver status="good"/>
	</machine>
	<machine name="biosa">
		<description>Some BIOS</description>
		<driver status="good"/>
	</machine>
</mame>
"""

VERIFYROMS = """romset 1942 is bad
romset dkong is good
romset pacman [puckman] is good
romset mk is good
romset neogeo is good
romset z80 is good
romset biosa is good
romset galaga [galaga] is best available
romset xevious not found
9 romsets found, 6 were OK.
"""
