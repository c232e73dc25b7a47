import argparse
import logging
import sys

import config
from app import ArcadeSaver
from errors import ArcadeSaverError
from gamelist_builder import build_game_list

log = logging.getLogger(__name__)


def _parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Rotate through verified arcade games",
        epilog="MAME options start with '-', so pass them as --args='-nosound -skip_gameinfo'",
    )
    ap.add_argument("--emulator", default=config.EMULATOR_PATH, help="MAME binary")
    ap.add_argument("--args", dest="extra_args", default=config.EXTRA_ARGS, metavar="OPTIONS",
                    help="extra options passed after the game name; use the --args=OPTIONS form")
    ap.add_argument("--minutes", type=int, default=config.ROTATION_MINUTES,
                    help="minutes per game (>= 1)")
    ap.add_argument("--dwell", type=int, default=config.DWELL_SECONDS,
                    help="seconds the game card shows before launch")
    ap.add_argument("--gamelist", default=config.GAMELIST_PATH, help="selection list file")
    ap.add_argument("--build-only", action="store_true",
                    help="rebuild the game list and exit")
    ap.add_argument("--no-build", action="store_true",
                    help="use the stored game list without querying the emulator")
    ap.add_argument("--windowed", action="store_true")
    args = ap.parse_args(argv)
    if args.minutes < 1:
        ap.error("--minutes must be at least 1")
    if args.dwell < 0:
        ap.error("--dwell cannot be negative")
    return args


def _apply(args) -> None:
    config.EMULATOR_PATH = args.emulator
    config.EXTRA_ARGS = args.extra_args
    config.ROTATION_MINUTES = args.minutes
    config.DWELL_SECONDS = args.dwell
    config.GAMELIST_PATH = args.gamelist
    if args.no_build:
        config.RUN_GAMELIST_BUILDER = False
    if args.windowed:
        config.FULLSCREEN = False


def _setup_logging() -> None:
    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for handler in (logging.StreamHandler(), logging.FileHandler(config.LOG_FILE, encoding="utf-8")):
        handler.setFormatter(fmt)
        root.addHandler(handler)


def main(argv=None) -> int:
    args = _parse_args(argv)
    _apply(args)
    _setup_logging()

    if args.build_only:
        try:
            build_game_list(config.EMULATOR_PATH, config.GAMELIST_PATH)
        except ArcadeSaverError as exc:
            log.error("%s", exc)
            return 1
        return 0

    return ArcadeSaver().run()

if __name__ == "__main__":
    sys.exit(main())
