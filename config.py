# config.py
"""
Configuration settings for the arcade screensaver.
"""
import os

FPS = 30

# ── Emulator ───────────────────────────────────────────────────────────────

# Path to the MAME binary; its directory becomes the working directory
EMULATOR_PATH = os.environ.get("ARCADE_SAVER_MAME", "/usr/games/mame")

# Extra command-line options appended after the game name
EXTRA_ARGS = "-skip_gameinfo -nowindow"

# ── Rotation ───────────────────────────────────────────────────────────────

ROTATION_MINUTES = 5     # whole minutes each game gets before the next pick
DWELL_SECONDS    = 3     # seconds the game card is shown before launch

# ── Game list ──────────────────────────────────────────────────────────────

# Selection list written by gamelist_builder.py
GAMELIST_PATH = os.path.join(os.path.expanduser("~"), ".arcade_saver", "gamelist.json")

# Refresh the list from -listxml / -verifyroms on every start
RUN_GAMELIST_BUILDER = True

# ── Display settings ───────────────────────────────────────────────────────

FULLSCREEN = True
WINDOWED_SIZE = (800, 600)

# Pointer travel (px) below which mouse motion is not treated as activity
MOUSE_MOVE_THRESHOLD = 4

# Seconds an error card stays up unless dismissed
ERROR_CARD_SECONDS = 8.0

# ── Logging ────────────────────────────────────────────────────────────────

LOG_FILE = "runtime.log"
