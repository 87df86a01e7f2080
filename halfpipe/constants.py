"""Configuration constants, paths, and default track parameters."""

import math
import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()

# Set HALFPIPE_OUTPUT_DIR to write exported meshes somewhere else
OUTPUT_DIR = pathlib.Path(
    os.environ.get("HALFPIPE_OUTPUT_DIR", "").strip() or BASE_DIR / "output"
)

# ── World axes ───────────────────────────────────────────────────────────
UP = (0.0, 1.0, 0.0)
FORWARD = (0.0, 0.0, -1.0)  # -Z is forward, Y is up

# ── Straight half-cylinder primitive ─────────────────────────────────────
HALF_CYLINDER_START = (0.0, 0.0, -0.5)
HALF_CYLINDER_END = (0.0, 0.0, 0.5)
HALF_CYLINDER_RADIUS = 0.5
DEFAULT_SUBDIVISIONS = 10

# ── Swept track (the level layout) ───────────────────────────────────────
TRACK_START = (0.0, 0.0, 0.0)
TRACK_RADIUS = 75.0
TRACK_SEGMENT_LENGTH = 100.0
TRACK_SEGMENTS = 100
TRACK_SEED = 4321
TRACK_YAW_RANGE = (-math.pi / 4, math.pi / 4)
# Always pitched downhill so balls keep rolling
TRACK_PITCH_RANGE = (-math.pi / 4, -0.1 * math.pi / 4)

MAX_SEED = 2 ** 64
