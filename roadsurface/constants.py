"""Default geometry, environment overrides, and output paths."""

import os
import pathlib

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_float(name, default):
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else default


def _env_int(name, default):
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


# ── Geometry defaults (meters) ───────────────────────────────────────────
DEFAULT_SAMPLE_DISTANCE = _env_float("ROADSURFACE_SAMPLE_DISTANCE", 0.1)
DEFAULT_TRACK_WIDTH = _env_float("ROADSURFACE_TRACK_WIDTH", 1.55)
DEFAULT_LANE_WIDTH = _env_float("ROADSURFACE_LANE_WIDTH", 3.5)
DEFAULT_LENGTH_SUBDIVISIONS = _env_int("ROADSURFACE_LENGTH_SUBDIVISIONS", 1)
DEFAULT_ROUGHNESS = _env_float("ROADSURFACE_ROUGHNESS", 0.0)

# ── Interpolation ────────────────────────────────────────────────────────
# Finite-difference step between the two neighbours of a uniformly
# spaced source sample.
SMALL_STEP = 2

BOUNDARY_MODES = ("zero", "clamp")
NORMAL_MODES = ("legacy", "accumulate")

# Largest vertex count addressable by each index width
INDEX_LIMITS = {
    "uint16": 2 ** 16,
    "uint32": 2 ** 32,
}

# ── Paths ────────────────────────────────────────────────────────────────
BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(os.environ.get("ROADSURFACE_OUTPUT_DIR", BASE_DIR / "output"))

LOG_LEVEL = os.environ.get("ROADSURFACE_LOG_LEVEL", "INFO").upper()
