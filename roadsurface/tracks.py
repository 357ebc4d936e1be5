"""Loading, sample and procedural wheel-track profile pairs."""

import json
import logging
import pathlib
from typing import Optional, Tuple

import numpy as np

from .errors import ConfigurationError
from .models import TrackProfile

logger = logging.getLogger(__name__)

# Short measured-looking pair: a bump on both tracks, then a pothole and
# a dip on the left track only.
DEMO_LEFT = [0, 0, 0, 0, 0, 0.02, 0.2, 0.03, 0, 0, -0.16, 0, -0.2, 0, 0, 0, 0]
DEMO_RIGHT = [0, 0, 0, 0, 0, 0.05, 0.22, 0.02, 0, 0, 0, 0, 0, 0, 0, 0, 0]


def demo_tracks() -> Tuple[TrackProfile, TrackProfile]:
    return TrackProfile(DEMO_LEFT), TrackProfile(DEMO_RIGHT)


def load_tracks(path) -> Tuple[TrackProfile, TrackProfile]:
    """Read a left/right track pair from ``.json`` or delimited text.

    JSON files hold ``{"left": [...], "right": [...]}``.  Text files (CSV or
    whitespace separated) hold one sample per line, left in the first
    column and right in the second; ``#`` starts a comment and a single
    non-numeric header line is skipped.
    """
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Track file not found: {path}")

    if path.suffix.lower() == ".json":
        with open(path) as f:
            data = json.load(f)
        try:
            left, right = data["left"], data["right"]
        except (KeyError, TypeError) as e:
            raise ConfigurationError(
                f"{path.name}: expected an object with 'left' and 'right' "
                f"arrays") from e
    else:
        delimiter = "," if path.suffix.lower() == ".csv" else None
        with open(path) as f:
            first = f.readline()
        skip = 0
        try:
            [float(v) for v in first.replace(",", " ").split()]
        except ValueError:
            skip = 1
        table = np.loadtxt(path, delimiter=delimiter, skiprows=skip,
                           comments="#", ndmin=2)
        if table.shape[1] < 2:
            raise ConfigurationError(
                f"{path.name}: expected two columns (left, right), "
                f"got {table.shape[1]}")
        left, right = table[:, 0], table[:, 1]

    logger.info(f"Loaded {len(left)}/{len(right)} track samples from {path.name}")
    return TrackProfile(left), TrackProfile(right)


def random_tracks(n_samples: int, rng: Optional[np.random.Generator] = None,
                  sample_distance: float = 0.1, undulation: float = 0.02,
                  n_features: int = 4, feature_height: float = 0.15,
                  correlation: float = 0.7) -> Tuple[TrackProfile, TrackProfile]:
    """Procedural track pair: long-wave undulation plus bumps and potholes.

    ``correlation`` is the share of features that hit both wheel paths
    (speed bumps, transverse cracks); the rest land on one track only.
    """
    if n_samples < 2:
        raise ConfigurationError(f"Need at least two samples, got {n_samples}")
    if rng is None:
        rng = np.random.default_rng()

    s = np.arange(n_samples) * sample_distance
    length = max(s[-1], sample_distance)

    # Shared long-wave profile, phase-shifted slightly per side
    phase = rng.uniform(0, 2 * np.pi)
    wavelength = length / rng.uniform(1.0, 3.0)
    base = undulation * np.sin(2 * np.pi * s / wavelength + phase)
    left = base.copy()
    right = undulation * np.sin(2 * np.pi * s / wavelength + phase + 0.1)

    for _ in range(n_features):
        center = rng.uniform(0, length)
        width = rng.uniform(2, 6) * sample_distance
        height = feature_height * rng.uniform(0.3, 1.0) * rng.choice([-1.0, 1.0])
        shape = height * np.exp(-0.5 * ((s - center) / width) ** 2)
        roll = rng.random()
        if roll < correlation:
            left += shape
            right += shape
        elif roll < correlation + (1 - correlation) / 2:
            left += shape
        else:
            right += shape

    logger.debug(f"Generated random track pair: {n_samples} samples, "
                 f"{n_features} features")
    return TrackProfile(left), TrackProfile(right)
