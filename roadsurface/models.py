"""Data classes shared by the surface pipeline."""

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from . import constants
from .errors import ConfigurationError, LaneWidthError

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    # Tolerance absorbs float noise such as 1.9 / 0.2 == 9.4999999...
    return int(math.floor(value + 0.5 + 1e-9))


@dataclass(frozen=True, eq=False)
class TrackProfile:
    """Elevation samples (meters) along one wheel path, spaced ``Ds`` apart."""
    samples: np.ndarray

    def __post_init__(self):
        arr = np.array(self.samples, dtype=np.float32).ravel()
        if not np.all(np.isfinite(arr)):
            raise ConfigurationError("Track samples must be finite numbers")
        arr.flags.writeable = False
        object.__setattr__(self, "samples", arr)

    @classmethod
    def coerce(cls, track) -> "TrackProfile":
        if isinstance(track, TrackProfile):
            return track
        return cls(track)

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class GeometryConfig:
    """Road geometry and mesh options.

    ``track_width`` and ``lane_width`` are grid-snapped when a
    :class:`SurfaceLayout` is derived from them.  ``road_banking_angle`` and
    ``road_grade_angle`` are accepted for compatibility with existing
    parameter sets but do not change the mesh.
    """
    sample_distance: float = constants.DEFAULT_SAMPLE_DISTANCE
    track_width: float = constants.DEFAULT_TRACK_WIDTH
    lane_width: float = constants.DEFAULT_LANE_WIDTH
    length_subdivisions: int = constants.DEFAULT_LENGTH_SUBDIVISIONS
    roughness: float = constants.DEFAULT_ROUGHNESS
    road_banking_angle: float = 0.0
    road_grade_angle: float = 0.0
    boundary_mode: str = "zero"
    normal_mode: str = "legacy"
    index_dtype: str = "uint16"

    def __post_init__(self):
        for name in ("sample_distance", "track_width", "lane_width", "roughness"):
            value = getattr(self, name)
            if (not isinstance(value, numbers.Real) or isinstance(value, bool)
                    or not math.isfinite(value)):
                raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
        if not self.sample_distance > 0:
            raise ConfigurationError(
                f"sample_distance must be positive, got {self.sample_distance}")
        if not self.track_width > 0:
            raise ConfigurationError(
                f"track_width must be positive, got {self.track_width}")
        if (not isinstance(self.length_subdivisions, numbers.Real)
                or isinstance(self.length_subdivisions, bool)
                or not math.isfinite(self.length_subdivisions)
                or int(self.length_subdivisions) != self.length_subdivisions
                or self.length_subdivisions < 1):
            raise ConfigurationError(
                f"length_subdivisions must be an integer >= 1, "
                f"got {self.length_subdivisions}")
        object.__setattr__(self, "length_subdivisions", int(self.length_subdivisions))
        if not self.roughness >= 0:
            raise ConfigurationError(
                f"roughness must be non-negative, got {self.roughness}")
        if self.boundary_mode not in constants.BOUNDARY_MODES:
            raise ConfigurationError(
                f"Unknown boundary_mode {self.boundary_mode!r}; "
                f"expected one of {constants.BOUNDARY_MODES}")
        if self.normal_mode not in constants.NORMAL_MODES:
            raise ConfigurationError(
                f"Unknown normal_mode {self.normal_mode!r}; "
                f"expected one of {constants.NORMAL_MODES}")
        if self.index_dtype not in constants.INDEX_LIMITS:
            raise ConfigurationError(
                f"Unknown index_dtype {self.index_dtype!r}; "
                f"expected one of {tuple(constants.INDEX_LIMITS)}")

    @classmethod
    def from_env(cls, **overrides) -> "GeometryConfig":
        """Config from the environment-backed defaults in ``constants``."""
        values = dict(
            sample_distance=constants.DEFAULT_SAMPLE_DISTANCE,
            track_width=constants.DEFAULT_TRACK_WIDTH,
            lane_width=constants.DEFAULT_LANE_WIDTH,
            length_subdivisions=constants.DEFAULT_LENGTH_SUBDIVISIONS,
            roughness=constants.DEFAULT_ROUGHNESS,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def check_widths(self) -> None:
        if not self.lane_width > self.track_width:
            raise LaneWidthError(self.lane_width, self.track_width)


@dataclass(frozen=True)
class SurfaceLayout:
    """Grid dimensions and zone boundaries derived from a config.

    All column/row numbers follow the padded-grid convention: real data
    starts at index 1.
    """
    sample_distance: float
    length_subdivisions: int
    track_width: float      # snapped
    lane_width: float       # snapped
    in_n: int               # source rows with data
    in_m: int               # source columns with data
    l_track_in: int
    r_track_in: int
    in_inner_m: int         # source samples spanning the track, inclusive
    n: int                  # dense rows
    outer_m: int
    inner_m: int
    m: int                  # dense columns
    l_track: int
    r_track: int

    @classmethod
    def from_config(cls, config: GeometryConfig, in_n: int) -> "SurfaceLayout":
        ds = config.sample_distance
        lsd = config.length_subdivisions

        track_cells = _round_half_up(config.track_width / ds)
        if track_cells < 1:
            logger.warning(f"track_width {config.track_width} m is below half "
                           f"a sample; using one sample ({ds} m)")
            track_cells = 1
        track_width = track_cells * ds

        margin_pairs = _round_half_up((config.lane_width - track_width) / (2 * ds))
        if margin_pairs < 1:
            logger.warning(f"Lane margin {config.lane_width - track_width:.3f} m "
                           f"rounds to zero; using {2 * ds} m")
            margin_pairs = 1
        lane_width = track_width + margin_pairs * 2 * ds

        if (not math.isclose(track_width, config.track_width)
                or not math.isclose(lane_width, config.lane_width)):
            logger.info(f"Snapped widths to the sample grid: track "
                        f"{config.track_width} -> {track_width:.4f} m, lane "
                        f"{config.lane_width} -> {lane_width:.4f} m")

        in_m = 2 + 2 * margin_pairs
        l_track_in = (in_m - 2) // 2 + 1
        in_inner_m = track_cells + 1
        outer_m = (in_m - 2) * lsd
        inner_m = track_cells * lsd + 1
        m = outer_m + inner_m
        return cls(
            sample_distance=ds,
            length_subdivisions=lsd,
            track_width=track_width,
            lane_width=lane_width,
            in_n=in_n,
            in_m=in_m,
            l_track_in=l_track_in,
            r_track_in=l_track_in + 1,
            in_inner_m=in_inner_m,
            n=(in_n - 1) * lsd + 1,
            outer_m=outer_m,
            inner_m=inner_m,
            m=m,
            l_track=outer_m // 2 + 1,
            r_track=m - outer_m // 2,
        )

    @property
    def large_step(self) -> int:
        return self.in_inner_m + 1

    @property
    def output_spacing(self) -> float:
        return self.sample_distance / self.length_subdivisions

    @property
    def road_length(self) -> float:
        return (self.in_n - 1) * self.sample_distance

    @property
    def vertex_count(self) -> int:
        return self.n * self.m


class Grid:
    """2-D elevation array with one cell of leading and two of trailing padding.

    The padding holds the outer points of the 4-point cubic stencil
    (``i-1 .. i+2``); ``interior`` is the real data.
    """
    PAD_BEFORE = 1
    PAD_AFTER = 2

    def __init__(self, data: np.ndarray):
        if data.ndim != 2:
            raise ValueError(f"Grid data must be 2-D, got shape {data.shape}")
        self.data = data

    @classmethod
    def zeros(cls, rows: int, cols: int, dtype=np.float64) -> "Grid":
        pad = cls.PAD_BEFORE + cls.PAD_AFTER
        return cls(np.zeros((rows + pad, cols + pad), dtype=dtype))

    @property
    def rows(self) -> int:
        return self.data.shape[0] - self.PAD_BEFORE - self.PAD_AFTER

    @property
    def cols(self) -> int:
        return self.data.shape[1] - self.PAD_BEFORE - self.PAD_AFTER

    @property
    def shape(self):
        return self.data.shape

    @property
    def interior(self) -> np.ndarray:
        return self.data[self.PAD_BEFORE:-self.PAD_AFTER,
                         self.PAD_BEFORE:-self.PAD_AFTER]

    def at(self, row: int, col: int) -> float:
        """Bounds-checked access in padded coordinates (no negative wrap)."""
        n_rows, n_cols = self.data.shape
        if not (0 <= row < n_rows and 0 <= col < n_cols):
            raise IndexError(
                f"Grid cell ({row}, {col}) outside padded shape {self.data.shape}")
        return float(self.data[row, col])

    def fill_padding(self, mode: str = "zero") -> None:
        """Reset padding cells: zeros, or a copy of the nearest edge cell."""
        inner = self.interior.copy()
        pad = ((self.PAD_BEFORE, self.PAD_AFTER), (self.PAD_BEFORE, self.PAD_AFTER))
        if mode == "clamp":
            self.data[...] = np.pad(inner, pad, mode="edge")
        else:
            self.data[...] = np.pad(inner, pad, mode="constant")

    def __repr__(self):
        return f"Grid(rows={self.rows}, cols={self.cols})"


@dataclass(frozen=True, eq=False)
class Mesh:
    """Render-ready road surface buffers.

    ``vertices`` and ``normals`` are flat float32 arrays (3 per vertex,
    vertex index ``x + z * length_samples``); ``indices`` is a flat triangle
    list of the configured index width.  All arrays are read-only.
    """
    vertices: np.ndarray
    normals: np.ndarray
    indices: np.ndarray
    length_samples: int
    width_samples: int
    road_length: float
    lane_width: float
    layout: Optional[SurfaceLayout] = field(default=None, compare=False)

    def __post_init__(self):
        for arr in (self.vertices, self.normals, self.indices):
            arr.flags.writeable = False

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    @property
    def positions(self) -> np.ndarray:
        return self.vertices.reshape(-1, 3)

    @property
    def faces(self) -> np.ndarray:
        return self.indices.reshape(-1, 3)

    @property
    def elevations(self) -> np.ndarray:
        """Vertex heights as a (length_samples, width_samples) array."""
        return self.positions[:, 1].reshape(self.width_samples, self.length_samples).T

    @property
    def placement_offset(self) -> Sequence[float]:
        """Translation that centers the road on the origin."""
        return (-self.road_length / 2, 0.0, -self.lane_width / 2)
