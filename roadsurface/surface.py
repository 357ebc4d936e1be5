"""SurfaceGenerator: validate, snap, then grid -> resample -> triangulate."""

import logging
import time
from typing import Optional, Sequence, Union

import numpy as np

from .errors import ConfigurationError, TrackLengthMismatchError
from .grid import build_source_grid
from .models import GeometryConfig, Mesh, SurfaceLayout, TrackProfile
from .resample import resample
from .triangulate import check_index_capacity, triangulate

logger = logging.getLogger(__name__)

TrackLike = Union[TrackProfile, Sequence[float], np.ndarray]


class SurfaceGenerator:
    """Builds a road surface :class:`Mesh` from two wheel-track profiles.

    Holds only the immutable config, so one instance can generate any
    number of meshes; every call starts from scratch.
    """

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config if config is not None else GeometryConfig()

    def layout_for(self, left: TrackLike, right: TrackLike) -> SurfaceLayout:
        """Validate the inputs and return the snapped grid layout."""
        left = TrackProfile.coerce(left)
        right = TrackProfile.coerce(right)
        if len(left) != len(right):
            raise TrackLengthMismatchError(len(left), len(right))
        self.config.check_widths()
        if len(left) < 2:
            raise ConfigurationError(
                f"Tracks need at least two samples, got {len(left)}")

        if self.config.road_banking_angle or self.config.road_grade_angle:
            logger.warning("road_banking_angle and road_grade_angle do not "
                           "affect the generated surface; ignoring them")

        layout = SurfaceLayout.from_config(self.config, len(left))
        check_index_capacity(layout.vertex_count, self.config.index_dtype)
        return layout

    def generate(self, left: TrackLike, right: TrackLike,
                 rng: Optional[np.random.Generator] = None) -> Mesh:
        """Run the whole pipeline.

        Raises
        ------
        TrackLengthMismatchError
            Tracks differ in length.
        LaneWidthError
            ``lane_width <= track_width``.
        IndexOverflowError
            The mesh has more vertices than ``index_dtype`` can address.
        ConfigurationError
            Fewer than two samples per track.
        """
        t0 = time.perf_counter()
        left = TrackProfile.coerce(left)
        right = TrackProfile.coerce(right)
        layout = self.layout_for(left, right)
        cfg = self.config

        source = build_source_grid(left, right, layout, cfg.boundary_mode)
        dense = resample(source, layout)
        mesh = triangulate(dense, layout, cfg.roughness, rng,
                           normal_mode=cfg.normal_mode,
                           index_dtype=cfg.index_dtype)

        logger.info(f"Generated {layout.road_length:.2f} m x "
                    f"{layout.lane_width:.2f} m road surface in "
                    f"{time.perf_counter() - t0:.3f}s")
        return mesh


def generate(config: GeometryConfig, left: TrackLike, right: TrackLike,
             rng: Optional[np.random.Generator] = None) -> Mesh:
    """Functional form of :meth:`SurfaceGenerator.generate`."""
    return SurfaceGenerator(config).generate(left, right, rng)
