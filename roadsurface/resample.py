"""Zone-aware bicubic resampling of the source grid onto the dense grid.

Laterally the source grid is dense on the shoulders but collapses the
whole space between the tracks into one cell.  The same cubic is used
everywhere; only the finite-difference step lengths used for the end
derivatives change:

    left shoulder   j <  lTrack            steps (2, 2)
    left seam       j == lTrack            steps (2, large)
    inner lane      lTrack < j < rTrack    steps (large, large)
    right seam      j == rTrack            steps (large, 2)
    right shoulder  j >  rTrack            steps (2, 2)

with ``large = inInnerM + 1``.  Longitudinally the sampling is uniform and
always uses steps (2, 2).
"""

import logging
from enum import Enum
from typing import NamedTuple

import numpy as np

from . import constants
from .models import Grid, SurfaceLayout

logger = logging.getLogger(__name__)


class Zone(str, Enum):
    left_shoulder = "left_shoulder"
    left_seam = "left_seam"
    inner_lane = "inner_lane"
    right_seam = "right_seam"
    right_shoulder = "right_shoulder"


class ColumnStencil(NamedTuple):
    zone: Zone
    source_j: int
    interp_y: float
    step1: int
    step2: int


class RowStencil(NamedTuple):
    source_i: int
    interp_x: float


def cubic_coefficients(p0, p1, p2, p3, step1, step2):
    """Coefficients ``(a, b, c, d)`` of the cubic through ``p1`` and ``p2``."""
    f0 = p1
    f1 = p2
    df0 = (p2 - p0) / step1
    df1 = (p3 - p1) / step2
    a = 2 * f0 - 2 * f1 + df0 + df1
    b = -3 * f0 + 3 * f1 - 2 * df0 - df1
    c = df0
    d = f0
    return a, b, c, d


def cubic(p0, p1, p2, p3, step1, step2, x):
    """Evaluate the variable-step cubic at ``x`` in ``[0, 1]``.

    ``value(0) == p1`` and ``value(1) == p2`` for any step lengths; the steps
    only scale the end derivatives.  Works elementwise on numpy arrays.
    """
    a, b, c, d = cubic_coefficients(p0, p1, p2, p3, step1, step2)
    return a * x ** 3 + b * x ** 2 + c * x + d


def lateral_zone(j: int, layout: SurfaceLayout) -> Zone:
    if j < layout.l_track:
        return Zone.left_shoulder
    if j == layout.l_track:
        return Zone.left_seam
    if j < layout.r_track:
        return Zone.inner_lane
    if j == layout.r_track:
        return Zone.right_seam
    return Zone.right_shoulder


def column_stencil(j: int, layout: SurfaceLayout) -> ColumnStencil:
    """Source column, lateral fraction and step pair for dense column ``j``."""
    lsd = layout.length_subdivisions
    small = constants.SMALL_STEP
    large = layout.large_step
    zone = lateral_zone(j, layout)

    if zone is Zone.inner_lane:
        interp_y = (j - layout.r_track + layout.inner_m) / layout.inner_m
        return ColumnStencil(zone, layout.l_track_in, interp_y, large, large)

    sub_j = (j - 1) % lsd
    source_j = 1 + (j - 1 - sub_j) // lsd
    if zone in (Zone.right_seam, Zone.right_shoulder):
        source_j -= layout.in_inner_m - 2
    interp_y = sub_j / lsd

    if zone is Zone.left_seam:
        steps = (small, large)
    elif zone is Zone.right_seam:
        steps = (large, small)
    else:
        steps = (small, small)
    return ColumnStencil(zone, source_j, interp_y, *steps)


def row_stencil(i: int, layout: SurfaceLayout) -> RowStencil:
    lsd = layout.length_subdivisions
    sub_i = (i - 1) % lsd
    return RowStencil(1 + (i - 1 - sub_i) // lsd, sub_i / lsd)


def resample(source: Grid, layout: SurfaceLayout) -> Grid:
    """Evaluate the dense ``(N+3) x (M+3)`` grid from the source grid.

    The bicubic is separable, so each dense row first interpolates every
    source column along the length, then each dense column interpolates
    laterally across four of those values.
    """
    rows = [row_stencil(i, layout) for i in range(1, layout.n + 1)]
    cols = [column_stencil(j, layout) for j in range(1, layout.m + 1)]

    src = source.data
    si = np.array([r.source_i for r in rows], dtype=np.intp)
    ix = np.array([r.interp_x for r in rows], dtype=np.float64)[:, None]
    small = constants.SMALL_STEP

    # (N, inM+3): every source column interpolated at each dense row
    along = cubic(src[si - 1], src[si], src[si + 1], src[si + 2],
                  small, small, ix)

    sj = np.array([c.source_j for c in cols], dtype=np.intp)
    iy = np.array([c.interp_y for c in cols], dtype=np.float64)
    step1 = np.array([c.step1 for c in cols], dtype=np.float64)
    step2 = np.array([c.step2 for c in cols], dtype=np.float64)

    dense = Grid.zeros(layout.n, layout.m)
    dense.interior[...] = cubic(along[:, sj - 1], along[:, sj],
                                along[:, sj + 1], along[:, sj + 2],
                                step1, step2, iy)

    if logger.isEnabledFor(logging.DEBUG):
        counts = {}
        for c in cols:
            counts[c.zone.value] = counts.get(c.zone.value, 0) + 1
        logger.debug(f"Lateral zones: {counts}")
    logger.info(f"Resampled {source.rows}x{source.cols} source grid to "
                f"{layout.n}x{layout.m} dense grid")
    return dense
