"""Source elevation grid built from the two wheel-track profiles.

The source grid compresses the space between the tracks to a single
column gap: each track value is written into two adjacent columns so the
track has no lateral slope at the seam, and every other cell is zero.
"""

import logging

from .models import Grid, SurfaceLayout, TrackProfile

logger = logging.getLogger(__name__)


def build_source_grid(left: TrackProfile, right: TrackProfile,
                      layout: SurfaceLayout, boundary_mode: str = "zero") -> Grid:
    """Build the padded ``(inN+3) x (inM+3)`` source grid.

    Parameters
    ----------
    left, right : TrackProfile
        Equal-length track profiles (validated by the caller).
    layout : SurfaceLayout
        Snapped dimensions; supplies ``in_m`` and the track columns.
    boundary_mode : str
        ``"zero"`` keeps the padding at zero, ``"clamp"`` copies the nearest
        row/column into it.

    Returns
    -------
    Grid with rows ``1..inN`` holding data.
    """
    grid = Grid.zeros(layout.in_n, layout.in_m)
    rows = slice(1, layout.in_n + 1)
    lt, rt = layout.l_track_in, layout.r_track_in

    grid.data[rows, lt - 1] = left.samples
    grid.data[rows, lt] = left.samples
    grid.data[rows, rt] = right.samples
    grid.data[rows, rt + 1] = right.samples

    if boundary_mode == "clamp":
        grid.fill_padding("clamp")

    logger.debug(f"Source grid {grid.shape}: left track columns "
                 f"{lt - 1},{lt}, right track columns {rt},{rt + 1}")
    return grid
