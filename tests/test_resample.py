import pytest
from numpy import array, float32, full, zeros
from numpy.testing import assert_array_equal

from roadsurface.grid import build_source_grid
from roadsurface.models import GeometryConfig, SurfaceLayout, TrackProfile
from roadsurface.resample import (
    Zone,
    column_stencil,
    cubic,
    cubic_coefficients,
    lateral_zone,
    resample,
    row_stencil,
)


@pytest.mark.parametrize("p", [(0, 0, 1, 0), (3.2, -1.5, 0.25, 7.0), (1, 1, 1, 1)])
@pytest.mark.parametrize("steps", [(2, 2), (2, 5), (5, 2), (9, 9)])
def test_cubic_passes_through_control_points(p, steps):
    assert cubic(*p, *steps, 0.0) == p[1]
    assert cubic(*p, *steps, 1.0) == pytest.approx(p[2], abs=1e-12)


def test_cubic_reproduces_line_with_uniform_steps():
    assert cubic_coefficients(0, 1, 2, 3, 2, 2) == (0, 0, 1.0, 1)
    assert cubic(0, 1, 2, 3, 2, 2, 0.5) == pytest.approx(1.5)


def test_cubic_is_elementwise():
    x = array([0.0, 0.25, 0.5])
    values = cubic(0, 0, 1, 0, 2, 2, x)
    assert values.shape == (3,)
    assert values[0] == 0


def test_zone_classification(coarse_layout):
    zones = [lateral_zone(j, coarse_layout) for j in range(1, 9)]
    assert zones == [
        Zone.left_shoulder, Zone.left_shoulder,
        Zone.left_seam,
        Zone.inner_lane, Zone.inner_lane,
        Zone.right_seam,
        Zone.right_shoulder, Zone.right_shoulder,
    ]


def test_column_stencils(coarse_layout, split_layout):
    assert column_stencil(1, coarse_layout) == (Zone.left_shoulder, 1, 0.0, 2, 2)
    assert column_stencil(3, coarse_layout) == (Zone.left_seam, 3, 0.0, 2, 5)
    assert column_stencil(4, coarse_layout) == (Zone.inner_lane, 3, 0.5, 5, 5)
    assert column_stencil(5, coarse_layout) == (Zone.inner_lane, 3, 0.75, 5, 5)
    assert column_stencil(6, coarse_layout) == (Zone.right_seam, 4, 0.0, 5, 2)
    assert column_stencil(7, coarse_layout) == (Zone.right_shoulder, 5, 0.0, 2, 2)
    assert column_stencil(8, coarse_layout) == (Zone.right_shoulder, 6, 0.0, 2, 2)

    assert column_stencil(4, split_layout) == (Zone.left_shoulder, 2, 0.5, 2, 2)
    assert column_stencil(5, split_layout) == (Zone.left_seam, 3, 0.0, 2, 5)
    assert column_stencil(11, split_layout) == (Zone.right_seam, 4, 0.0, 5, 2)
    assert column_stencil(12, split_layout) == (Zone.right_shoulder, 4, 0.5, 2, 2)
    assert column_stencil(15, split_layout) == (Zone.right_shoulder, 6, 0.0, 2, 2)


def test_row_stencils(split_layout):
    assert row_stencil(1, split_layout) == (1, 0.0)
    assert row_stencil(2, split_layout) == (1, 0.5)
    assert row_stencil(4, split_layout) == (2, 0.5)
    assert row_stencil(9, split_layout) == (5, 0.0)


def _dense(left, right, layout, boundary_mode="zero"):
    source = build_source_grid(TrackProfile(left), TrackProfile(right),
                               layout, boundary_mode)
    return resample(source, layout)


def test_dense_grid_shape(split_layout, bump):
    dense = _dense(bump, bump, split_layout)
    assert dense.shape == (12, 18)
    assert dense.interior.shape == (9, 15)


def test_flat_road_stays_flat(split_layout):
    dense = _dense(zeros(5), zeros(5), split_layout)
    assert not dense.data.any()


def test_input_samples_are_reproduced_at_track_columns(coarse_layout, bump):
    dense = _dense(bump, bump, coarse_layout)
    lt, rt = coarse_layout.l_track - 1, coarse_layout.r_track - 1
    assert_array_equal(dense.interior[:, lt], bump)
    assert_array_equal(dense.interior[:, rt], bump)


def test_input_samples_reproduced_with_subdivisions():
    config = GeometryConfig(sample_distance=0.1, track_width=1.55, lane_width=3.5,
                            length_subdivisions=3)
    left = array([0.0, 0.02, 0.2, 0.03, -0.16, 0.0], dtype=float32)
    right = array([0.05, 0.0, 0.22, 0.0, 0.0, 0.1], dtype=float32)
    layout = SurfaceLayout.from_config(config, len(left))
    dense = _dense(left, right, layout)
    assert_array_equal(dense.interior[::3, layout.l_track - 1], left)
    assert_array_equal(dense.interior[::3, layout.r_track - 1], right)


def test_longitudinal_midpoint(split_layout, bump):
    dense = _dense(bump, bump, split_layout)
    # rows 1..4 at the track column are [0, 0, 1, 0]: a=-1.5, b=2, c=0.5, d=0
    assert dense.interior[3, split_layout.l_track - 1] == pytest.approx(0.5625)


def test_inner_lane_uses_large_step(split_layout, coarse_config):
    # left track 1, right track 0: lateral stencil [1, 1, 0, 0] with steps (5, 5)
    dense = _dense(full(5, 1.0), zeros(5), split_layout)
    row = dense.interior[2]
    for j in range(split_layout.l_track + 1, split_layout.r_track):
        y = (j - split_layout.r_track + split_layout.inner_m) / split_layout.inner_m
        expected = 1.6 * y ** 3 - 2.4 * y ** 2 - 0.2 * y + 1
        assert row[j - 1] == pytest.approx(expected)

    # with step 2 on both sides the midpoint would be 0.203125 instead
    coarse = SurfaceLayout.from_config(coarse_config, 5)
    dense = _dense(full(5, 1.0), zeros(5), coarse)
    assert dense.interior[2, 4] == pytest.approx(0.175)


def test_seams_and_shoulders_next_to_tracks(split_layout):
    dense = _dense(full(5, 1.0), zeros(5), split_layout)
    row = dense.interior[4]
    assert row[split_layout.l_track - 1] == 1.0
    assert row[split_layout.r_track - 1] == 0.0
    # last left shoulder cell: stencil [0, 1, 1, 0], overshoots the track
    assert row[3] == pytest.approx(1.125)
    # first right shoulder cell: stencil [1, 0, 0, 0]
    assert row[11] == pytest.approx(-0.0625)


def test_zero_padding_flattens_first_sample(split_layout):
    track = full(5, 2.0)
    zero_mode = _dense(track, track, split_layout, "zero")
    clamp_mode = _dense(track, track, split_layout, "clamp")
    col = split_layout.l_track - 1
    # halfway between samples 1 and 2: stencil [0, 2, 2, 2] vs [2, 2, 2, 2]
    assert zero_mode.interior[1, col] == pytest.approx(2.125)
    assert clamp_mode.interior[1, col] == pytest.approx(2.0)
