import pytest
from numpy import array, float32

from roadsurface.models import GeometryConfig, SurfaceLayout


@pytest.fixture
def bump():
    return array([0, 0, 1, 0, 0], dtype=float32)


@pytest.fixture
def coarse_config():
    # Ds 0.5 snaps the default widths to track 1.5 m, lane 3.5 m
    return GeometryConfig(sample_distance=0.5, track_width=1.55, lane_width=3.5,
                          length_subdivisions=1)


@pytest.fixture
def coarse_layout(coarse_config):
    return SurfaceLayout.from_config(coarse_config, 5)


@pytest.fixture
def split_config():
    return GeometryConfig(sample_distance=0.5, track_width=1.55, lane_width=3.5,
                          length_subdivisions=2)


@pytest.fixture
def split_layout(split_config):
    return SurfaceLayout.from_config(split_config, 5)
