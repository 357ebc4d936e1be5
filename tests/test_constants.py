import importlib

import pytest

from roadsurface import constants
from roadsurface.models import GeometryConfig


@pytest.fixture
def env_defaults(monkeypatch):
    """Reload ``constants`` under patched env vars, then restore it."""
    def reload_with(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        importlib.reload(constants)

    yield reload_with
    monkeypatch.undo()
    importlib.reload(constants)


def test_from_env_reads_overrides(env_defaults):
    env_defaults(ROADSURFACE_SAMPLE_DISTANCE="0.25",
                 ROADSURFACE_TRACK_WIDTH="1.5",
                 ROADSURFACE_LANE_WIDTH="4.0",
                 ROADSURFACE_LENGTH_SUBDIVISIONS="3",
                 ROADSURFACE_ROUGHNESS="0.01")
    config = GeometryConfig.from_env()
    assert config.sample_distance == 0.25
    assert config.track_width == 1.5
    assert config.lane_width == 4.0
    assert config.length_subdivisions == 3
    assert config.roughness == 0.01


def test_explicit_values_beat_env(env_defaults):
    env_defaults(ROADSURFACE_LANE_WIDTH="4.0", ROADSURFACE_ROUGHNESS="0.01")
    config = GeometryConfig.from_env(lane_width=3.0, roughness=None)
    assert config.lane_width == 3.0
    assert config.roughness == 0.01


def test_blank_env_keeps_builtin_default(env_defaults):
    env_defaults(ROADSURFACE_SAMPLE_DISTANCE="  ", ROADSURFACE_LOG_LEVEL="debug")
    assert constants.DEFAULT_SAMPLE_DISTANCE == 0.1
    assert constants.LOG_LEVEL == "DEBUG"
