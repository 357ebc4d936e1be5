"""roadsurface package: triangulated road surfaces from wheel-track profiles."""

from roadsurface.errors import (
    ConfigurationError,
    IndexOverflowError,
    LaneWidthError,
    RoadSurfaceError,
    TrackLengthMismatchError,
)
from roadsurface.camera import OrbitCamera
from roadsurface.models import GeometryConfig, Grid, Mesh, SurfaceLayout, TrackProfile
from roadsurface.surface import SurfaceGenerator, generate
