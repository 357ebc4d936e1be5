"""Orbit camera for viewing a generated road surface.

Only needs the mesh placement offset and extent; the rendering side calls
``drag``/``zoom`` from its own input handling and reads back matrices.
Matrices are 4x4 float32 in column-vector convention (``M @ v``).
"""

import math
from dataclasses import dataclass, field

import numpy as np

from .models import Mesh

# Keep phi short of the poles so the look-at basis stays defined
_PHI_LIMIT = 0.5 * math.pi - 1e-3


def perspective(fov_y_deg: float, aspect: float, z_near: float, z_far: float) -> np.ndarray:
    """OpenGL-style perspective projection."""
    f = 1.0 / math.tan(math.radians(fov_y_deg) / 2)
    proj = np.zeros((4, 4), dtype=np.float32)
    proj[0, 0] = f / aspect
    proj[1, 1] = f
    proj[2, 2] = (z_far + z_near) / (z_near - z_far)
    proj[2, 3] = 2 * z_far * z_near / (z_near - z_far)
    proj[3, 2] = -1.0
    return proj


def translation(offset) -> np.ndarray:
    mat = np.eye(4, dtype=np.float32)
    mat[:3, 3] = offset
    return mat


def look_at(eye, target, up=(0.0, 1.0, 0.0)) -> np.ndarray:
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    forward = target - eye
    forward /= np.linalg.norm(forward)
    side = np.cross(forward, up)
    side /= np.linalg.norm(side)
    true_up = np.cross(side, forward)

    view = np.eye(4, dtype=np.float32)
    view[0, :3] = side
    view[1, :3] = true_up
    view[2, :3] = -forward
    view[:3, 3] = -view[:3, :3] @ eye
    return view


@dataclass
class OrbitCamera:
    theta: float = 0.0              # azimuth, radians
    phi: float = 0.4                # elevation, radians
    radius: float = 10.0
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    min_radius: float = 0.5
    max_radius: float = 1000.0

    @classmethod
    def for_mesh(cls, mesh: Mesh, **kwargs) -> "OrbitCamera":
        """Camera aimed at the centered mesh, far enough to see all of it."""
        extent = max(mesh.road_length, mesh.lane_width)
        kwargs.setdefault("radius", 1.5 * extent if extent > 0 else 10.0)
        kwargs.setdefault("max_radius", max(1000.0, 10 * extent))
        return cls(**kwargs)

    def drag(self, dx: float, dy: float, width: int, height: int) -> None:
        """Rotate by a pointer drag of ``(dx, dy)`` pixels on a viewport."""
        self.theta = (self.theta + dx * 2 * math.pi / width) % (2 * math.pi)
        self.phi = min(max(self.phi + dy * 2 * math.pi / height,
                           -_PHI_LIMIT), _PHI_LIMIT)

    def zoom(self, delta: float, rate: float = 0.001) -> None:
        """Scale the radius by a wheel delta; positive moves away."""
        self.radius = min(max(self.radius * math.exp(delta * rate),
                              self.min_radius), self.max_radius)

    def eye(self) -> np.ndarray:
        cos_phi = math.cos(self.phi)
        return np.asarray(self.target, dtype=np.float64) + self.radius * np.array([
            cos_phi * math.sin(self.theta),
            math.sin(self.phi),
            cos_phi * math.cos(self.theta),
        ])

    def view_matrix(self) -> np.ndarray:
        return look_at(self.eye(), self.target)

    @staticmethod
    def model_matrix(mesh: Mesh) -> np.ndarray:
        """Translation that centers ``mesh`` on the camera target."""
        return translation(mesh.placement_offset)
