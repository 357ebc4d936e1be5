"""Dense elevation grid -> vertex, normal and triangle index buffers."""

import logging
from typing import Optional

import numpy as np

from . import constants
from .errors import IndexOverflowError
from .models import Grid, Mesh, SurfaceLayout

logger = logging.getLogger(__name__)


def check_index_capacity(vertex_count: int, index_dtype: str) -> None:
    limit = constants.INDEX_LIMITS[index_dtype]
    if vertex_count > limit:
        raise IndexOverflowError(vertex_count, index_dtype, limit)


def vertex_positions(dense: Grid, layout: SurfaceLayout, roughness: float = 0.0,
                     rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """(N, M, 3) vertex positions, x along the road and z across it.

    Each vertex gets one uniform draw on ``[-1, 1]`` scaled by
    ``roughness / length_subdivisions``, drawn in vertex-index order.
    Nothing is drawn when ``roughness`` is zero.
    """
    n, m = layout.n, layout.m
    spacing = layout.output_spacing
    xx, zz = np.meshgrid(np.arange(n), np.arange(m), indexing='ij')

    heights = dense.interior.astype(np.float64, copy=True)
    if roughness:
        if rng is None:
            rng = np.random.default_rng()
        noise = rng.uniform(-1.0, 1.0, size=n * m)
        # noise is in vertex order (x + z*N), i.e. (M, N) row-major
        heights += roughness * noise.reshape(m, n).T / layout.length_subdivisions

    pos = np.empty((n, m, 3), dtype=np.float64)
    pos[..., 0] = xx * spacing
    pos[..., 1] = heights
    pos[..., 2] = zz * spacing
    return pos


def quad_normals(pos: np.ndarray):
    """Unnormalized face normals of both triangles of every quad.

    For quad ``a=(x,z), b=(x,z+1), c=(x+1,z), d=(x+1,z+1)`` returns
    ``(b-a) x (c-a)`` and ``(b-c) x (d-c)``, each shaped (N-1, M-1, 3).
    """
    a = pos[:-1, :-1]
    b = pos[:-1, 1:]
    c = pos[1:, :-1]
    d = pos[1:, 1:]
    normal1 = np.cross(b - a, c - a)
    normal2 = np.cross(b - c, d - c)
    return normal1, normal2


def legacy_vertex_normals(pos: np.ndarray) -> np.ndarray:
    """Per-quad normal assignment, later quads overwriting earlier ones.

    Quads are visited with x in the outer loop and z in the inner loop.
    Within a quad ``a`` gets normal1, ``d`` gets normal2, and ``b``/``c``
    get their mean.  The last quad to touch a vertex is therefore:

    * the quad it is corner ``a`` of, when one exists,
    * else the quad it is corner ``b`` of (last lateral column),
    * else the quad it is corner ``c`` of (last row),
    * else the final quad, as corner ``d``.
    """
    normal1, normal2 = quad_normals(pos)
    mean = 0.5 * (normal1 + normal2)

    out = np.empty_like(pos)
    out[:-1, :-1] = normal1
    out[:-1, -1] = mean[:, -1]
    out[-1, :-1] = mean[-1, :]
    out[-1, -1] = normal2[-1, -1]
    return out


def accumulated_vertex_normals(pos: np.ndarray) -> np.ndarray:
    """Sum of every adjacent face normal per vertex, normalized."""
    normal1, normal2 = quad_normals(pos)
    both = normal1 + normal2

    acc = np.zeros_like(pos)
    acc[:-1, :-1] += normal1
    acc[:-1, 1:] += both
    acc[1:, :-1] += both
    acc[1:, 1:] += normal2

    length = np.linalg.norm(acc, axis=-1, keepdims=True)
    np.divide(acc, length, out=acc, where=length > 0)
    return acc


def triangle_indices(n: int, m: int, index_dtype: str = "uint16") -> np.ndarray:
    """Flat triangle list, two triangles per quad, vertex index ``x + z*n``."""
    check_index_capacity(n * m, index_dtype)
    xs, zs = np.meshgrid(np.arange(n - 1), np.arange(m - 1), indexing='ij')
    xs = xs.ravel()
    zs = zs.ravel()

    v_a = xs + zs * n               # (x,   z)
    v_b = xs + (zs + 1) * n         # (x,   z+1)
    v_c = (xs + 1) + zs * n         # (x+1, z)
    v_d = (xs + 1) + (zs + 1) * n   # (x+1, z+1)

    tris = np.stack([
        np.column_stack([v_a, v_b, v_c]),
        np.column_stack([v_c, v_b, v_d]),
    ], axis=1)
    return tris.reshape(-1).astype(index_dtype)


def _flatten(grid_values: np.ndarray) -> np.ndarray:
    # (N, M, 3) -> vertex order x + z*N
    return grid_values.transpose(1, 0, 2).reshape(-1).astype(np.float32)


def triangulate(dense: Grid, layout: SurfaceLayout, roughness: float = 0.0,
                rng: Optional[np.random.Generator] = None,
                normal_mode: str = "legacy",
                index_dtype: str = "uint16") -> Mesh:
    """Turn the dense elevation grid into a :class:`Mesh`.

    Parameters
    ----------
    dense : Grid
        Resampled ``N x M`` elevations (padded).
    layout : SurfaceLayout
        Grid dimensions and output spacing.
    roughness : float
        Jitter amplitude in meters.
    rng : numpy.random.Generator, optional
        Source of the jitter; pass a seeded generator for reproducible output.
    normal_mode : str
        ``"legacy"`` for the per-quad rule, ``"accumulate"`` for normalized
        sums over all adjacent faces.
    index_dtype : str
        ``"uint16"`` or ``"uint32"``.
    """
    check_index_capacity(layout.vertex_count, index_dtype)

    pos = vertex_positions(dense, layout, roughness, rng)
    if normal_mode == "accumulate":
        normals = accumulated_vertex_normals(pos)
    else:
        normals = legacy_vertex_normals(pos)
    indices = triangle_indices(layout.n, layout.m, index_dtype)

    mesh = Mesh(
        vertices=_flatten(pos),
        normals=_flatten(normals),
        indices=indices,
        length_samples=layout.n,
        width_samples=layout.m,
        road_length=layout.road_length,
        lane_width=layout.lane_width,
        layout=layout,
    )
    logger.info(f"Road surface mesh: {mesh.vertex_count} verts, "
                f"{mesh.triangle_count} faces ({normal_mode} normals)")
    return mesh
