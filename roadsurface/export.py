"""Write a road surface :class:`Mesh` to GLB, PLY, OBJ or STL via trimesh."""

import logging
import pathlib

import numpy as np
import trimesh
from trimesh.visual.material import PBRMaterial

from .errors import ConfigurationError
from .models import Mesh

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("glb", "ply", "obj", "stl")

MAT_ASPHALT = PBRMaterial(
    baseColorFactor=[0.25, 0.25, 0.27, 1.0],  # dark asphalt
    metallicFactor=0.0,
    roughnessFactor=0.95,
    name="asphalt",
)


def to_trimesh(mesh: Mesh, centered: bool = True) -> trimesh.Trimesh:
    """Convert to a trimesh, shifted by the placement offset when ``centered``.

    Vertex normals are passed through as computed by the triangulator;
    ``process=False`` keeps vertex order so indices stay valid.
    """
    verts = mesh.positions.astype(np.float64)
    if centered:
        verts = verts + np.asarray(mesh.placement_offset, dtype=np.float64)

    tm = trimesh.Trimesh(
        vertices=verts,
        faces=mesh.faces.astype(np.int64),
        vertex_normals=mesh.normals.reshape(-1, 3).astype(np.float64),
        process=False,
    )
    return tm


def export_mesh(mesh: Mesh, output_path, centered: bool = True) -> pathlib.Path:
    """Export ``mesh``; the file type comes from the output suffix."""
    output_path = pathlib.Path(output_path)
    file_type = output_path.suffix.lower().lstrip(".")
    if file_type not in SUPPORTED_FORMATS:
        raise ConfigurationError(
            f"Unsupported output format {output_path.suffix!r}; "
            f"use one of {', '.join('.' + f for f in SUPPORTED_FORMATS)}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    tm = to_trimesh(mesh, centered=centered)

    if file_type == "glb":
        tm.visual = trimesh.visual.TextureVisuals(material=MAT_ASPHALT)
        scene = trimesh.Scene()
        scene.add_geometry(tm, node_name="road_surface")
        scene.export(str(output_path), file_type=file_type)
    else:
        tm.export(str(output_path), file_type=file_type)

    size_mb = output_path.stat().st_size / 1024 / 1024
    logger.info(f"Wrote {output_path.name}: {mesh.vertex_count} verts, "
                f"{mesh.triangle_count} faces ({size_mb:.2f} MB)")
    return output_path
