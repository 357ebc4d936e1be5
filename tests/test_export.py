import pytest
import trimesh
from numpy.testing import assert_allclose

from roadsurface import GeometryConfig, generate
from roadsurface.errors import ConfigurationError
from roadsurface.export import export_mesh, to_trimesh
from roadsurface.tracks import demo_tracks


@pytest.fixture
def mesh():
    left, right = demo_tracks()
    return generate(GeometryConfig(), left, right)


def test_to_trimesh_centered(mesh):
    tm = to_trimesh(mesh)
    assert len(tm.vertices) == mesh.vertex_count
    assert len(tm.faces) == mesh.triangle_count
    lo, hi = tm.bounds
    assert_allclose([lo[0], hi[0]], [-mesh.road_length / 2, mesh.road_length / 2], atol=1e-6)
    assert_allclose([lo[2], hi[2]], [-mesh.lane_width / 2, mesh.lane_width / 2], atol=1e-6)


def test_to_trimesh_faces_point_up(mesh):
    tm = to_trimesh(mesh, centered=False)
    assert (tm.face_normals[:, 1] > 0).all()
    assert_allclose(tm.vertices, mesh.positions, atol=1e-6)


@pytest.mark.parametrize("suffix", [".glb", ".ply", ".obj", ".stl"])
def test_export_formats(tmp_path, mesh, suffix):
    path = export_mesh(mesh, tmp_path / "out" / f"road{suffix}")
    assert path.exists()
    assert path.stat().st_size > 0


def test_ply_round_trip_keeps_counts(tmp_path, mesh):
    path = export_mesh(mesh, tmp_path / "road.ply")
    loaded = trimesh.load(str(path), process=False)
    assert len(loaded.vertices) == mesh.vertex_count
    assert len(loaded.faces) == mesh.triangle_count


def test_unsupported_format(tmp_path, mesh):
    with pytest.raises(ConfigurationError):
        export_mesh(mesh, tmp_path / "road.fbx")
