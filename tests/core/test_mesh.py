from __future__ import annotations

import numpy as np
import pytest

from engine.core.mesh import DrawGroup, Mesh, plane_geometry


def test_plane_geometry_layout_3x1() -> None:
    m = plane_geometry(1.0, 1.0, 3, 1)
    assert m.vertex_count == 8
    assert m.triangle_count == 6
    # 上の行（y=+0.5）が先、左から右
    np.testing.assert_allclose(m.positions[0], [-0.5, 0.5, 0.0])
    np.testing.assert_allclose(m.positions[3], [0.5, 0.5, 0.0])
    np.testing.assert_allclose(m.positions[4], [-0.5, -0.5, 0.0])
    # UV: (ix/W, 1 - iy/H)
    np.testing.assert_allclose(m.uvs[0], [0.0, 1.0])
    np.testing.assert_allclose(m.uvs[3], [1.0, 1.0])
    np.testing.assert_allclose(m.uvs[5], [1.0 / 3.0, 0.0], rtol=1e-6)
    # 最初のセル: a=0, b=4, c=5, d=1
    assert m.indices[:6].tolist() == [0, 4, 1, 4, 5, 1]


def test_plane_geometry_faces_point_to_plus_z() -> None:
    m = plane_geometry(2.0, 1.0, 4, 2)
    tri = m.positions[m.indices.reshape(-1, 3)]
    normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    assert np.all(normals[:, 2] > 0.0)


def test_plane_geometry_rejects_zero_segments() -> None:
    with pytest.raises(ValueError):
        plane_geometry(1.0, 1.0, 0, 1)


def test_set_positions_requires_matching_count() -> None:
    m = plane_geometry(1.0, 1.0, 2, 1)
    new = np.arange(18, dtype=np.float64).reshape(6, 3)
    m.set_positions(new)
    assert m.positions.dtype == np.float32
    np.testing.assert_allclose(m.positions, new)
    with pytest.raises(ValueError):
        m.set_positions(np.zeros((5, 3)))


def test_add_group_range_checks() -> None:
    m = plane_geometry(1.0, 1.0, 2, 1)
    g = m.add_group(0, 6, 1)
    assert g == DrawGroup(0, 6, 1)
    assert g.stop == 6
    with pytest.raises(ValueError):
        m.add_group(6, 7, 0)
    with pytest.raises(ValueError):
        m.add_group(-1, 2, 0)


def test_mesh_validation() -> None:
    pos = np.zeros((3, 3))
    uv = np.zeros((3, 2))
    with pytest.raises(ValueError):
        Mesh(pos, uv, np.array([0, 1], dtype=np.uint32))
    with pytest.raises(ValueError):
        Mesh(pos, uv, np.array([0, 1, 3], dtype=np.uint32))
    with pytest.raises(ValueError):
        Mesh(pos, np.zeros((2, 2)), np.array([0, 1, 2], dtype=np.uint32))


def test_interleaved_layout() -> None:
    m = plane_geometry(1.0, 1.0, 1, 1)
    inter = m.interleaved()
    assert inter.shape == (4, 8)
    assert inter.dtype == np.float32
    np.testing.assert_allclose(inter[:, :3], m.positions)
    np.testing.assert_allclose(inter[:, 3:6], m.vertex_normals())
    np.testing.assert_allclose(inter[:, 6:], m.uvs)


def test_plane_vertex_normals_face_plus_z() -> None:
    normals = plane_geometry(2.0, 1.0, 4, 2).vertex_normals()
    assert normals.shape == (15, 3)
    np.testing.assert_allclose(normals, np.tile([0.0, 0.0, 1.0], (15, 1)), atol=1e-7)


def test_ribbon_vertex_normals_are_unit_and_radial(ribbon_small) -> None:
    from shapes.ribbon import build_ribbon_mesh

    vertices, n = ribbon_small
    normals = build_ribbon_mesh(vertices, n).vertex_normals()
    np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-5)
    # 帯は単位球に貼り付いているので、頂点法線はほぼ動径方向（符号は巻き方向次第）
    radial = np.abs(np.sum(normals * vertices.astype(np.float32), axis=1))
    assert np.median(radial) > 0.9
