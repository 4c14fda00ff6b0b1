from __future__ import annotations

import numpy as np

from engine.core.geometry import Geometry
from engine.render.line_mesh import PRIMITIVE_RESTART_INDEX, geometry_to_vertices_indices


def test_restart_after_each_line(geom_two_lines) -> None:
    verts, inds = geometry_to_vertices_indices(geom_two_lines)
    r = PRIMITIVE_RESTART_INDEX
    assert verts.dtype == np.float32 and verts.shape == (5, 3)
    assert inds.dtype == np.uint32
    assert inds.tolist() == [0, 1, r, 2, 3, 4, r]


def test_custom_restart_index(geom_two_lines) -> None:
    _, inds = geometry_to_vertices_indices(geom_two_lines, primitive_restart_index=99)
    assert inds.tolist() == [0, 1, 99, 2, 3, 4, 99]


def test_empty_geometry() -> None:
    verts, inds = geometry_to_vertices_indices(Geometry.from_lines([]))
    assert verts.shape == (0, 3)
    assert inds.size == 0
