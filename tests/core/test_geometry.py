from __future__ import annotations

import numpy as np
import pytest

from engine.core.geometry import Geometry


def test_from_lines_normalizes_2d_and_offsets() -> None:
    xy = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]], dtype=np.float32)
    g = Geometry.from_lines([xy])
    assert g.coords.shape == (3, 3)
    assert g.offsets.tolist() == [0, 3]
    assert np.allclose(g.coords[:, 2], 0.0)


def test_empty_geometry() -> None:
    g = Geometry.from_lines([])
    assert g.is_empty
    assert len(g) == 0
    assert g.offsets.tolist() == [0]


def test_constructor_invalid_inputs_raise() -> None:
    with pytest.raises(ValueError):
        Geometry(np.zeros((2, 2), dtype=np.float32), np.array([0, 2]))
    with pytest.raises(ValueError):
        Geometry(np.zeros((2, 3), dtype=np.float32), np.array([0, 1]))
    with pytest.raises(ValueError):
        Geometry.from_lines([np.zeros(4)])


def test_as_arrays_views_are_readonly(geom_two_lines: Geometry) -> None:
    coords, offsets = geom_two_lines.as_arrays()
    assert not coords.flags.writeable
    assert not offsets.flags.writeable
    c2, _ = geom_two_lines.as_arrays(copy=True)
    assert c2.flags.writeable


def test_scale_is_pure(geom_two_lines: Geometry) -> None:
    before = geom_two_lines.coords.copy()
    scaled = geom_two_lines.scale(2.0)
    np.testing.assert_allclose(scaled.coords, before * 2.0)
    np.testing.assert_array_equal(geom_two_lines.coords, before)
