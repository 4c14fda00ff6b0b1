from __future__ import annotations

import numpy as np
import pytest

from engine.render.types import (
    AmbientLight,
    DirectionalLight,
    HelperLines,
    Material,
    TextureSlot,
)


def test_texture_slot_transform_uv_mirrors_back_side() -> None:
    front = TextureSlot(offset=[0.5, 0.0], repeat=[1.0, 1.0])
    back = TextureSlot(offset=[0.5, 0.0], repeat=[-1.0, 1.0])
    uv = np.array([[0.0, 0.0], [0.25, 1.0], [1.0, 0.5]])
    np.testing.assert_allclose(front.transform_uv(uv), [[0.5, 0.0], [0.75, 1.0], [1.5, 0.5]])
    np.testing.assert_allclose(back.transform_uv(uv), [[0.5, 0.0], [0.25, 1.0], [-0.5, 0.5]])


def test_texture_slot_set_offset_x_keeps_y() -> None:
    slot = TextureSlot(offset=[0.5, 0.3])
    slot.set_offset_x(-1.25)
    assert slot.offset == [-1.25, 0.3]


def test_texture_slot_defaults_are_independent() -> None:
    a, b = TextureSlot(), TextureSlot()
    a.set_offset_x(1.0)
    assert b.offset == [0.0, 0.0]
    assert a.flip_y is False and a.wrap_repeat


@pytest.mark.parametrize("side, cull", [("front", "back"), ("back", "front"), ("double", None)])
def test_material_cull_face(side: str, cull: str | None) -> None:
    assert Material(side=side).cull_face == cull  # type: ignore[arg-type]


def test_material_validation() -> None:
    with pytest.raises(ValueError):
        Material(side="both")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        Material(roughness=1.5)
    with pytest.raises(ValueError):
        Material(metalness=-0.1)


def test_light_radiance() -> None:
    assert AmbientLight((1.0, 0.5, 0.0), 0.5).radiance == (0.5, 0.25, 0.0)
    assert DirectionalLight(intensity=0.2).radiance == pytest.approx((0.2, 0.2, 0.2))


def test_directional_light_direction() -> None:
    d = DirectionalLight(position=(0.0, 0.0, -2.0))
    np.testing.assert_allclose(d.direction_to_light, [0.0, 0.0, -1.0])
    d = DirectionalLight(position=(1.0, 1.0, 0.0), target=(1.0, 1.0, 0.0))
    np.testing.assert_allclose(d.direction_to_light, [0.0, 1.0, 0.0])


def test_helper_lines_toggle(geom_two_lines) -> None:
    h = HelperLines(geom_two_lines, name="curve")
    assert h.visible is False
    assert h.toggle() is True
    assert h.toggle() is False
