from __future__ import annotations

import numpy as np
import pytest

from api.animation import RibbonAnimator, lerp
from engine.core.camera import PerspectiveCamera
from engine.core.orbit_controls import OrbitControls
from engine.io.pointer import PointerState
from engine.render.types import TextureSlot


def _animator(pointer: PointerState | None = None):
    camera = PerspectiveCamera()
    controls = OrbitControls(camera)
    front = TextureSlot(offset=[0.5, 0.0], repeat=[1.0, 1.0])
    back = TextureSlot(offset=[0.5, 0.0], repeat=[-1.0, 1.0])
    anim = RibbonAnimator(camera, controls, pointer or PointerState(), front, back)
    return anim, camera, front, back


def test_lerp() -> None:
    assert lerp(0.0, 10.0, 0.1) == pytest.approx(1.0)
    assert lerp(3.0, 3.0, 0.5) == 3.0


def test_texture_offsets_scroll_in_opposite_directions() -> None:
    anim, _, front, back = _animator()
    for _ in range(10):
        anim.tick(1.0)
    assert anim.elapsed == pytest.approx(10.0)
    assert front.offset[0] == pytest.approx(0.5)
    assert back.offset[0] == pytest.approx(-0.5)
    # y と repeat は触らない
    assert front.offset[1] == 0.0
    assert back.repeat == [-1.0, 1.0]


def test_camera_eases_toward_pointer_and_keeps_z() -> None:
    pointer = PointerState(0.4, -0.4)
    anim, camera, _, _ = _animator(pointer)
    anim.tick(1 / 60)
    assert camera.position[0] == pytest.approx(0.02)
    assert camera.position[1] == pytest.approx(-0.02)
    for _ in range(300):
        anim.tick(1 / 60)
        assert camera.position[2] == 2.0
    np.testing.assert_allclose(camera.position[:2], [0.2, -0.2], atol=1e-9)


def test_camera_returns_to_center_when_pointer_resets() -> None:
    pointer = PointerState(0.4, -0.4)
    anim, camera, _, _ = _animator(pointer)
    for _ in range(100):
        anim.tick(1 / 60)
    pointer.reset()
    for _ in range(300):
        anim.tick(1 / 60)
    np.testing.assert_allclose(camera.position, [0.0, 0.0, 2.0], atol=1e-9)


def test_camera_keeps_looking_at_origin() -> None:
    anim, camera, _, _ = _animator(PointerState(1.0, 1.0))
    anim.tick(1 / 60)
    np.testing.assert_array_equal(camera.target, [0.0, 0.0, 0.0])


def test_missing_textures_are_tolerated() -> None:
    camera = PerspectiveCamera()
    anim = RibbonAnimator(camera, OrbitControls(camera), PointerState(), None, None)
    anim.tick(0.5)
    assert anim.elapsed == pytest.approx(0.5)


def test_invalid_scroll_period() -> None:
    camera = PerspectiveCamera()
    with pytest.raises(ValueError):
        RibbonAnimator(camera, OrbitControls(camera), PointerState(), None, None, scroll_period=0.0)
