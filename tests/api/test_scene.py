from __future__ import annotations

import numpy as np
import pytest

from api.scene import BACK, FRONT, build_scene


@pytest.fixture()
def scene():
    return build_scene({}, rng=np.random.default_rng(7), samples=40)


@pytest.mark.integration
def test_scene_geometry(scene) -> None:
    assert scene.control_points.shape == (7, 3)
    assert scene.ribbon_vertices.shape == (82, 3)
    assert scene.mesh.vertex_count == 82
    assert [g.material_index for g in scene.mesh.groups] == [FRONT, BACK]


def test_scene_camera_and_controls(scene) -> None:
    np.testing.assert_array_equal(scene.camera.position, [0.0, 0.0, 2.0])
    assert scene.camera.aspect == pytest.approx(1280 / 720)
    assert scene.controls.enable_damping
    assert scene.controls.damping_factor == pytest.approx(0.05)


def test_scene_lights(scene) -> None:
    assert scene.ambient.intensity == pytest.approx(0.5)
    assert scene.ambient.color == (1.0, 1.0, 1.0)
    key, fill = scene.lights
    assert key.intensity == pytest.approx(1.0)
    assert fill.intensity == pytest.approx(0.2)
    np.testing.assert_allclose(key.direction_to_light, [0.0, 0.0, 1.0])
    np.testing.assert_allclose(fill.direction_to_light, [0.0, 0.0, -1.0])


def test_scene_materials(scene) -> None:
    front, back = scene.front_material, scene.back_material
    assert front.map.repeat == [1.0, 1.0]
    assert back.map.repeat == [-1.0, 1.0]
    assert front.map.offset[0] == pytest.approx(0.5)
    assert back.map.offset[0] == pytest.approx(0.5)
    assert front.map.flip_y is False
    assert (front.roughness, front.metalness) == (0.65, 0.2)
    assert front.flat_shading and back.flat_shading
    # 半透明テクセルは捨てる（不透明のみ描く）
    assert front.alpha_test == back.alpha_test == 1.0
    # 表材質は前面を、裏材質は背面をカリングする
    assert front.cull_face == "front"
    assert back.cull_face == "back"


def test_scene_helpers_hidden_by_default(scene) -> None:
    assert set(scene.helpers) == {"sphere", "curve"}
    assert not scene.helpers["sphere"].visible
    assert not scene.helpers["curve"].visible
    assert scene.helpers["curve"].geometry.n_vertices == 51


def test_scene_helpers_can_be_enabled() -> None:
    s = build_scene(
        {"debug": {"show_sphere": True}}, rng=np.random.default_rng(1), samples=8, show_curve=True
    )
    assert s.helpers["sphere"].visible
    assert s.helpers["curve"].visible
    assert s.helpers["sphere"].toggle() is False


def test_scene_uses_config_values() -> None:
    cfg = {
        "ribbon": {"control_points": 5, "samples": 12},
        "camera": {"fov": 60.0},
        "lights": {"ambient": {"color": "#ff0000", "intensity": 0.25}, "directional": []},
        "materials": {"front": {"texture": "missing.png", "repeat": [2, 1]}},
    }
    s = build_scene(cfg, rng=np.random.default_rng(3))
    assert s.control_points.shape == (5, 3)
    assert s.samples == 12
    assert s.camera.fov == 60.0
    assert s.ambient.radiance == pytest.approx((0.25, 0.0, 0.0))
    assert s.lights == []
    assert s.front_material.map.repeat == [2.0, 1.0]
    assert s.front_material.map.source is not None
    assert s.front_material.map.source.name == "missing.png"


def test_scene_same_seed_same_shape() -> None:
    a = build_scene({}, rng=np.random.default_rng(11), samples=16)
    b = build_scene({}, rng=np.random.default_rng(11), samples=16)
    np.testing.assert_array_equal(a.ribbon_vertices, b.ribbon_vertices)


def test_scene_rejects_bad_samples() -> None:
    with pytest.raises(ValueError):
        build_scene({}, rng=np.random.default_rng(0), samples=0)


def test_scene_material_shading_from_config() -> None:
    cfg = {"materials": {"back": {"flat_shading": False, "alpha_test": 0.5}}}
    s = build_scene(cfg, rng=np.random.default_rng(4), samples=8)
    assert s.front_material.flat_shading is True
    assert s.back_material.flat_shading is False
    assert s.back_material.alpha_test == 0.5
