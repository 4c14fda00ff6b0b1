"""
どこで: `api.scene`（シーン組み立て、GL 非依存）。
何を: 設定辞書からリボン・カメラ・OrbitControls・光源・材質・補助線をまとめた `Scene` を作る `build_scene`。
なぜ: 描画前の状態をすべて CPU 上で確定させ、ウィンドウ無しで検証できるようにするため。

組み立て順:
1) 制御点（`rng`）→ 閉じた芯線カーブ
2) リボン頂点 → 2 グループ（表/裏）のメッシュ
3) カメラ（(0,0,2)）と OrbitControls、Viewport
4) 環境光 + 平行光 2 灯（原点へ向ける）
5) 材質 2 枚（テクスチャは読込元パスと UV 変換のみ。GPU 読込はレンダラ側）
6) 補助線（ガイド球/芯線、既定は非表示）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from common.types import Vec3
from engine.core.camera import PerspectiveCamera
from engine.core.curve import CatmullRomCurve
from engine.core.mesh import Mesh
from engine.core.orbit_controls import OrbitControls
from engine.core.viewport import Viewport
from engine.io.pointer import PointerState
from engine.render.types import (
    AmbientLight,
    DirectionalLight,
    HelperLines,
    Material,
    TextureSlot,
)
from shapes.guides import curve_polyline, guide_sphere
from shapes.ribbon import (
    DEFAULT_OFFSETS,
    build_curve,
    build_ribbon_mesh,
    build_ribbon_vertices,
    generate_control_points,
)
from util.color import normalize_color, to_rgb
from util.paths import resolve_asset_path
from util.utils import config_section

logger = logging.getLogger(__name__)

FRONT = 0
BACK = 1


@dataclass
class Scene:
    """描画に必要な CPU 側の状態一式。"""

    control_points: np.ndarray
    curve: CatmullRomCurve
    ribbon_vertices: np.ndarray
    mesh: Mesh
    camera: PerspectiveCamera
    controls: OrbitControls
    viewport: Viewport
    ambient: AmbientLight
    lights: list[DirectionalLight]
    materials: list[Material]
    helpers: dict[str, HelperLines] = field(default_factory=dict)
    pointer: PointerState = field(default_factory=PointerState)
    samples: int = 1000

    @property
    def front_material(self) -> Material:
        return self.materials[FRONT]

    @property
    def back_material(self) -> Material:
        return self.materials[BACK]


def _vec3(value: Any, default: Vec3) -> Vec3:
    if value is None:
        return default
    seq = tuple(float(v) for v in value)
    if len(seq) != 3:
        raise ValueError(f"expected 3 components, got {value!r}")
    return (seq[0], seq[1], seq[2])


def _vec2(value: Any, default: tuple[float, float]) -> list[float]:
    if value is None:
        return [default[0], default[1]]
    seq = [float(v) for v in value]
    if len(seq) != 2:
        raise ValueError(f"expected 2 components, got {value!r}")
    return seq


def _build_material(section: Mapping[str, Any], *, default_side: str, default_repeat: tuple[float, float], name: str) -> Material:
    slot = TextureSlot(
        source=resolve_asset_path(section.get("texture")),
        offset=_vec2(section.get("offset"), (0.5, 0.0)),
        repeat=_vec2(section.get("repeat"), default_repeat),
        wrap_repeat=True,
        flip_y=bool(section.get("flip_y", False)),
    )
    return Material(
        map=slot,
        color=normalize_color(section.get("color", "#ffffff")),
        side=str(section.get("side", default_side)),  # type: ignore[arg-type]
        roughness=float(section.get("roughness", 0.65)),
        metalness=float(section.get("metalness", 0.2)),
        alpha_test=float(section.get("alpha_test", 1.0)),
        flat_shading=bool(section.get("flat_shading", True)),
        name=name,
    )


def _build_lights(section: Mapping[str, Any]) -> tuple[AmbientLight, list[DirectionalLight]]:
    amb_cfg = section.get("ambient") or {}
    ambient = AmbientLight(
        color=to_rgb(amb_cfg.get("color", "#ffffff")),
        intensity=float(amb_cfg.get("intensity", 0.5)),
    )
    dir_cfgs: Sequence[Mapping[str, Any]] | None = section.get("directional")
    if dir_cfgs is None:
        dir_cfgs = (
            {"intensity": 1.0, "position": (0.0, 0.0, 2.0)},
            {"intensity": 0.2, "position": (0.0, 0.0, -2.0)},
        )
    lights = [
        DirectionalLight(
            color=to_rgb(d.get("color", "#ffffff")),
            intensity=float(d.get("intensity", 1.0)),
            position=_vec3(d.get("position"), (0.0, 1.0, 0.0)),
            target=_vec3(d.get("target"), (0.0, 0.0, 0.0)),
        )
        for d in dir_cfgs
    ]
    return ambient, lights


def build_scene(
    config: Mapping[str, Any] | None = None,
    *,
    rng: np.random.Generator | None = None,
    samples: int | None = None,
    window_size: tuple[int, int] = (1280, 720),
    show_sphere: bool | None = None,
    show_curve: bool | None = None,
) -> Scene:
    """設定からシーンを組み立てる（GL 呼び出しなし）。

    引数:
        config: `load_config()` 相当の辞書（None は全既定）。
        rng: 制御点の乱数源。None なら `default_rng()`（実行毎に異なる形状）。
        samples: リボンのサンプル数（None は `ribbon.samples`、既定 1000）。
        window_size: 初期ビューポート（カメラのアスペクトに使う）。
        show_sphere/show_curve: 補助線の初期表示（None は `debug.*`）。
    """
    cfg = config or {}
    ribbon_cfg = config_section(cfg, "ribbon")
    camera_cfg = config_section(cfg, "camera")
    controls_cfg = config_section(cfg, "controls")
    debug_cfg = config_section(cfg, "debug")
    materials_cfg = config_section(cfg, "materials")

    n = int(samples if samples is not None else ribbon_cfg.get("samples", 1000))
    if n <= 0:
        raise ValueError(f"samples must be > 0, got {n}")

    # ---- 芯線 ----------------------------------------------------------
    points = generate_control_points(
        int(ribbon_cfg.get("control_points", 7)),
        jitter=float(ribbon_cfg.get("jitter", 0.5)),
        radius=float(ribbon_cfg.get("radius", 1.0)),
        rng=rng,
    )
    curve = build_curve(
        points,
        tension=float(ribbon_cfg.get("tension", 0.1)),
        curve_type=str(ribbon_cfg.get("curve_type", "centripetal")),
    )

    # ---- リボン --------------------------------------------------------
    offsets = tuple(float(v) for v in ribbon_cfg.get("offsets", DEFAULT_OFFSETS))
    vertices = build_ribbon_vertices(curve, n, offsets)
    mesh = build_ribbon_mesh(vertices, n)
    logger.info(
        "ribbon built: control_points=%d samples=%d vertices=%d indices=%d",
        len(points),
        n,
        mesh.vertex_count,
        mesh.index_count,
    )

    # ---- カメラ/操作 ---------------------------------------------------
    width, height = int(window_size[0]), int(window_size[1])
    viewport = Viewport(width, height, 1.0)
    camera = PerspectiveCamera(
        fov=float(camera_cfg.get("fov", 75.0)),
        aspect=viewport.aspect,
        near=float(camera_cfg.get("near", 0.1)),
        far=float(camera_cfg.get("far", 100.0)),
        position=_vec3(camera_cfg.get("position"), (0.0, 0.0, 2.0)),
    )
    controls = OrbitControls(
        camera,
        enable_damping=bool(controls_cfg.get("enable_damping", True)),
        damping_factor=float(controls_cfg.get("damping_factor", 0.05)),
        rotate_speed=float(controls_cfg.get("rotate_speed", 1.0)),
        zoom_speed=float(controls_cfg.get("zoom_speed", 1.0)),
    )

    # ---- 光源/材質 -----------------------------------------------------
    ambient, lights = _build_lights(config_section(cfg, "lights"))
    front = _build_material(
        materials_cfg.get("front") or {}, default_side="back", default_repeat=(1.0, 1.0), name="front"
    )
    back = _build_material(
        materials_cfg.get("back") or {}, default_side="front", default_repeat=(-1.0, 1.0), name="back"
    )
    for mat in (front, back):
        logger.info("material %s texture: %s", mat.name, mat.map.source if mat.map else None)

    # ---- 補助線 --------------------------------------------------------
    sphere_visible = bool(debug_cfg.get("show_sphere", False)) if show_sphere is None else show_sphere
    curve_visible = bool(debug_cfg.get("show_curve", False)) if show_curve is None else show_curve
    helpers = {
        "sphere": HelperLines(
            geometry=guide_sphere(1.0, 32, 32),
            color=normalize_color(debug_cfg.get("sphere_color", "#00ff00")),
            visible=sphere_visible,
            name="sphere",
        ),
        "curve": HelperLines(
            geometry=curve_polyline(curve, int(debug_cfg.get("curve_divisions", 50))),
            color=normalize_color(debug_cfg.get("curve_color", "#ff0000")),
            visible=curve_visible,
            name="curve",
        ),
    }

    return Scene(
        control_points=points,
        curve=curve,
        ribbon_vertices=vertices,
        mesh=mesh,
        camera=camera,
        controls=controls,
        viewport=viewport,
        ambient=ambient,
        lights=lights,
        materials=[front, back],
        helpers=helpers,
        samples=n,
    )


__all__ = ["Scene", "build_scene", "FRONT", "BACK"]
