"""
どこで: `engine.render` の高レベル描画。
何を: リボンメッシュを材質グループごとに（カリング面を切り替えて）描き、続けて補助線を描く `SceneRenderer`。
なぜ: 毎フレームの uniform 設定/描画/リソース寿命を一箇所に集約し、ウィンドウ側を単純化するため。
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np

from engine.core.camera import PerspectiveCamera, to_gl
from engine.core.mesh import Mesh
from engine.core.viewport import Viewport

from .types import AmbientLight, DirectionalLight, HelperLines, Material

_IDENTITY = np.eye(4, dtype=np.float64)


class SceneRenderer:
    """リボン（三角形メッシュ）と補助線の描画を管理。

    引数:
        ctx: ModernGL コンテキスト
        mesh: 描画するメッシュ（グループの `material_index` で `materials` を引く）
        materials: 材質列
        ambient: 環境光
        lights: 平行光（先頭 `MAX_LIGHTS` 個まで）
        helpers: 補助線（`visible` のものだけ描く）
    """

    def __init__(
        self,
        ctx: Any,
        mesh: Mesh,
        materials: Sequence[Material],
        ambient: AmbientLight,
        lights: Sequence[DirectionalLight],
        helpers: Sequence[HelperLines] = (),
    ) -> None:
        import moderngl

        from .line_mesh import LineMesh  # local import
        from .mesh_buffer import MeshBuffer  # local import
        from .shader import MAX_LIGHTS, Shader  # local import
        from .texture import load_slot, white_texture  # local import

        self.ctx = ctx
        self._logger = logging.getLogger(__name__)
        self.materials = list(materials)
        self.ambient = ambient
        self.lights = list(lights)[:MAX_LIGHTS]
        if len(lights) > MAX_LIGHTS:
            self._logger.warning("only %d directional lights are used (got %d)", MAX_LIGHTS, len(lights))
        self.helpers = list(helpers)

        for group in mesh.groups:
            if not 0 <= group.material_index < len(self.materials):
                raise ValueError(f"group refers to missing material {group.material_index}")

        self.mesh_program = Shader.create_standard_program(ctx)
        self.line_program = Shader.create_line_program(ctx)
        self.mesh_buffer = MeshBuffer(ctx, self.mesh_program, mesh)
        self._line_meshes: list[Any] = []
        for helper in self.helpers:
            line_mesh = LineMesh(ctx, self.line_program)
            line_mesh.upload_geometry(helper.geometry)
            self._line_meshes.append(line_mesh)

        self._white = white_texture(ctx)
        for material in self.materials:
            if material.map is not None and material.map.texture is None:
                load_slot(ctx, material.map)

        self._write_lights(MAX_LIGHTS)
        ctx.enable(moderngl.DEPTH_TEST)
        ctx.front_face = "ccw"

    # ------------------------------------------------------------------ #
    # uniforms                                                            #
    # ------------------------------------------------------------------ #
    def _write_lights(self, max_lights: int) -> None:
        from .shader import set_uniform

        directions = np.zeros((max_lights, 3), dtype=np.float32)
        radiances = np.zeros((max_lights, 3), dtype=np.float32)
        for i, light in enumerate(self.lights):
            directions[i] = light.direction_to_light
            radiances[i] = light.radiance
        prog = self.mesh_program
        set_uniform(prog, "ambient_radiance", tuple(float(c) for c in self.ambient.radiance))
        set_uniform(prog, "light_count", len(self.lights))
        set_uniform(prog, "light_direction", directions.tobytes())
        set_uniform(prog, "light_radiance", radiances.tobytes())
        set_uniform(prog, "model", to_gl(_IDENTITY))

    def _apply_material(self, material: Material) -> None:
        import moderngl

        from .shader import set_uniform

        prog = self.mesh_program
        slot = material.map
        texture = slot.texture if slot is not None and slot.texture is not None else self._white
        texture.use(location=0)
        set_uniform(prog, "map", 0)
        if slot is not None:
            set_uniform(prog, "uv_repeat", (float(slot.repeat[0]), float(slot.repeat[1])))
            set_uniform(prog, "uv_offset", (float(slot.offset[0]), float(slot.offset[1])))
        else:
            set_uniform(prog, "uv_repeat", (1.0, 1.0))
            set_uniform(prog, "uv_offset", (0.0, 0.0))
        set_uniform(prog, "base_color", tuple(float(c) for c in material.color))
        set_uniform(prog, "alpha_test", float(material.alpha_test))
        set_uniform(prog, "roughness", float(material.roughness))
        set_uniform(prog, "metalness", float(material.metalness))
        set_uniform(prog, "flat_shading", 1 if material.flat_shading else 0)

        cull = material.cull_face
        if cull is None:
            self.ctx.disable(moderngl.CULL_FACE)
        else:
            self.ctx.enable(moderngl.CULL_FACE)
            self.ctx.cull_face = cull

    # ------------------------------------------------------------------ #
    # Public drawing API                                                 #
    # ------------------------------------------------------------------ #
    def draw(self, camera: PerspectiveCamera, viewport: Viewport) -> None:
        """カメラと描画面からフレームを描く（背景クリアはウィンドウ側）。"""
        import moderngl

        from .shader import set_uniform

        self.ctx.viewport = (0, 0, *viewport.surface_size)
        projection = to_gl(camera.projection_matrix)
        view = to_gl(camera.view_matrix)

        prog = self.mesh_program
        set_uniform(prog, "projection", projection)
        set_uniform(prog, "view", view)
        set_uniform(prog, "camera_position", tuple(float(c) for c in camera.position))
        for group in self.mesh_buffer.groups:
            self._apply_material(self.materials[group.material_index])
            self.mesh_buffer.draw_group(group)

        self.ctx.disable(moderngl.CULL_FACE)
        set_uniform(self.line_program, "projection", projection)
        set_uniform(self.line_program, "view", view)
        for helper, line_mesh in zip(self.helpers, self._line_meshes):
            if not helper.visible:
                continue
            set_uniform(self.line_program, "color", tuple(float(c) for c in helper.color))
            line_mesh.draw()

    def release(self) -> None:
        """GPU リソースを解放。"""
        self.mesh_buffer.release()
        for line_mesh in self._line_meshes:
            line_mesh.release()
        self._line_meshes.clear()
        self._white.release()
        for material in self.materials:
            if material.map is not None and material.map.texture is not None:
                material.map.texture.release()
                material.map.texture = None
        self.mesh_program.release()
        self.line_program.release()
        self._logger.debug("renderer released")


__all__ = ["SceneRenderer"]
