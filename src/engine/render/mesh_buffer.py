"""
どこで: `engine.render` の低レベルメッシュ層。
何を: 三角形メッシュ（`engine.core.mesh.Mesh`）の VBO/IBO/VAO を保持し、描画グループ単位で描く `MeshBuffer`。
なぜ: 1 本のインデックスバッファを範囲指定で材質ごとに描き分けるため。
"""

from __future__ import annotations

import logging
from typing import Any

from engine.core.mesh import DrawGroup, Mesh

logger = logging.getLogger(__name__)


class MeshBuffer:
    """`Mesh` を GPU へ転送し、`DrawGroup` の範囲を描く。

    頂点レイアウトは `3f 3f 2f`（`in_position`, `in_normal`, `in_uv`）。
    """

    def __init__(self, ctx: Any, program: Any, mesh: Mesh) -> None:
        self.ctx = ctx
        self.program = program
        self.vbo = ctx.buffer(mesh.interleaved().tobytes())
        self.ibo = ctx.buffer(mesh.indices.tobytes())
        self.vao = ctx.vertex_array(
            program,
            [(self.vbo, "3f 3f 2f", "in_position", "in_normal", "in_uv")],
            index_buffer=self.ibo,
            index_element_size=4,
        )
        self.index_count = mesh.index_count
        self.groups: list[DrawGroup] = list(mesh.groups) or [DrawGroup(0, mesh.index_count, 0)]
        from common.settings import get as _get_settings

        level = logging.INFO if _get_settings().UPLOAD_DEBUG else logging.DEBUG
        logger.log(
            level,
            "mesh uploaded: vertices=%d indices=%d groups=%d",
            mesh.vertex_count,
            mesh.index_count,
            len(self.groups),
        )

    def draw_group(self, group: DrawGroup) -> None:
        """`group` のインデックス範囲を三角形として描く。"""
        import moderngl

        if group.count <= 0:
            return
        self.vao.render(moderngl.TRIANGLES, vertices=group.count, first=group.start)

    def release(self) -> None:
        self.vbo.release()
        self.ibo.release()
        self.vao.release()


__all__ = ["MeshBuffer"]
