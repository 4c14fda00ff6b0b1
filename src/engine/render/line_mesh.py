"""
どこで: `engine.render` の低レベルメッシュ層。
何を: 補助線（ポリライン）用の VBO/IBO/VAO を確保・更新・解放する `LineMesh` と、
`Geometry` → 頂点/インデックス（primitive restart 区切り）変換。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from engine.core.geometry import Geometry

PRIMITIVE_RESTART_INDEX = 0xFFFFFFFF


def geometry_to_vertices_indices(
    geometry: Geometry, primitive_restart_index: int = PRIMITIVE_RESTART_INDEX
) -> tuple[np.ndarray, np.ndarray]:
    """`Geometry` を `(頂点 float32 (N,3), インデックス uint32)` に変換する。

    各ポリラインの終端直後に `primitive_restart_index` を挟むので、
    `LINE_STRIP` 1 回の描画で全ラインを引ける。
    """
    coords, offsets = geometry.as_arrays(copy=False)
    num_lines = len(offsets) - 1
    total_verts = len(coords)
    total_inds = total_verts + num_lines

    indices = np.empty(total_inds, dtype=np.uint32)
    # 再始動位置（各ライン終端の直後）: offsets[1:] + 行番号
    restart_pos = offsets[1:].astype(np.int64) + np.arange(num_lines, dtype=np.int64)
    mask = np.zeros(total_inds, dtype=bool)
    mask[restart_pos] = True
    indices[mask] = primitive_restart_index
    indices[~mask] = np.arange(total_verts, dtype=np.uint32)
    return np.ascontiguousarray(coords, dtype=np.float32), indices


class LineMesh:
    """補助線の GPU バッファ。容量不足なら再確保して VAO を張り直す。"""

    def __init__(
        self,
        ctx: Any,
        program: Any,
        initial_reserve: int = 256 * 1024,
        primitive_restart_index: int = PRIMITIVE_RESTART_INDEX,
    ):
        """
        ctx: ModernGL コンテキスト
        program: `in_vert` (vec3) を受けるシェーダプログラム
        initial_reserve: VBO/IBO の初期確保量（バイト）
        """
        self.ctx = ctx
        self.program = program
        self.initial_reserve = initial_reserve
        self.primitive_restart_index = primitive_restart_index

        self.vbo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=initial_reserve, dynamic=True)
        self.vao = self._build_vao()
        self.index_count: int = 0

    def _build_vao(self) -> Any:
        return self.ctx.simple_vertex_array(
            self.program, self.vbo, "in_vert", index_buffer=self.ibo, index_element_size=4
        )

    def _ensure_capacity(self, vbo_size: int, ibo_size: int) -> None:
        """データが大きくなったら GPU のバッファを再確保"""
        grown = False
        if vbo_size > self.vbo.size:
            self.vbo.release()
            self.vbo = self.ctx.buffer(reserve=max(vbo_size, self.initial_reserve), dynamic=True)
            grown = True
        if ibo_size > self.ibo.size:
            self.ibo.release()
            self.ibo = self.ctx.buffer(reserve=max(ibo_size, self.initial_reserve), dynamic=True)
            grown = True
        if grown:
            self.vao.release()
            self.vao = self._build_vao()

    def upload_geometry(self, geometry: Geometry) -> None:
        vertices, indices = geometry_to_vertices_indices(geometry, self.primitive_restart_index)
        self.upload(vertices, indices)

    def upload(self, vertices: np.ndarray, indices: np.ndarray) -> None:
        self._ensure_capacity(vertices.nbytes, indices.nbytes)
        self.vbo.orphan()
        self.vbo.write(vertices.tobytes())
        self.ibo.orphan()
        self.ibo.write(indices.tobytes())
        self.index_count = len(indices)

    def draw(self) -> None:
        """`LINE_STRIP` + primitive restart で全ラインを描く。"""
        import moderngl

        if self.index_count == 0:
            return
        self.ctx.primitive_restart = True  # type: ignore[attr-defined]
        self.ctx.primitive_restart_index = self.primitive_restart_index  # type: ignore[attr-defined]
        self.vao.render(moderngl.LINE_STRIP, vertices=self.index_count)

    def release(self) -> None:
        """GPU のメモリを解放する（終了時に使う）"""
        self.vbo.release()
        self.ibo.release()
        self.vao.release()


__all__ = ["PRIMITIVE_RESTART_INDEX", "LineMesh", "geometry_to_vertices_indices"]
