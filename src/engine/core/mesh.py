"""
どこで: `engine.core.mesh`。
何を: 三角形メッシュ `Mesh`（位置/UV/インデックス/描画グループ）と格子平面 `plane_geometry`。
なぜ: リボンを「平面格子の頂点位置を差し替えたもの」として表し、UV と面の並びを平面から受け継ぐため。

格子の並び（width_segments=3, height_segments=1 の例）:

    行0 (v=1):  0 ─ 1 ─ 2 ─ 3
                │ ╲ │ ╲ │ ╲ │
    行1 (v=0):  4 ─ 5 ─ 6 ─ 7

- 頂点は行優先（上の行から）。列 ix の UV は `(ix/W, 1 - iy/H)`。
- 各セルは `(a, b, d)`, `(b, c, d)` の 2 三角形（a=左上, b=左下, c=右下, d=右上）。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class DrawGroup:
    """インデックス範囲 `[start, start+count)` を `material_index` で描く指定。"""

    start: int
    count: int
    material_index: int

    @property
    def stop(self) -> int:
        return self.start + self.count


@dataclass
class Mesh:
    """CPU 側の三角形メッシュ。

    - `positions (V,3) float32`
    - `uvs (V,2) float32`
    - 法線は保持せず `vertex_normals()` で位置から求める
    - `indices (I,) uint32`（3 の倍数）
    - `groups`: 描画グループ（空なら全体を material 0 で描く）
    """

    positions: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray
    groups: list[DrawGroup] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.positions = np.ascontiguousarray(self.positions, dtype=np.float32)
        self.uvs = np.ascontiguousarray(self.uvs, dtype=np.float32)
        self.indices = np.ascontiguousarray(self.indices, dtype=np.uint32)
        if self.positions.ndim != 2 or self.positions.shape[1] != 3:
            raise ValueError(f"positions must have shape (V, 3), got {self.positions.shape}")
        if self.uvs.shape != (self.positions.shape[0], 2):
            raise ValueError(
                f"uvs must have shape ({self.positions.shape[0]}, 2), got {self.uvs.shape}"
            )
        if self.indices.ndim != 1 or self.indices.size % 3 != 0:
            raise ValueError("indices must be a flat array with a multiple of 3 entries")
        if self.indices.size and int(self.indices.max()) >= self.positions.shape[0]:
            raise ValueError("indices reference a vertex outside positions")

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    @property
    def triangle_count(self) -> int:
        return self.index_count // 3

    def set_positions(self, points: np.ndarray) -> None:
        """頂点位置を差し替える（頂点数は一致している必要がある）。"""
        pts = np.asarray(points, dtype=np.float32)
        if pts.shape != self.positions.shape:
            raise ValueError(
                f"position count mismatch: mesh has {self.positions.shape}, got {pts.shape}"
            )
        self.positions = np.ascontiguousarray(pts)

    def add_group(self, start: int, count: int, material_index: int = 0) -> DrawGroup:
        """描画グループを追加して返す。範囲はインデックス配列内に収まる必要がある。"""
        s, c = int(start), int(count)
        if s < 0 or c < 0 or s + c > self.index_count:
            raise ValueError(
                f"group [{s}, {s + c}) is outside the index range [0, {self.index_count})"
            )
        group = DrawGroup(start=s, count=c, material_index=int(material_index))
        self.groups.append(group)
        return group

    def vertex_normals(self) -> np.ndarray:
        """面積重み付きの頂点法線 `(V,3) float32`（スムーズシェーディング用）。

        各三角形の `cross(b - a, c - a)` を 3 頂点へ加算して正規化する。
        どの三角形にも属さない頂点、打ち消し合った頂点は +Z。
        """
        acc = np.zeros((self.vertex_count, 3), dtype=np.float64)
        if self.index_count:
            tri = self.indices.reshape(-1, 3).astype(np.int64)
            p = self.positions.astype(np.float64)
            face = np.cross(p[tri[:, 1]] - p[tri[:, 0]], p[tri[:, 2]] - p[tri[:, 0]])
            for k in range(3):
                np.add.at(acc, tri[:, k], face)
        length = np.linalg.norm(acc, axis=1)
        degenerate = length <= 1e-12
        acc[degenerate] = (0.0, 0.0, 1.0)
        length[degenerate] = 1.0
        return np.ascontiguousarray(acc / length[:, None], dtype=np.float32)

    def interleaved(self) -> np.ndarray:
        """`(V, 8)` の `x y z nx ny nz u v` 連結配列（GPU 転送用）。"""
        return np.ascontiguousarray(
            np.hstack([self.positions, self.vertex_normals(), self.uvs]), dtype=np.float32
        )


def plane_geometry(
    width: float = 1.0,
    height: float = 1.0,
    width_segments: int = 1,
    height_segments: int = 1,
) -> Mesh:
    """XY 平面上の格子メッシュを生成する（中心原点、法線 +Z 向き）。"""
    grid_x = int(width_segments)
    grid_y = int(height_segments)
    if grid_x < 1 or grid_y < 1:
        raise ValueError("segments must be >= 1")
    grid_x1 = grid_x + 1
    grid_y1 = grid_y + 1

    ix = np.arange(grid_x1, dtype=np.float64)
    iy = np.arange(grid_y1, dtype=np.float64)
    xs = ix * (width / grid_x) - width / 2.0
    ys = -(iy * (height / grid_y) - height / 2.0)
    gx, gy = np.meshgrid(xs, ys)  # (grid_y1, grid_x1)
    positions = np.stack([gx.ravel(), gy.ravel(), np.zeros(gx.size)], axis=1)

    uu, vv = np.meshgrid(ix / grid_x, 1.0 - iy / grid_y)
    uvs = np.stack([uu.ravel(), vv.ravel()], axis=1)

    cx, cy = np.meshgrid(np.arange(grid_x), np.arange(grid_y))
    cx = cx.ravel()
    cy = cy.ravel()
    a = cx + grid_x1 * cy
    b = cx + grid_x1 * (cy + 1)
    c = (cx + 1) + grid_x1 * (cy + 1)
    d = (cx + 1) + grid_x1 * cy
    indices = np.stack([a, b, d, b, c, d], axis=1).ravel()

    return Mesh(positions=positions, uvs=uvs, indices=indices)


__all__ = ["DrawGroup", "Mesh", "plane_geometry"]
