"""
ポリライン集合 `Geometry`（デバッグ補助線用）。

データモデル（不変条件）:
- `coords: float32 ndarray (N, 3)`: 全頂点を 1 本の連続メモリで保持（行は XYZ）。
- `offsets: int32 ndarray (M+1,)`: 各ポリラインの開始 index（末尾は必ず N）。
- i 本目の線分配列は `coords[offsets[i] : offsets[i+1]]` で取り出せる。
- dtype/形状は常に上記に正規化される（入力が 2D の場合は Z を 0 で補う）。

リボン本体は三角形メッシュ（`engine.core.mesh.Mesh`）で表すが、ガイド球の緯線経線や
制御カーブの折れ線は線描画で足りるため、この軽量表現を使う。
`engine.render.line_mesh` がこの形を primitive restart 付きの LINE_STRIP として転送する。

直感図（複数線の格納）:

    # 2 本のポリライン（線0は3点、線1は2点）
    # coords (N=5): [[0,0,0], [1,0,0], [1,1,0], [2,2,0], [3,2,0]]
    # offsets (M+1=3): [0, 3, 5]
    #   線0 = coords[0:3], 線1 = coords[3:5]

補足:
- 空ジオメトリは `coords.shape==(0,3)`, `offsets==[0]`（線本数 M=0）。
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

NumberLike = float | int
LineLike = np.ndarray | Sequence[NumberLike] | Sequence[Sequence[NumberLike]]


def _normalize_geometry_input(
    coords: np.ndarray,
    offsets: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """`Geometry` 生成時の内部正規化ヘルパ。"""

    coords_arr = np.ascontiguousarray(coords, dtype=np.float32)
    if coords_arr.ndim != 2 or coords_arr.shape[1] != 3:
        raise ValueError("coords は形状 (N, 3) の配列である必要があります。")

    offsets_arr = np.ascontiguousarray(offsets, dtype=np.int32)
    if offsets_arr.ndim != 1:
        raise ValueError("offsets は 1 次元配列である必要があります。")
    if offsets_arr.size == 0:
        raise ValueError("offsets は少なくとも1要素を含む必要があります。")
    if offsets_arr[0] != 0:
        raise ValueError("offsets[0] は常に 0 である必要があります。")
    if offsets_arr[-1] != coords_arr.shape[0]:
        raise ValueError("offsets[-1] は coords の行数と一致する必要があります。")
    if np.any(np.diff(offsets_arr) < 0):
        raise ValueError("offsets は単調非減少である必要があります。")

    return coords_arr, offsets_arr


class Geometry:
    """統一ポリライン構造。

    フィールド:
    - `coords (N,3) float32`: すべての点列を連結した配列。
    - `offsets (M+1,) int32`: 各ポリラインの開始 index（末尾は N）。

    変換はインスタンスを複製する純関数（元は不変）。
    """

    __slots__ = ("coords", "offsets")

    coords: np.ndarray
    offsets: np.ndarray

    def __init__(self, coords: np.ndarray, offsets: np.ndarray) -> None:
        norm_coords, norm_offsets = _normalize_geometry_input(coords, offsets)
        self.coords = norm_coords
        self.offsets = norm_offsets

    # ── ファクトリ ───────────────────
    @classmethod
    def from_lines(cls, lines: Iterable[LineLike]) -> "Geometry":
        """線分集合を統一表現に正規化して `Geometry` を生成する。

        Parameters
        ----------
        lines : Iterable[LineLike]
            各要素は座標列。形状 `(K, 2)` は `Z=0` を補完、`(K, 3)` はそのまま、
            `(3K,)` の 1 次元ベクトルは `(-1, 3)` に整形する。

        Raises
        ------
        ValueError
            形状がいずれにも適合しない場合、または 1D ベクトル長が 3 の倍数でない場合。
        """
        np_lines: list[np.ndarray] = []
        for line in lines:
            arr = np.asarray(line, dtype=np.float32)
            if arr.ndim == 1:
                if arr.size % 3 != 0:
                    raise ValueError(
                        "1次元入力の長さは3の倍数である必要があります（(x, y, z) の並び）"
                    )
                arr = arr.reshape(-1, 3)
            elif arr.ndim != 2:
                raise ValueError(f"座標配列の形状が不正です: {arr.shape}")
            elif arr.shape[1] == 2:
                zeros = np.zeros((arr.shape[0], 1), dtype=np.float32)
                arr = np.hstack([arr, zeros])
            elif arr.shape[1] != 3:
                raise ValueError(f"座標配列の形状が不正です: {arr.shape}")
            np_lines.append(arr)

        if not np_lines:
            coords = np.empty((0, 3), dtype=np.float32)
            offsets = np.array([0], dtype=np.int32)
            return cls(coords, offsets)

        offsets = np.zeros(len(np_lines) + 1, dtype=np.int32)
        offsets[1:] = np.cumsum([arr.shape[0] for arr in np_lines])
        coords = np.concatenate(np_lines, axis=0)
        return cls(coords, offsets)

    # ── 基本操作（すべて純粋） ────────
    def as_arrays(self, *, copy: bool = False) -> tuple[np.ndarray, np.ndarray]:
        """内部配列を返す。`copy=False` は読み取り専用ビュー。"""
        if copy:
            return self.coords.copy(), self.offsets.copy()
        coords_view = self.coords.view()
        offsets_view = self.offsets.view()
        coords_view.setflags(write=False)
        offsets_view.setflags(write=False)
        return coords_view, offsets_view

    @property
    def is_empty(self) -> bool:
        return self.coords.size == 0

    def scale(self, factor: float) -> "Geometry":
        """原点中心の一様スケール（純関数）。"""
        return Geometry(self.coords * np.float32(factor), self.offsets.copy())

    def __len__(self) -> int:
        """ポリライン本数（`M`）を返す。"""
        return int(self.offsets.shape[0] - 1)

    @property
    def n_vertices(self) -> int:
        return int(self.coords.shape[0])

    @property
    def n_lines(self) -> int:
        return len(self)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"Geometry(N={self.n_vertices}, M={self.n_lines})"
