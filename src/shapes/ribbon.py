"""
どこで: `shapes.ribbon`。
何を: 球面上の制御点生成、閉じた芯線カーブ、従法線方向へのオフセットによるリボン頂点とメッシュの構築。
なぜ: 「球に巻き付く帯」を、芯線の Frenet フレームだけから決定的に組み立てるため。

構築手順:
1. `generate_control_points`: 赤道付近を一周する `count` 点（極角に ±0.5 の揺らぎ、半径 1）。
2. `build_curve`: 制御点を通る閉じた Catmull-Rom カーブ。
3. `build_ribbon_vertices`: 弧長一様な `N+1` サンプルと Frenet フレームから、
   オフセット毎（既定 -0.1, +0.1）に 1 本ずつの帯端を作る。
   オフセット量ベクトル `shift` は全サンプル・両帯で共有し、`shift = (shift + binormal) * d`
   と積み上げる（サンプル毎にリセットしない）。各頂点は単位球へ正規化する。
   最後に継ぎ目を閉じる: `v[0] = v[N]`, `v[N+1] = v[2N+1]`。
4. `build_ribbon_mesh`: `N` 分割 × 1 分割の格子平面の頂点を上記で置き換え、
   同じ三角形列を 2 回並べたインデックスを前半（表, material 0）/後半（裏, material 1）に分ける。
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numba import njit

from engine.core.curve import CatmullRomCurve
from engine.core.mesh import Mesh, plane_geometry

logger = logging.getLogger(__name__)

DEFAULT_OFFSETS: tuple[float, float] = (-0.1, 0.1)


def generate_control_points(
    count: int = 7,
    *,
    jitter: float = 0.5,
    radius: float = 1.0,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """球面上の制御点 `(count, 3)` を返す。

    i 番目の方位角は `i/count * 2π`、極角は `π/2 + (U - 0.5) * 2 * jitter`（U ∈ [0, 1)）。
    座標変換は y 軸を極軸とする `x = r sinφ sinθ, y = r cosφ, z = r sinφ cosθ`。
    """
    n = int(count)
    if n < 2:
        raise ValueError(f"count must be >= 2, got {count}")
    gen = rng if rng is not None else np.random.default_rng()
    theta = np.arange(n, dtype=np.float64) / n * 2.0 * np.pi
    phi = np.pi / 2.0 + (gen.random(n) - 0.5) * (2.0 * float(jitter))
    sin_phi = np.sin(phi)
    return np.stack(
        [radius * sin_phi * np.sin(theta), radius * np.cos(phi), radius * sin_phi * np.cos(theta)],
        axis=1,
    )


def build_curve(
    points: np.ndarray,
    *,
    tension: float = 0.1,
    curve_type: str = "centripetal",
) -> CatmullRomCurve:
    """制御点を通る閉じた芯線カーブを返す。"""
    return CatmullRomCurve(points, closed=True, curve_type=curve_type, tension=tension)


@njit(cache=True)
def _accumulate_offset_bands(
    points: np.ndarray, binormals: np.ndarray, offsets: np.ndarray
) -> np.ndarray:
    """帯端頂点 `(len(offsets) * len(points), 3)` を帯優先で返す（shift は全体で共有）。"""
    n1 = points.shape[0]
    out = np.empty((offsets.shape[0] * n1, 3), dtype=np.float64)
    shift = np.zeros(3, dtype=np.float64)
    k = 0
    for j in range(offsets.shape[0]):
        d = offsets[j]
        for i in range(n1):
            for c in range(3):
                shift[c] = (shift[c] + binormals[i, c]) * d
            x = points[i, 0] + shift[0]
            y = points[i, 1] + shift[1]
            z = points[i, 2] + shift[2]
            length = np.sqrt(x * x + y * y + z * z)
            if length == 0.0:
                length = 1.0
            out[k, 0] = x / length
            out[k, 1] = y / length
            out[k, 2] = z / length
            k += 1
    return out


def build_ribbon_vertices(
    curve: CatmullRomCurve,
    samples: int = 1000,
    offsets: Sequence[float] = DEFAULT_OFFSETS,
) -> np.ndarray:
    """リボン頂点 `(len(offsets) * (samples+1), 3)`（float64、単位球上）を返す。

    2 本の帯（既定）の場合、継ぎ目を `v[0] = v[N]`, `v[N+1] = v[2N+1]` で閉じる。
    """
    n = int(samples)
    if n <= 0:
        raise ValueError(f"samples must be > 0, got {samples}")
    offs = np.asarray(offsets, dtype=np.float64)
    if offs.ndim != 1 or offs.size == 0:
        raise ValueError("offsets must be a non-empty 1-D sequence")

    frames = curve.compute_frenet_frames(n, closed=True)
    spaced = curve.get_spaced_points(n)
    vertices = _accumulate_offset_bands(
        np.ascontiguousarray(spaced), np.ascontiguousarray(frames.binormals), offs
    )

    if offs.size >= 2:
        vertices[0] = vertices[n]
        vertices[n + 1] = vertices[2 * n + 1]
    logger.debug("ribbon vertices built: samples=%d bands=%d", n, offs.size)
    return vertices


def build_ribbon_mesh(vertices: np.ndarray, samples: int) -> Mesh:
    """リボン頂点から 2 グループ（表/裏）のメッシュを作る。

    インデックスは帯の三角形列 `T`（`samples * 6` 個）を `[T, T]` と 2 回並べたもので、
    グループ 0 = `[0, 6N)`（material 0）、グループ 1 = `[6N, 12N)`（material 1）。
    両グループとも同じ帯全体を覆う。
    """
    n = int(samples)
    if n <= 0:
        raise ValueError(f"samples must be > 0, got {samples}")
    mesh = plane_geometry(1.0, 1.0, n, 1)
    mesh.set_positions(vertices)

    strip = mesh.indices
    mesh.indices = np.ascontiguousarray(np.concatenate([strip, strip]), dtype=np.uint32)
    half = strip.shape[0]
    mesh.add_group(0, half, 0)
    mesh.add_group(half, half, 1)
    return mesh


__all__ = [
    "DEFAULT_OFFSETS",
    "generate_control_points",
    "build_curve",
    "build_ribbon_vertices",
    "build_ribbon_mesh",
]
