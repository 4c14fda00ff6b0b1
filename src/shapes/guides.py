"""
どこで: `shapes.guides`。
何を: デバッグ用の補助線（ガイド球の緯線/経線、芯線カーブの折れ線）を `Geometry` で返す。
なぜ: リボンが球面に乗っているか・芯線がどう走っているかを、本体と同じ視点で確かめるため。
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from engine.core.curve import CatmullRomCurve
from engine.core.geometry import Geometry


@lru_cache(maxsize=16)
def _sphere_latlon(width_segments: int, height_segments: int) -> tuple[np.ndarray, ...]:
    """単位球の緯線リングと経線（極→極）の頂点配列を返す（float32）。

    引数:
        width_segments: 経線の本数（方位方向の分割数）
        height_segments: 極角方向の分割数（緯線リングは極を除く height_segments-1 本）
    """
    two_pi = 2.0 * np.pi
    lines: list[np.ndarray] = []

    # 経線
    lat_vals = np.linspace(0.0, np.pi, height_segments + 1)
    sin_lat = np.sin(lat_vals)
    cos_lat = np.cos(lat_vals)
    for j in range(width_segments):
        lon = two_pi * j / width_segments
        x = sin_lat * np.sin(lon)
        y = cos_lat
        z = sin_lat * np.cos(lon)
        lines.append(np.stack((x, y, z), axis=1).astype(np.float32))

    # 緯線リング（極は除外）
    angles = np.linspace(0.0, two_pi, width_segments + 1)
    for i in range(1, height_segments):
        lat = np.pi * i / height_segments
        r = np.sin(lat)
        x = np.sin(angles) * r
        y = np.full_like(angles, np.cos(lat))
        z = np.cos(angles) * r
        lines.append(np.stack((x, y, z), axis=1).astype(np.float32))

    return tuple(lines)


def guide_sphere(radius: float = 1.0, width_segments: int = 32, height_segments: int = 32) -> Geometry:
    """ワイヤーフレームのガイド球を返す。"""
    w = int(width_segments)
    h = int(height_segments)
    if w < 3 or h < 2:
        raise ValueError(f"segments too small: width={w}, height={h}")
    return Geometry.from_lines(_sphere_latlon(w, h)).scale(radius)


def curve_polyline(curve: CatmullRomCurve, divisions: int = 50) -> Geometry:
    """芯線カーブを `divisions` 分割の折れ線で返す（閉曲線なら始点と終点が一致）。"""
    return Geometry.from_lines([curve.get_points(divisions)])


__all__ = ["guide_sphere", "curve_polyline"]
