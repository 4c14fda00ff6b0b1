"""
どこで: `shapes` パッケージ。
何を: リボン（制御点→芯線→帯頂点→メッシュ）と、デバッグ用補助線の生成関数を提供。
なぜ: 形状生成を描画（engine.render）から切り離し、GL なしで検証できるようにするため。
"""

from .guides import curve_polyline, guide_sphere
from .ribbon import (
    DEFAULT_OFFSETS,
    build_curve,
    build_ribbon_mesh,
    build_ribbon_vertices,
    generate_control_points,
)

__all__ = [
    "DEFAULT_OFFSETS",
    "generate_control_points",
    "build_curve",
    "build_ribbon_vertices",
    "build_ribbon_mesh",
    "guide_sphere",
    "curve_polyline",
]
