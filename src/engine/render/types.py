"""
どこで: `engine.render` 型定義。
何を: 材質 `Material`、テクスチャの UV 変換状態 `TextureSlot`、光源 `AmbientLight`/`DirectionalLight`。
なぜ: シーン構築（CPU のみ）と描画（GL）の間で受け渡す値を、GL に依存しない形で固定するため。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import numpy as np

from common.types import RGBA, Vec3

Side = Literal["front", "back", "double"]

RGB = tuple[float, float, float]


@dataclass
class TextureSlot:
    """テクスチャ 1 枚分の UV 変換（`uv' = uv * repeat + offset`）と読込元。

    - `source`: 画像パス（None なら無地）。
    - `texture`: 読込後の GPU テクスチャ（`engine.render.texture.load_texture` が設定）。
    - `repeat` の負値は左右/上下反転を表す。
    - `flip_y=False` は画像の先頭行を v=0 に置く。
    """

    source: Path | None = None
    offset: list[float] = field(default_factory=lambda: [0.0, 0.0])
    repeat: list[float] = field(default_factory=lambda: [1.0, 1.0])
    wrap_repeat: bool = True
    flip_y: bool = False
    texture: Any = None

    def set_offset_x(self, value: float) -> None:
        self.offset[0] = float(value)

    def transform_uv(self, uv: np.ndarray) -> np.ndarray:
        """UV 配列 `(..., 2)` に変換を適用する（シェーダと同じ式、検証用）。"""
        uv_arr = np.asarray(uv, dtype=np.float64)
        return uv_arr * np.asarray(self.repeat, dtype=np.float64) + np.asarray(
            self.offset, dtype=np.float64
        )


@dataclass
class Material:
    """標準材質（PBR 風の簡易ライティング）。

    `side` はどちらの面を描くか:
    - `"front"`: 表面のみ（背面カリング）
    - `"back"`: 裏面のみ（前面カリング）
    - `"double"`: 両面
    """

    map: TextureSlot | None = None
    color: RGBA = (1.0, 1.0, 1.0, 1.0)
    side: Side = "front"
    roughness: float = 0.65
    metalness: float = 0.2
    alpha_test: float = 1.0
    flat_shading: bool = True
    name: str = ""

    def __post_init__(self) -> None:
        if self.side not in ("front", "back", "double"):
            raise ValueError(f"invalid side: {self.side!r}")
        if not 0.0 <= self.roughness <= 1.0:
            raise ValueError(f"roughness must be in [0, 1], got {self.roughness}")
        if not 0.0 <= self.metalness <= 1.0:
            raise ValueError(f"metalness must be in [0, 1], got {self.metalness}")

    @property
    def cull_face(self) -> str | None:
        """GL のカリング対象面（None はカリング無効）。"""
        if self.side == "front":
            return "back"
        if self.side == "back":
            return "front"
        return None


@dataclass(frozen=True)
class AmbientLight:
    color: RGB = (1.0, 1.0, 1.0)
    intensity: float = 0.5

    @property
    def radiance(self) -> RGB:
        c = self.color
        k = self.intensity
        return (c[0] * k, c[1] * k, c[2] * k)


@dataclass(frozen=True)
class DirectionalLight:
    """`position` から `target` へ向かう平行光。"""

    color: RGB = (1.0, 1.0, 1.0)
    intensity: float = 1.0
    position: Vec3 = (0.0, 1.0, 0.0)
    target: Vec3 = (0.0, 0.0, 0.0)

    @property
    def radiance(self) -> RGB:
        c = self.color
        k = self.intensity
        return (c[0] * k, c[1] * k, c[2] * k)

    @property
    def direction_to_light(self) -> np.ndarray:
        """表面から光源へ向かう単位ベクトル `(3,)`。"""
        d = np.asarray(self.position, dtype=np.float64) - np.asarray(self.target, dtype=np.float64)
        n = float(np.linalg.norm(d))
        if n == 0.0:
            return np.array([0.0, 1.0, 0.0])
        return d / n


@dataclass
class HelperLines:
    """補助線 1 組（ガイド球や芯線）。`visible=False` の間は描かない。"""

    geometry: Any
    color: RGBA = (1.0, 1.0, 1.0, 1.0)
    visible: bool = False
    name: str = ""

    def toggle(self) -> bool:
        self.visible = not self.visible
        return self.visible


__all__ = ["Side", "TextureSlot", "Material", "AmbientLight", "DirectionalLight", "HelperLines"]
