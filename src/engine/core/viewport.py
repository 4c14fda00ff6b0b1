"""
どこで: `engine.core.viewport`。
何を: 描画面サイズと画素密度 `Viewport`、およびリサイズ反映 `apply_resize`。
なぜ: ウィンドウのリサイズ時に「カメラのアスペクト」と「描画面の実ピクセル数」を必ず同時に揃えるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .camera import PerspectiveCamera

MAX_PIXEL_RATIO = 2.0


@dataclass
class Viewport:
    """論理サイズ（px）と画素密度。

    - `framebuffer_size`: 上限付き画素密度での描画ピクセル数。
    - `surface`: ウィンドウ既定フレームバッファの実サイズ（既知なら）。
      GL の viewport はこちらに合わせる（画素密度の上限で描画領域が欠けないように）。
    """

    width: int = 1
    height: int = 1
    pixel_ratio: float = 1.0
    surface: tuple[int, int] | None = None

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def framebuffer_size(self) -> tuple[int, int]:
        return (
            max(1, int(round(self.width * self.pixel_ratio))),
            max(1, int(round(self.height * self.pixel_ratio))),
        )

    @property
    def surface_size(self) -> tuple[int, int]:
        """GL viewport に使うサイズ。実フレームバッファが未知なら `framebuffer_size`。"""
        if self.surface is None:
            return self.framebuffer_size
        return self.surface


def apply_resize(
    viewport: Viewport,
    camera: PerspectiveCamera,
    width: int,
    height: int,
    device_pixel_ratio: float = 1.0,
    *,
    framebuffer_size: tuple[int, int] | None = None,
) -> Viewport:
    """新しいウィンドウサイズを viewport とカメラへ反映して viewport を返す。

    - アスペクトは `width/height`、投影行列を作り直す（fov/near/far は不変）。
    - 画素密度は `min(device_pixel_ratio, 2)`。
    - `framebuffer_size` はウィンドウの実フレームバッファ（px）。
    """
    w, h = int(width), int(height)
    if w <= 0 or h <= 0:
        raise ValueError(f"viewport size must be positive, got {(w, h)}")
    viewport.width = w
    viewport.height = h
    viewport.pixel_ratio = min(max(float(device_pixel_ratio), 1e-3), MAX_PIXEL_RATIO)
    if framebuffer_size is None:
        viewport.surface = None
    else:
        fw, fh = int(framebuffer_size[0]), int(framebuffer_size[1])
        viewport.surface = (max(1, fw), max(1, fh))

    camera.aspect = w / h
    camera.update_projection_matrix()
    return viewport


__all__ = ["Viewport", "apply_resize", "MAX_PIXEL_RATIO"]
