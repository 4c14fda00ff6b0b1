"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（MSAA/深度バッファ/背景クリア/リサイズ可）と描画・リサイズコールバック登録を提供。
なぜ: レンダラ/ジオメトリ層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(1280, 720, bg_color=(0, 0, 0, 1))

    def draw_scene():
        renderer.draw(camera, viewport)

    win.add_draw_callback(draw_scene)
    win.add_resize_callback(lambda w, h, ratio: apply_resize(viewport, camera, w, h, ratio))
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config, glClearColor

ResizeCallback = Callable[[int, int, float], None]


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "Ribbon Globe",
        bg_color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0),
        samples: int = 4,
        vsync: bool = True,
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            caption: タイトル。
            bg_color: 背景色 RGBA（0.0〜1.0）。
            samples: MSAA サンプル数（0 で無効）。
        """
        config = Config(
            double_buffer=True,
            depth_size=24,
            sample_buffers=1 if samples > 0 else 0,
            samples=max(0, int(samples)),
            vsync=vsync,
            major_version=3,
            minor_version=3,
        )
        super().__init__(width=width, height=height, caption=caption, config=config, resizable=True)
        self._bg_color = bg_color
        self._draw_callbacks: list[Callable[[], None]] = []
        self._resize_callbacks: list[ResizeCallback] = []

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def add_resize_callback(self, func: ResizeCallback) -> None:
        """`on_resize` で `(width, height, pixel_ratio)` を受け取る関数を登録する。"""
        self._resize_callbacks.append(func)

    @property
    def pixel_ratio(self) -> float:
        return float(self.get_pixel_ratio())

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。背景をクリアして描画コールバックを呼び出す。"""
        r, g, b, a = self._bg_color
        glClearColor(r, g, b, a)
        self.clear()
        for cb in self._draw_callbacks:
            cb()

    def on_resize(self, width, height):  # Pyglet 既定のイベント名
        """論理サイズと画素密度をコールバックへ渡す（GL の viewport はレンダラが設定）。"""
        if width <= 0 or height <= 0:
            # 最小化中
            return pyglet.event.EVENT_HANDLED
        ratio = self.pixel_ratio
        for cb in self._resize_callbacks:
            cb(int(width), int(height), ratio)
        return pyglet.event.EVENT_HANDLED
