"""
どこで: `api.sketch`（実行ランナー）。
何を: 設定解決 → シーン構築 → ウィンドウ/GL 初期化 → 入力結線 → フレーム駆動までを行う `run_ribbon`。
なぜ: 1 関数呼び出しで「球に巻き付くリボン」の対話表示を起動できるようにするため。

実行フロー（概要）:
1) 設定解決: `util.utils.load_config()`（YAML）と環境変数（`common.settings`）から
   FPS/ウィンドウサイズ/シード/サンプル数を決める。明示引数が最優先。
2) ロギング: `setup_default_logging()`（アプリ側で設定済みなら何もしない）。
3) シーン: `build_scene`（GL 非依存）。`init_only=True` ならここで `Scene` を返して終了。
4) ウィンドウ/GL: `RenderWindow` と ModernGL コンテキスト、`SceneRenderer`（テクスチャ読込）。
5) 入力: マウス移動 → `PointerTracker.move`（1 秒無操作で中心へ）、
   左ドラッグ → `OrbitControls.rotate`、ホイール → `OrbitControls.zoom`、
   リサイズ → `apply_resize`（起動時にも 1 回）。
6) フレーム駆動: `FrameClock([RibbonAnimator])` を `pyglet.clock.schedule_interval` で回し、
   `on_draw` で `SceneRenderer.draw`。

キー操作:
- `ESC`: 終了（GPU リソースを解放）
- `S`: ガイド球の表示切替
- `C`: 芯線カーブの表示切替

注意/制限:
- ヘッドレス/仮想環境では `pyglet`/`ModernGL` の初期化に失敗する場合がある（`RuntimeError`）。
- テクスチャが読めない場合は警告して無地（材質色のみ）で続行する。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np

from common.logging import setup_default_logging

from .scene import Scene, build_scene
from .sketch_runner.utils import (
    resolve_color,
    resolve_fps,
    resolve_samples,
    resolve_seed,
    resolve_window_size,
    section_value,
)

logger = logging.getLogger(__name__)


def run_ribbon(
    *,
    config: Mapping[str, Any] | None = None,
    window_size: tuple[int, int] | None = None,
    fps: int | None = None,
    seed: int | None = None,
    samples: int | None = None,
    background: Any = None,
    show_sphere: bool | None = None,
    show_curve: bool | None = None,
    log_level: int | str | None = None,
    init_only: bool = False,
) -> Scene | None:
    """リボン表示を実行する。

    Parameters
    ----------
    config : Mapping | None
        設定辞書。None で `load_config()`（`configs/default.yaml` + `config.yaml`）。
    window_size : tuple[int, int] | None
        ウィンドウの論理サイズ（px）。None で `window.width/height`。
    fps : int | None
        更新レート。None で `window.fps`（既定 60）。
    seed : int | None
        制御点の乱数シード。None で `RIBBON_SEED` → `ribbon.seed` → 毎回ランダム。
    samples : int | None
        リボンのサンプル数。None で `RIBBON_SAMPLES` → `ribbon.samples` → 1000。
    background : 色指定 | None
        背景色（RGBA 0–1 または #RRGGBB）。None で `window.background_color`（黒）。
    show_sphere, show_curve : bool | None
        補助線の初期表示。None で `debug.*`。`RIBBON_DEBUG_HELPERS=1` なら両方表示。
    log_level : int | str | None
        ロギングレベル。None で `RIBBON_LOG_LEVEL`（既定 INFO）。
    init_only : bool
        True でウィンドウ/GL を作らず、構築した `Scene` を返して終了。

    Returns
    -------
    Scene | None
        `init_only=True` のときのみ `Scene`。
    """
    setup_default_logging(log_level)

    if config is None:
        from util.utils import load_config

        config = load_config()

    # ---- ① 実行パラメータ ------------------------------------------
    fps_value = resolve_fps(fps, config)
    width, height = resolve_window_size(window_size, config)
    seed_value = resolve_seed(seed, config)
    n_samples = resolve_samples(samples, config)
    bg_rgba = resolve_color(background, section_value(config, "window", "background_color", "#000000"))

    from common.settings import get as _get_settings

    if _get_settings().DEBUG_HELPERS:
        show_sphere = True if show_sphere is None else show_sphere
        show_curve = True if show_curve is None else show_curve

    # ---- ② シーン ---------------------------------------------------
    logger.info("control point seed: %s", "random" if seed_value is None else seed_value)
    rng = np.random.default_rng(seed_value)
    scene = build_scene(
        config,
        rng=rng,
        samples=n_samples,
        window_size=(width, height),
        show_sphere=show_sphere,
        show_curve=show_curve,
    )

    if init_only:
        return scene

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet
    from pyglet.window import key, mouse

    from engine.core.frame_clock import FrameClock
    from engine.core.viewport import apply_resize
    from engine.io.pointer import PointerTracker

    from .animation import RibbonAnimator
    from .sketch_runner.render import create_scene_renderer, create_window_and_context

    # ---- ③ Window & ModernGL ----------------------------------------
    rendering_window, mgl_ctx = create_window_and_context(
        width,
        height,
        caption=str(section_value(config, "window", "caption", "Ribbon Globe")),
        background=bg_rgba,
        samples=int(section_value(config, "window", "samples", 4)),
        vsync=bool(section_value(config, "window", "vsync", True)),
    )
    renderer = create_scene_renderer(mgl_ctx, scene)

    def _on_resize(w: int, h: int, ratio: float) -> None:
        apply_resize(
            scene.viewport,
            scene.camera,
            w,
            h,
            ratio,
            framebuffer_size=rendering_window.get_framebuffer_size(),
        )
        logger.debug(
            "resized: %dx%d ratio=%.2f surface=%s",
            w,
            h,
            scene.viewport.pixel_ratio,
            scene.viewport.surface_size,
        )

    rendering_window.add_resize_callback(_on_resize)
    _on_resize(rendering_window.width, rendering_window.height, rendering_window.pixel_ratio)

    closed = False

    def _draw_main() -> None:
        if closed:
            return
        renderer.draw(scene.camera, scene.viewport)

    rendering_window.add_draw_callback(_draw_main)

    # ---- ④ 入力 ------------------------------------------------------
    tracker = PointerTracker(
        scene.pointer,
        idle_reset_sec=float(section_value(config, "pointer", "idle_reset_sec", 1.0)),
        scheduler=pyglet.clock,
    )

    def _pointer_move(x: int, y: int) -> None:
        # pyglet は左下原点。クライアント座標（左上原点）へ直す
        w, h = rendering_window.width, rendering_window.height
        tracker.move(x, h - y, w, h)

    @rendering_window.event
    def on_mouse_motion(x, y, dx, dy):  # noqa: ANN001
        _pointer_move(x, y)

    @rendering_window.event
    def on_mouse_drag(x, y, dx, dy, buttons, modifiers):  # noqa: ANN001
        _pointer_move(x, y)
        if buttons & mouse.LEFT:
            scene.controls.rotate(dx, -dy, rendering_window.height)

    @rendering_window.event
    def on_mouse_scroll(x, y, scroll_x, scroll_y):  # noqa: ANN001
        scene.controls.zoom(scroll_y)

    @rendering_window.event
    def on_key_press(sym, mods):  # noqa: ANN001
        if sym == key.ESCAPE:
            # on_close で解放してから既定ハンドラがウィンドウを閉じる
            rendering_window.dispatch_event("on_close")
            return pyglet.event.EVENT_HANDLED
        if sym == key.S:
            logger.info("guide sphere: %s", "on" if scene.helpers["sphere"].toggle() else "off")
        if sym == key.C:
            logger.info("curve helper: %s", "on" if scene.helpers["curve"].toggle() else "off")

    # ---- ⑤ フレーム駆動 ---------------------------------------------
    animator = RibbonAnimator(
        scene.camera,
        scene.controls,
        scene.pointer,
        scene.front_material.map,
        scene.back_material.map,
        scroll_period=float(section_value(config, "ribbon", "scroll_period", 20.0)),
        follow_scale=float(section_value(config, "pointer", "follow_scale", 0.5)),
        follow_lerp=float(section_value(config, "pointer", "follow_lerp", 0.1)),
        camera_z=float(scene.camera.position[2]),
    )
    frame_clock = FrameClock([animator])
    pyglet.clock.schedule_interval(frame_clock.tick, 1 / fps_value)

    @rendering_window.event
    def on_close():  # noqa: ANN001
        nonlocal closed
        if closed:
            return
        closed = True
        pyglet.clock.unschedule(frame_clock.tick)
        tracker.cancel()
        renderer.release()
        logger.info("closed after %d frames (%.1fs)", frame_clock.frames, frame_clock.elapsed)
        pyglet.app.exit()

    logger.info("running: %dx%d @ %d fps, samples=%d", width, height, fps_value, n_samples)
    pyglet.app.run()
    return None


__all__ = ["run_ribbon"]
