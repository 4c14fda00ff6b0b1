"""
どこで: `api.sketch_runner.render`
何を: RenderWindow/ModernGL コンテキスト/SceneRenderer の初期化。
なぜ: `api.sketch` を薄くし、描画初期化（と失敗時のエラー整形）の責務を分離するため。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from api.scene import Scene

logger = logging.getLogger(__name__)


def create_window_and_context(
    window_width: int,
    window_height: int,
    *,
    caption: str,
    background: tuple[float, float, float, float],
    samples: int = 4,
    vsync: bool = True,
):
    """ウィンドウと ModernGL コンテキストを生成して返す。

    コンテキストが作れない（OpenGL 3.3 非対応/ヘッドレス等）場合は `RuntimeError`。

    Returns
    -------
    (rendering_window, mgl_ctx)
    """
    import moderngl

    from engine.core.render_window import RenderWindow

    rendering_window = RenderWindow(
        window_width,
        window_height,
        caption=caption,
        bg_color=background,
        samples=samples,
        vsync=vsync,
    )  # type: ignore[abstract]

    try:
        mgl_ctx: moderngl.Context = moderngl.create_context()
    except Exception as e:
        rendering_window.close()
        raise RuntimeError(f"failed to create an OpenGL 3.3 context: {e}") from e
    mgl_ctx.enable(moderngl.BLEND)
    mgl_ctx.blend_func = (moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA)
    logger.info("GL context: %s", mgl_ctx.info.get("GL_RENDERER", "unknown"))
    return rendering_window, mgl_ctx


def create_scene_renderer(mgl_ctx: Any, scene: "Scene"):
    """シーンを GPU へ載せた SceneRenderer を返す（テクスチャ読込を含む）。"""
    from engine.render.renderer import SceneRenderer

    return SceneRenderer(
        mgl_ctx,
        scene.mesh,
        scene.materials,
        scene.ambient,
        scene.lights,
        list(scene.helpers.values()),
    )


__all__ = ["create_window_and_context", "create_scene_renderer"]
