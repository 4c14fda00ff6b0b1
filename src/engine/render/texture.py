"""
どこで: `engine.render.texture`。
何を: 画像ファイルを ModernGL テクスチャへ読み込む（pyglet.image で復号）。失敗時は 1×1 の白へフォールバック。
なぜ: テクスチャ欠落で描画ループを止めず、材質色だけの無地表示で継続するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .types import TextureSlot

logger = logging.getLogger(__name__)

_WHITE_PIXEL = bytes((255, 255, 255, 255))


def white_texture(ctx: Any) -> Any:
    """1×1 の白テクスチャを返す（無地描画用）。"""
    tex = ctx.texture((1, 1), 4, _WHITE_PIXEL)
    tex.repeat_x = True
    tex.repeat_y = True
    return tex


def _decode_image(path: Path, *, flip_y: bool) -> tuple[int, int, bytes]:
    """画像を RGBA8 のバイト列へ復号する。

    pyglet の既定は下の行から（GL 順）。`flip_y=False` は画像の先頭行を v=0 に置くため、
    負のピッチで上の行から取り出す。
    """
    import pyglet.image

    image = pyglet.image.load(str(path))
    data = image.get_image_data()
    width, height = int(data.width), int(data.height)
    pitch = width * 4
    raw = data.get_data("RGBA", pitch if flip_y else -pitch)
    return width, height, bytes(raw)


def load_texture(ctx: Any, path: Path | None, *, flip_y: bool = False, repeat: bool = True) -> Any:
    """`path` の画像をテクスチャとして読み込む。読めなければ警告して白テクスチャを返す。"""
    import moderngl

    if path is None:
        return white_texture(ctx)
    try:
        width, height, raw = _decode_image(path, flip_y=flip_y)
    except Exception as e:  # noqa: BLE001 - 復号失敗の種類は問わず無地へ
        logger.warning("texture load failed (%s): %s; falling back to untextured", path, e)
        return white_texture(ctx)

    tex = ctx.texture((width, height), 4, raw)
    tex.repeat_x = repeat
    tex.repeat_y = repeat
    tex.build_mipmaps()
    tex.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
    logger.info("texture loaded: %s (%dx%d)", path, width, height)
    return tex


def load_slot(ctx: Any, slot: TextureSlot) -> TextureSlot:
    """スロットの `source` を読み込んで `texture` に設定し、スロットを返す。"""
    slot.texture = load_texture(ctx, slot.source, flip_y=slot.flip_y, repeat=slot.wrap_repeat)
    return slot


__all__ = ["white_texture", "load_texture", "load_slot"]
