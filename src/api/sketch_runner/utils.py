"""
どこで: `api.sketch_runner.utils`（純粋関数/小ヘルパ）。
何を: FPS/ウィンドウサイズ/シード/サンプル数/色など、実行パラメータの解決を提供。
なぜ: `api.sketch` を薄く保ち、「明示引数 > 環境変数 > 設定ファイル > 既定」の優先順位を一箇所に集めるため。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from common.types import RGBA
from util.color import normalize_color
from util.utils import config_section

logger = logging.getLogger(__name__)


def section_value(cfg: Mapping[str, Any] | None, section: str, key: str, default: Any) -> Any:
    """`cfg[section][key]` を返す（欠落/None は既定値）。"""
    value = config_section(cfg, section).get(key)
    return default if value is None else value


def resolve_fps(
    requested_fps: int | None, cfg: Mapping[str, Any] | None = None, *, default: int = 60
) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（<=0 は `ValueError`）。
    - それ以外は設定 `window.fps`。数値化できない/<=0 は警告して既定へ。
    """
    if requested_fps is not None:
        v = int(requested_fps)
        if v <= 0:
            raise ValueError(f"fps must be > 0, got {requested_fps}")
        return v
    raw = section_value(cfg, "window", "fps", default)
    try:
        v = int(raw)
    except (TypeError, ValueError):
        logger.warning("invalid window.fps in config: %r; using %d", raw, default)
        return max(1, int(default))
    if v <= 0:
        logger.warning("non-positive window.fps in config: %r; using %d", raw, default)
        return max(1, int(default))
    return v


def resolve_window_size(
    size: tuple[int, int] | None, cfg: Mapping[str, Any] | None = None
) -> tuple[int, int]:
    """ウィンドウサイズ（px）を解決する。

    - タプル: `(width, height)` をそのまま（正であることを検証）
    - None: 設定 `window.width/height`（既定 1280×720）
    """
    if size is None:
        size = (
            section_value(cfg, "window", "width", 1280),
            section_value(cfg, "window", "height", 720),
        )
    try:
        w, h = int(size[0]), int(size[1])
    except (TypeError, ValueError, IndexError) as e:
        raise ValueError(f"invalid window size: {size!r}") from e
    if w <= 0 or h <= 0:
        raise ValueError(f"window size must be positive, got: {(w, h)}")
    return w, h


def resolve_seed(seed: int | None, cfg: Mapping[str, Any] | None = None) -> int | None:
    """乱数シードを解決する（明示 > `RIBBON_SEED` > `ribbon.seed` > None）。"""
    if seed is not None:
        return int(seed)
    from common.settings import get as _get_settings

    env_seed = _get_settings().SEED
    if env_seed is not None:
        return env_seed
    raw = section_value(cfg, "ribbon", "seed", None)
    return None if raw is None else int(raw)


def resolve_samples(samples: int | None, cfg: Mapping[str, Any] | None = None) -> int:
    """リボンのサンプル数を解決する（明示 > `RIBBON_SAMPLES` > `ribbon.samples` > 1000）。"""
    if samples is None:
        from common.settings import get as _get_settings

        samples = _get_settings().SAMPLES
    if samples is None:
        samples = section_value(cfg, "ribbon", "samples", 1000)
    n = int(samples)
    if n <= 0:
        raise ValueError(f"samples must be > 0, got {samples}")
    return n


def resolve_color(value: Any, default: Any) -> RGBA:
    """色指定を RGBA(0–1) に解決する（None は既定色）。"""
    return normalize_color(default if value is None else value)


__all__ = [
    "section_value",
    "resolve_fps",
    "resolve_window_size",
    "resolve_seed",
    "resolve_samples",
    "resolve_color",
]
