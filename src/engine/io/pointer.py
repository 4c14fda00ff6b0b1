"""
どこで: `engine.io.pointer`。
何を: ポインタ位置の正規化と共有状態 `PointerState`、無操作で中心へ戻す `PointerTracker`。
なぜ: 入力イベント（pyglet）と毎フレームの読み手（アニメータ）を、単一スレッド上の小さな状態で結ぶため。

アイドル復帰:
- `move()` の度に「保留中のリセットを取り消し → `idle_reset_sec` 後のリセットを予約し直す」。
- 予約は `scheduler.schedule_once/unschedule`（既定は `pyglet.clock`）。同じ bound method を
  登録/解除するので、保留中のリセットは常に高々 1 つ。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """`pyglet.clock` 互換の単発タイマ API。"""

    def schedule_once(self, func: Callable[..., Any], delay: float, *args: Any) -> None: ...

    def unschedule(self, func: Callable[..., Any]) -> None: ...


@dataclass
class PointerState:
    """正規化ポインタ位置（おおむね各軸 [-1, 1]、Y 上向き）。"""

    x: float = 0.0
    y: float = 0.0

    def reset(self) -> None:
        self.x = 0.0
        self.y = 0.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


def normalize_pointer(
    client_x: float, client_y: float, width: float, height: float
) -> tuple[float, float]:
    """クライアント座標（左上原点・Y 下向き）を [-1, 1]（Y 上向き）へ写す。"""
    if width <= 0 or height <= 0:
        raise ValueError(f"viewport size must be positive, got {(width, height)}")
    x = (float(client_x) / float(width)) * 2.0 - 1.0
    y = (-float(client_y) / float(height)) * 2.0 + 1.0
    return x, y


class PointerTracker:
    """ポインタ移動を `PointerState` へ書き込み、無操作が続いたら (0, 0) へ戻す。"""

    def __init__(
        self,
        state: PointerState | None = None,
        *,
        idle_reset_sec: float = 1.0,
        scheduler: Scheduler | None = None,
    ) -> None:
        if idle_reset_sec <= 0.0:
            raise ValueError(f"idle_reset_sec must be > 0, got {idle_reset_sec}")
        if scheduler is None:
            import pyglet.clock

            scheduler = pyglet.clock  # type: ignore[assignment]
        self.state = state if state is not None else PointerState()
        self.idle_reset_sec = float(idle_reset_sec)
        self._scheduler = scheduler
        self._pending = False

    @property
    def reset_pending(self) -> bool:
        return self._pending

    def move(self, client_x: float, client_y: float, width: float, height: float) -> None:
        """クライアント座標の移動を反映し、アイドルリセットを予約し直す。"""
        self.state.x, self.state.y = normalize_pointer(client_x, client_y, width, height)
        self._scheduler.unschedule(self._reset)  # type: ignore[union-attr]
        self._scheduler.schedule_once(self._reset, self.idle_reset_sec)  # type: ignore[union-attr]
        self._pending = True

    def cancel(self) -> None:
        """保留中のリセットを取り消す（終了処理用）。"""
        self._scheduler.unschedule(self._reset)  # type: ignore[union-attr]
        self._pending = False

    def _reset(self, _dt: float = 0.0) -> None:
        self._pending = False
        self.state.reset()
        logger.debug("pointer idle; reset to center")


__all__ = ["PointerState", "PointerTracker", "Scheduler", "normalize_pointer"]
