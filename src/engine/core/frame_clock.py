"""
どこで: `engine.core` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定・経過時間の積算）。
なぜ: GUI/ループから呼び出すだけで複数コンポーネントの更新順を統一するため。
"""

from __future__ import annotations

import time
from typing import Sequence

from .tickable import Tickable


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。

    `elapsed` は開始からの累積秒、`delta` は直近 tick の dt。
    1 tick 内で重複呼び出しは起きない（pyglet の単一スレッドループ前提）。
    """

    def __init__(self, tickables: Sequence[Tickable]):
        self._tickables = tuple(tickables)
        self._last_time = time.perf_counter()
        self.elapsed: float = 0.0
        self.delta: float = 0.0
        self.frames: int = 0

    # GUI フレームワークから schedule_interval で呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # pyglet は dt を渡してくれる
            now = time.perf_counter()  # 他フレームワーク用
            dt = now - self._last_time
            self._last_time = now

        self.delta = float(dt)
        self.elapsed += self.delta
        self.frames += 1
        for t in self._tickables:
            t.tick(self.delta)
