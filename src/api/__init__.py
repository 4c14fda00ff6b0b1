"""
どこで: `api` 入口（高レベル公開 API）。
何を: 実行関数 `run`、シーン構築 `build_scene`、アニメータ `RibbonAnimator` を再輸出。
なぜ: 利用者が単一名前空間からシーン構築→実行まで完結できるようにするため。

Usage:
    from api import run

    run()                        # configs/default.yaml の設定で起動
    run(seed=42, samples=500)    # 形状を固定して軽量化
"""

from .animation import RibbonAnimator
from .scene import Scene, build_scene
from .sketch import run_ribbon as run
from .sketch import run_ribbon as run_ribbon

__all__ = ["run", "run_ribbon", "build_scene", "Scene", "RibbonAnimator"]
