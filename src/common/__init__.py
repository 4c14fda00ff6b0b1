"""
どこで: `common` パッケージ。
何を: ロギング初期化・環境変数パース・型付き設定・型エイリアスなどの基盤。
なぜ: engine/shapes/api の各層から共有する小さな土台を分離し、依存の向きを単純化するため。
"""

from .logging import setup_default_logging
from .types import RGBA, Vec2, Vec3

__all__ = [
    "setup_default_logging",
    "RGBA",
    "Vec2",
    "Vec3",
]
