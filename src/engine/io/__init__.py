"""
どこで: `engine.io` サブパッケージ。
何を: ウィンドウ入力（ポインタ移動）を描画ループが読む共有状態へ変換する。
なぜ: 入力イベントの受け口をレンダリングから切り離し、単体で検証できるようにするため。
"""

from .pointer import PointerState, PointerTracker, normalize_pointer

__all__ = ["PointerState", "PointerTracker", "normalize_pointer"]
