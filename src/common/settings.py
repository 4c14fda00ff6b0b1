"""
どこで: `common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

YAML（`configs/default.yaml`）が「作品の既定値」を持つのに対し、こちらは実行時の
上書き（シード固定・ログレベル・デバッグ補助線）を扱う。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int, env_str


@dataclass
class _Settings:
    # 乱数（None = 実行毎に異なる形状）
    SEED: int | None = None

    # リボン
    SAMPLES: int | None = None

    # ロギング
    LOG_LEVEL: str = "INFO"

    # デバッグ補助線（ガイド球/カーブ）
    DEBUG_HELPERS: bool = False

    # GPU アップロードの詳細ログ
    UPLOAD_DEBUG: bool = False


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int` を使用。
    - 一部は下限丸めを適用。
    """
    _settings.SEED = env_int("RIBBON_SEED", None)
    _settings.SAMPLES = env_int("RIBBON_SAMPLES", None, min_value=1)
    _settings.LOG_LEVEL = (env_str("RIBBON_LOG_LEVEL", "INFO") or "INFO").upper()
    _settings.DEBUG_HELPERS = env_bool("RIBBON_DEBUG_HELPERS", False)
    _settings.UPLOAD_DEBUG = env_bool("RIBBON_UPLOAD_DEBUG", False)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
