"""
どこで: `util.paths`。
何を: テクスチャ等のアセットパスを解決するユーティリティを提供する。
なぜ: 設定ファイルの相対パスを、実行時のカレントディレクトリに依存せず扱えるようにするため。
"""

from __future__ import annotations

from pathlib import Path

from .utils import project_root


def assets_dir() -> Path:
    """アセット置き場 `assets/`（プロジェクトルート直下）を返す。存在は保証しない。"""
    return project_root() / "assets"


def resolve_asset_path(value: str | Path | None) -> Path | None:
    """設定値をアセットの絶対パスへ解決する。

    - None/空文字は None。
    - 絶対パスはそのまま。
    - 相対パスはまずプロジェクトルート基準、無ければ `assets/` 基準で解決する。
      どちらにも無い場合はプロジェクトルート基準のパスを返す（読込側で失敗を扱う）。
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    p = Path(text).expanduser()
    if p.is_absolute():
        return p
    from_root = project_root() / p
    if from_root.exists():
        return from_root
    from_assets = assets_dir() / p
    if from_assets.exists():
        return from_assets
    return from_root


__all__ = ["assets_dir", "resolve_asset_path"]
