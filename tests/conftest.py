"""共通フィクスチャ。

- 乱数シード固定
- 小さなカーブ/リボン試料
- 環境変数由来の設定をテスト毎に初期化
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from engine.core.curve import CatmullRomCurve
from engine.core.geometry import Geometry
from shapes.ribbon import build_curve, build_ribbon_vertices, generate_control_points

_ENV_KEYS = (
    "RIBBON_SEED",
    "RIBBON_SAMPLES",
    "RIBBON_LOG_LEVEL",
    "RIBBON_DEBUG_HELPERS",
    "RIBBON_UPLOAD_DEBUG",
)


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """`RIBBON_*` を外した状態で設定を読み直す（外部環境に左右されないように）。"""
    from common.settings import reload_from_env

    for name in _ENV_KEYS:
        monkeypatch.delenv(name, raising=False)
    reload_from_env()
    yield
    monkeypatch.undo()
    reload_from_env()


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(2024)


@pytest.fixture()
def control_points(rng: np.random.Generator) -> np.ndarray:
    return generate_control_points(7, rng=rng)


@pytest.fixture()
def curve(control_points: np.ndarray) -> CatmullRomCurve:
    return build_curve(control_points)


@pytest.fixture()
def ribbon_small(curve: CatmullRomCurve) -> tuple[np.ndarray, int]:
    n = 64
    return build_ribbon_vertices(curve, n), n


@pytest.fixture()
def geom_two_lines() -> Geometry:
    a = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]], dtype=np.float32)
    b = np.array([[0.0, 1.0, 0.0], [1.0, 1.0, 0.0], [2.0, 1.0, 0.0]], dtype=np.float32)
    return Geometry.from_lines([a, b])
