from __future__ import annotations

import pytest

from api.sketch_runner.utils import (
    resolve_color,
    resolve_fps,
    resolve_samples,
    resolve_seed,
    resolve_window_size,
    section_value,
)


def test_section_value_fallbacks() -> None:
    cfg = {"window": {"fps": 30, "caption": None}}
    assert section_value(cfg, "window", "fps", 60) == 30
    assert section_value(cfg, "window", "caption", "x") == "x"
    assert section_value(cfg, "missing", "fps", 60) == 60
    assert section_value(None, "window", "fps", 60) == 60


def test_resolve_fps_precedence() -> None:
    cfg = {"window": {"fps": 30}}
    assert resolve_fps(120, cfg) == 120
    assert resolve_fps(None, cfg) == 30
    assert resolve_fps(None, {}) == 60


def test_resolve_fps_invalid() -> None:
    with pytest.raises(ValueError):
        resolve_fps(0)
    assert resolve_fps(None, {"window": {"fps": "fast"}}) == 60
    assert resolve_fps(None, {"window": {"fps": -5}}) == 60


def test_resolve_window_size() -> None:
    assert resolve_window_size((640, 480)) == (640, 480)
    assert resolve_window_size(None, {"window": {"width": 300, "height": 200}}) == (300, 200)
    assert resolve_window_size(None, {}) == (1280, 720)
    with pytest.raises(ValueError):
        resolve_window_size((0, 480))
    with pytest.raises(ValueError):
        resolve_window_size(("a", 1))  # type: ignore[arg-type]


def test_resolve_seed_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    from common.settings import reload_from_env

    cfg = {"ribbon": {"seed": 3}}
    assert resolve_seed(None, {}) is None
    assert resolve_seed(None, cfg) == 3
    monkeypatch.setenv("RIBBON_SEED", "8")
    reload_from_env()
    assert resolve_seed(None, cfg) == 8
    assert resolve_seed(1, cfg) == 1


def test_resolve_samples_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    from common.settings import reload_from_env

    assert resolve_samples(None, {}) == 1000
    assert resolve_samples(None, {"ribbon": {"samples": 50}}) == 50
    monkeypatch.setenv("RIBBON_SAMPLES", "70")
    reload_from_env()
    assert resolve_samples(None, {"ribbon": {"samples": 50}}) == 70
    assert resolve_samples(5, {}) == 5
    with pytest.raises(ValueError):
        resolve_samples(0, {})


def test_resolve_color() -> None:
    assert resolve_color(None, "#000000") == (0.0, 0.0, 0.0, 1.0)
    assert resolve_color((1.0, 0.0, 0.0), "#000000") == (1.0, 0.0, 0.0, 1.0)
