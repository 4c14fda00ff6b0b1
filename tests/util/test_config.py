from __future__ import annotations

from pathlib import Path

import pytest

import util.paths as paths_mod
import util.utils as utils_mod
from util.paths import resolve_asset_path
from util.utils import _find_project_root, config_section, load_config


def test_find_project_root_fallback(tmp_path: Path) -> None:
    # 上流に .git/pyproject.toml/configs が無い構造では start.parent.parent を返す
    start = tmp_path / "a" / "b"
    start.mkdir(parents=True)
    assert _find_project_root(start) == start.parent.parent


def test_find_project_root_detects_configs(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    nested = tmp_path / "src" / "util"
    nested.mkdir(parents=True)
    assert _find_project_root(nested) == tmp_path


def test_load_config_default_and_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "window:\n  fps: 60\nribbon:\n  samples: 1000\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text("window:\n  fps: 24\n", encoding="utf-8")
    monkeypatch.setattr(utils_mod, "project_root", lambda: tmp_path)

    cfg = load_config()
    # トップレベルのみ上書き
    assert cfg["window"] == {"fps": 24}
    assert cfg["ribbon"] == {"samples": 1000}


def test_load_config_broken_yaml_is_empty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("window: [unclosed\n", encoding="utf-8")
    monkeypatch.setattr(utils_mod, "project_root", lambda: tmp_path)
    assert load_config() == {}


def test_repo_default_config_has_sections() -> None:
    cfg = load_config()
    for name in ("window", "ribbon", "camera", "lights", "materials"):
        assert name in cfg
    assert cfg["ribbon"]["samples"] == 1000
    assert cfg["camera"]["position"] == [0, 0, 2]
    assert cfg["materials"]["front"]["alpha_test"] == 1.0


def test_config_section() -> None:
    assert config_section({"a": {"b": 1}}, "a") == {"b": 1}
    assert config_section({"a": 3}, "a") == {}
    assert config_section(None, "a") == {}


def test_resolve_asset_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths_mod, "project_root", lambda: tmp_path)
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "tex.png").write_bytes(b"")

    assert resolve_asset_path(None) is None
    assert resolve_asset_path("  ") is None
    assert resolve_asset_path("tex.png") == tmp_path / "assets" / "tex.png"
    assert resolve_asset_path("nope.png") == tmp_path / "nope.png"
    absolute = tmp_path / "x.png"
    assert resolve_asset_path(absolute) == absolute
