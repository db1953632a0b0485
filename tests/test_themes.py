from __future__ import annotations

import json
from pathlib import Path

import pytest

from pagewidgets.themes import ThemeError, ThemeLoader


def _write_theme(root: Path, name: str = "custom") -> Path:
    theme_dir = root / name
    (theme_dir / "rows").mkdir(parents=True)
    manifest = {
        "name": "Custom",
        "partials": {"tabular/row": "rows/person.html"},
    }
    (theme_dir / "theme.json").write_text(json.dumps(manifest), encoding="utf-8")
    (theme_dir / "rows" / "person.html").write_text(
        '<input name="person[{{ index }}]" value="{{ model.name }}" />',
        encoding="utf-8",
    )
    return theme_dir


def test_bundled_theme_renders_partials_by_alias_and_path() -> None:
    loader = ThemeLoader()

    by_alias = loader.render_partial("tabular/row", {"model": {"name": "Ann"}, "index": 1})
    by_path = loader.render_partial("tabular/_row.html", {"model": {"name": "Ann"}, "index": 1})

    assert 'name="rows[1][name]" value="Ann"' in by_alias
    assert by_alias == by_path
    assert loader.manifest.name == "Default"


def test_active_theme_overrides_and_falls_back(tmp_path: Path) -> None:
    _write_theme(tmp_path)
    loader = ThemeLoader(themes_root=tmp_path, active_theme="custom")

    row = loader.render_partial("tabular/row", {"model": {"name": "<Bo>"}, "index": 2})
    layout = loader.render_page("layout", {"page": {"title": "T", "content": "<p>x</p>"}})

    assert row == '<input name="person[2]" value="&lt;Bo&gt;" />'
    assert "<title>T</title>" in layout
    assert loader.manifest.name == "Custom"
    assert loader.manifest.entrypoints["layout"] == "layout.html"


def test_missing_active_theme_uses_bundled(tmp_path: Path) -> None:
    loader = ThemeLoader(themes_root=tmp_path, active_theme="absent")

    assert loader.manifest.name == "Default"


def test_unknown_entrypoint_and_template(tmp_path: Path) -> None:
    loader = ThemeLoader()

    with pytest.raises(ThemeError):
        loader.render_page("sidebar", {})
    with pytest.raises(ThemeError):
        loader.render_partial("widgets/missing", {})


def test_broken_manifest_raises(tmp_path: Path) -> None:
    theme_dir = tmp_path / "broken"
    theme_dir.mkdir()
    (theme_dir / "theme.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ThemeError):
        ThemeLoader(themes_root=tmp_path, active_theme="broken")


def test_manifest_entrypoint_must_exist(tmp_path: Path) -> None:
    theme_dir = tmp_path / "partial"
    theme_dir.mkdir()
    (theme_dir / "theme.json").write_text(json.dumps({"entrypoints": {"layout": "nowhere.html"}}), encoding="utf-8")

    with pytest.raises(ThemeError):
        ThemeLoader(themes_root=tmp_path, active_theme="partial")
