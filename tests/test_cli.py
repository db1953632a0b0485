from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from pagewidgets.cli import app

runner = CliRunner()


def _write_project(root: Path) -> Path:
    (root / "pagewidgets.yml").write_text(
        (
            "app_name: Test Site\n"
            "widgets:\n"
            "  people:\n"
            "    title: People\n"
            "    model_defaults:\n"
            "      name: ''\n"
            "    strict_limit: true\n"
            "    widget:\n"
            "      input_limit: 2\n"
            "      view_data:\n"
            "        name: people\n"
        ),
        encoding="utf-8",
    )
    menu_path = root / "about.yml"
    menu_path.write_text(
        (
            "id: 2\n"
            "title: About\n"
            "articles:\n"
            "  - id: 5\n"
            "    title: Mission\n"
            "    content_format: markdown\n"
            "    content: We *care*.\n"
        ),
        encoding="utf-8",
    )
    return menu_path


def test_render_menu_prints_document(tmp_path: Path) -> None:
    menu_path = _write_project(tmp_path)

    result = runner.invoke(app, ["render-menu", str(menu_path), "--config", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "<!DOCTYPE html>" in result.output
    assert "<title>Test Site - About</title>" in result.output
    assert "<p>We <em>care</em>.</p>" in result.output
    assert "menu/update" not in result.output


def test_render_menu_fragment_with_admin_links(tmp_path: Path) -> None:
    menu_path = _write_project(tmp_path)

    result = runner.invoke(app, ["render-menu", str(menu_path), "-c", str(tmp_path), "--fragment", "--admin"])

    assert result.exit_code == 0, result.output
    assert "<!DOCTYPE html>" not in result.output
    assert 'href="/menu/update?id=2"' in result.output


def test_render_menu_writes_output_file(tmp_path: Path) -> None:
    menu_path = _write_project(tmp_path)
    output = tmp_path / "out" / "about.html"

    result = runner.invoke(app, ["render-menu", str(menu_path), "-c", str(tmp_path), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert "Rendered" in result.output
    assert "Mission" in output.read_text(encoding="utf-8")


def test_render_menu_reports_invalid_menu(tmp_path: Path) -> None:
    _write_project(tmp_path)
    broken = tmp_path / "broken.yml"
    broken.write_text("id: 1\ntitle: ''\n", encoding="utf-8")

    result = runner.invoke(app, ["render-menu", str(broken), "-c", str(tmp_path)])

    assert result.exit_code == 1
    assert "Cannot load menu" in result.output


def test_render_widget_page(tmp_path: Path) -> None:
    _write_project(tmp_path)

    result = runner.invoke(app, ["render-widget", "people", "-c", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert '<div id="tabular-people" class="tabular-container">' in result.output
    assert "<h1>People</h1>" in result.output
    assert "DOMContentLoaded" in result.output
    assert "tabular.css" in result.output


def test_render_widget_unknown_name(tmp_path: Path) -> None:
    _write_project(tmp_path)

    result = runner.invoke(app, ["render-widget", "ghosts", "-c", str(tmp_path)])

    assert result.exit_code == 1
    assert "Unknown widget" in result.output
    assert "people" in result.output


def test_row_command_prints_new_row(tmp_path: Path) -> None:
    _write_project(tmp_path)

    result = runner.invoke(app, ["row", "people", "--index", "4", "-p", "name=people", "-c", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert 'name="people[4][name]" value=""' in result.output


def test_row_command_rejects_malformed_param(tmp_path: Path) -> None:
    _write_project(tmp_path)

    result = runner.invoke(app, ["row", "people", "--index", "1", "-p", "novalue", "-c", str(tmp_path)])

    assert result.exit_code == 2


def test_row_command_reports_limit(tmp_path: Path) -> None:
    _write_project(tmp_path)

    result = runner.invoke(app, ["row", "people", "--index", "2", "-p", "count=2", "-c", str(tmp_path)])

    assert result.exit_code == 1
    assert "Row rejected" in result.output


def test_missing_config_file_is_usage_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["render-widget", "people", "-c", str(tmp_path / "absent.yml")])

    assert result.exit_code == 2
