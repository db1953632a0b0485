from __future__ import annotations

import json
from pathlib import Path

import pytest

from pagewidgets.content import ContentFormat, MenuLoadError, load_menu, load_menus


def _write_yaml_menu(directory: Path, menu_id: int = 1, name: str = "about.yml") -> Path:
    path = directory / name
    path.write_text(
        (
            f"id: {menu_id}\n"
            "title: '  About  '\n"
            "content: '   '\n"
            "articles:\n"
            "  - id: 3\n"
            "    title: Mission\n"
            "    content_format: markdown\n"
            "    content: We *care*.\n"
            "  - id: 4\n"
            "    title: Staff\n"
        ),
        encoding="utf-8",
    )
    return path


def _write_json_menu(directory: Path, menu_id: int = 2) -> Path:
    path = directory / "contact.json"
    payload = {
        "id": menu_id,
        "title": "Contact",
        "content": "<p>Side</p>",
        "articles": [{"id": 9, "title": "Address", "content": "<p>Main St.</p>"}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_yaml_menu(tmp_path: Path) -> None:
    menu = load_menu(_write_yaml_menu(tmp_path))

    assert menu.id == 1
    assert menu.title == "About"
    assert menu.content is None
    assert menu.article_count == 2
    assert menu.articles[0].content_format is ContentFormat.MARKDOWN
    assert menu.articles[1].content_format is ContentFormat.HTML
    assert menu.articles[1].content == ""
    assert menu.articles[0].anchor == "article3"


def test_load_json_menu(tmp_path: Path) -> None:
    menu = load_menu(_write_json_menu(tmp_path))

    assert menu.title == "Contact"
    assert menu.content == "<p>Side</p>"
    assert [article.id for article in menu.articles] == [9]


def test_invalid_menus_raise_with_path(tmp_path: Path) -> None:
    blank_title = tmp_path / "blank.yml"
    blank_title.write_text("id: 1\ntitle: '   '\n", encoding="utf-8")
    negative = tmp_path / "negative.yml"
    negative.write_text("id: -4\ntitle: Oops\n", encoding="utf-8")
    unsupported = tmp_path / "menu.txt"
    unsupported.write_text("id: 1", encoding="utf-8")

    for path in (blank_title, negative, unsupported):
        with pytest.raises(MenuLoadError) as excinfo:
            load_menu(path)
        assert excinfo.value.path == path


def test_load_menus_indexes_by_id(tmp_path: Path) -> None:
    _write_yaml_menu(tmp_path)
    _write_json_menu(tmp_path)
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    menus = load_menus(tmp_path)

    assert sorted(menus) == [1, 2]
    assert menus[2].title == "Contact"


def test_duplicate_menu_ids_rejected(tmp_path: Path) -> None:
    _write_yaml_menu(tmp_path, menu_id=1, name="a.yml")
    _write_yaml_menu(tmp_path, menu_id=1, name="b.yml")

    with pytest.raises(MenuLoadError, match="Duplicate menu id 1"):
        load_menus(tmp_path)


def test_missing_directory_yields_no_menus(tmp_path: Path) -> None:
    assert load_menus(tmp_path / "absent") == {}
