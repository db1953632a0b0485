from __future__ import annotations

from pathlib import Path

import pytest

from pagewidgets.assets import BUNDLED_ASSETS_DIR, AssetPublisher
from pagewidgets.routing import RouteUrlBuilder


def test_publish_is_stable_per_directory(tmp_path: Path) -> None:
    (tmp_path / "one").mkdir()
    (tmp_path / "two").mkdir()
    publisher = AssetPublisher("/assets/", hash_length=10)

    first = publisher.publish(tmp_path / "one")

    assert first == publisher.publish(tmp_path / "one")
    assert first != publisher.publish(tmp_path / "two")
    assert first.startswith("/assets/")
    assert len(first.rsplit("/", 1)[1]) == 10
    assert AssetPublisher().publish(tmp_path / "one") == AssetPublisher().publish(tmp_path / "one")


def test_publish_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        AssetPublisher().publish(tmp_path / "missing")


def test_resolve_and_locate_bundled_file() -> None:
    publisher = AssetPublisher()

    url = publisher.resolve("/images/update.svg")

    assert url.endswith("/images/update.svg")
    assert publisher.locate(url) == (BUNDLED_ASSETS_DIR / "images" / "update.svg").resolve()
    assert publisher.resolve("https://cdn.example.com/page.css") == "https://cdn.example.com/page.css"


def test_locate_rejects_unknown_and_escaping_paths(tmp_path: Path) -> None:
    site = tmp_path / "site"
    site.mkdir()
    (site / "app.js").write_text("", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("", encoding="utf-8")
    publisher = AssetPublisher()
    base = publisher.publish(site)

    assert publisher.locate(f"{base}/app.js") == (site / "app.js").resolve()
    assert publisher.locate(f"{base}/../secret.txt") is None
    assert publisher.locate(f"{base}/") is None
    assert publisher.locate(f"{base}/missing.js") is None
    assert publisher.locate("/static/app.js") is None


def test_route_urls() -> None:
    urls = RouteUrlBuilder("/app/", routes={"menu/update": "admin/menus/edit"})

    assert urls.build("") == "/app/"
    assert urls.build("menu/update", {"id": 3}) == "/app/admin/menus/edit?id=3"
    assert urls.build("article/update", {"id": 7, "#": "article7"}) == "/app/article/update?id=7#article7"
    assert urls.build("article/create", {"menuId": 1, "draft": None}) == "/app/article/create?menuId=1"
    assert RouteUrlBuilder().build("") == "/"
