from __future__ import annotations

from typing import Any, Mapping

import pytest

from pagewidgets.widgets.tabular import (
    AddInProgressError,
    InputLimitReachedError,
    Row,
    RowFetchError,
    TabularInputConfig,
    TabularInputSession,
    UnknownRowError,
)


def _session(models: list[Any] | None = None, **options: Any) -> TabularInputSession:
    options.setdefault("input_url", "/rows")
    config = TabularInputConfig(models=models or [], **options)
    return TabularInputSession.from_config(config)


def _fetch(url: str, params: Mapping[str, Any]) -> str:
    return f"<input name=\"rows[{params['index']}][name]\" />"


def _failing_fetch(url: str, params: Mapping[str, Any]) -> str:
    raise ConnectionError("endpoint unavailable")


def test_initial_state_matches_rendered_rows() -> None:
    session = _session(["a", "b", "c"], input_limit=2)

    assert session.rows == [0, 1]
    assert session.count == 2
    assert session.next_index == 2
    assert not session.add_visible
    assert session.hide_on_single_visible
    assert session.header_visible


def test_add_assigns_fresh_increasing_indices() -> None:
    session = _session(["a"])

    first = session.add(_fetch)
    second = session.add(_fetch)

    assert (first.index, second.index) == (1, 2)
    assert session.rows == [0, 1, 2]
    assert 'rows[2][name]' in second.html


def test_indices_not_reused_after_removing_last_row() -> None:
    session = _session(["a", "b"])
    session.add(_fetch)

    assert session.remove(2)
    added = session.add(_fetch)

    assert added.index == 3
    assert session.rows == [0, 1, 3]
    assert len(set(session.rows)) == session.count


def test_indices_not_reused_after_removing_every_row() -> None:
    session = _session(["a"])
    session.remove(0)

    added = session.add(_fetch)

    assert added.index == 1
    assert session.rows == [1]


def test_request_params_include_view_data_index_and_count() -> None:
    session = _session(["a", "b"], view_data={"form": "signup", "name": "people"})
    seen: list[tuple[str, dict[str, Any]]] = []

    def fetch(url: str, params: Mapping[str, Any]) -> str:
        seen.append((url, dict(params)))
        return ""

    session.add(fetch)

    assert seen == [("/rows", {"form": "signup", "name": "people", "index": 2, "count": 2})]


def test_limit_hides_add_control_and_blocks_adds() -> None:
    session = _session(["a"], input_limit=2)
    assert session.add_visible

    session.add(_fetch)

    assert not session.add_visible
    with pytest.raises(InputLimitReachedError):
        session.add(_fetch)
    assert session.count == 2


def test_removing_below_limit_shows_add_control_again() -> None:
    session = _session(["a", "b"], input_limit=2)
    assert not session.add_visible

    session.remove(0)

    assert session.add_visible
    assert session.add(_fetch).index == 2


def test_unbounded_session_always_allows_adds() -> None:
    session = _session([], input_limit=0)

    for _ in range(5):
        session.add(_fetch)

    assert session.count == 5
    assert session.add_visible


def test_hide_on_single_tracks_row_count() -> None:
    session = _session(["a"])
    assert not session.hide_on_single_visible

    session.add(_fetch)
    assert session.hide_on_single_visible

    session.remove(1)
    assert not session.hide_on_single_visible


def test_header_visibility_follows_row_presence() -> None:
    session = _session([])
    assert not session.header_visible

    session.add(_fetch)
    assert session.header_visible

    session.remove(0)
    assert not session.header_visible


def test_second_add_rejected_while_first_is_pending() -> None:
    session = _session([])
    index = session.begin_add()

    with pytest.raises(AddInProgressError):
        session.begin_add()

    session.complete_add(index, "<input />")
    assert session.rows == [0]
    assert not session.pending


def test_failed_fetch_leaves_state_unchanged_and_reports() -> None:
    errors: list[tuple[Exception, int]] = []
    config = TabularInputConfig(models=["a"], input_url="/rows")
    session = TabularInputSession.from_config(config, on_error=lambda exc, index: errors.append((exc, index)))

    with pytest.raises(RowFetchError) as excinfo:
        session.add(_failing_fetch)

    assert excinfo.value.index == 1
    assert session.rows == [0]
    assert session.next_index == 1
    assert not session.pending
    assert len(errors) == 1
    assert isinstance(errors[0][0], ConnectionError)
    assert errors[0][1] == 1
    assert session.add(_fetch).index == 1


def test_callbacks_receive_added_and_removed_rows() -> None:
    added: list[Row] = []
    removed: list[Row] = []
    config = TabularInputConfig(input_url="/rows")
    session = TabularInputSession.from_config(config, after_add=added.append, after_remove=removed.append)

    session.add(_fetch)
    session.remove(0)

    assert [row.index for row in added] == [0]
    assert [row.index for row in removed] == [0]


def test_declined_confirmation_keeps_row() -> None:
    session = _session(["a", "b"], remove_confirmation="Remove this row?")
    prompts: list[str] = []

    def decline(message: str) -> bool:
        prompts.append(message)
        return False

    assert session.remove(1, confirm=decline) is False
    assert session.rows == [0, 1]
    assert prompts == ["Remove this row?"]

    assert session.remove(1, confirm=lambda message: True) is True
    assert session.rows == [0]


def test_confirmation_skipped_when_not_configured() -> None:
    session = _session(["a"])

    assert session.remove(0, confirm=lambda message: False) is True
    assert session.count == 0


def test_removing_unknown_row_raises() -> None:
    session = _session(["a"])

    with pytest.raises(UnknownRowError):
        session.remove(7)
    assert session.rows == [0]
