from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sheet_i18n.changes import find_changes, has_changes


def _triples(snapshot):
    return {
        (locale, sheet, key, value)
        for locale, sheets in snapshot.items()
        for sheet, keys in sheets.items()
        for key, value in keys.items()
    }


def test_local_subset_of_remote_has_no_changes() -> None:
    local = {"en-GB": {"home": {"welcome": "Hi"}}}
    remote = {
        "en-GB": {"home": {"welcome": "Hi", "bye": "Bye"}, "about": {"title": "About"}},
        "de-DE": {"home": {"welcome": "Hallo"}},
    }

    assert find_changes(local, remote) == {}


def test_empty_local_has_no_changes() -> None:
    assert find_changes({}, {"en-GB": {"home": {"welcome": "Hi"}}}) == {}
    assert find_changes({}, {}) == {}


def test_empty_remote_returns_local_without_empty_sheets() -> None:
    local = {
        "en-GB": {"home": {"welcome": "Hi"}, "legal": {}},
        "de-DE": {},
    }

    assert find_changes(local, {}) == {"en-GB": {"home": {"welcome": "Hi"}}}


def test_missing_locale_sheet_and_key_are_reported() -> None:
    local = {
        "en-GB": {"home": {"welcome": "Hi", "new_key": "New"}, "about": {"title": "About"}},
        "fr-FR": {"home": {"welcome": "Salut"}},
    }
    remote = {"en-GB": {"home": {"welcome": "Hi"}}}

    changes = find_changes(local, remote)

    assert _triples(changes) == {
        ("en-GB", "home", "new_key", "New"),
        ("en-GB", "about", "title", "About"),
        ("fr-FR", "home", "welcome", "Salut"),
    }


def test_changed_values_of_existing_keys_are_not_reported() -> None:
    local = {"en-GB": {"home": {"welcome": "Hello there"}}}
    remote = {"en-GB": {"home": {"welcome": "Hi"}}}

    assert find_changes(local, remote) == {}


def test_result_does_not_depend_on_iteration_order() -> None:
    local_a = {"en-GB": {"home": {"a": "1", "b": "2"}}, "de-DE": {"home": {"a": "eins"}}}
    local_b = {"de-DE": {"home": {"a": "eins"}}, "en-GB": {"home": {"b": "2", "a": "1"}}}

    assert _triples(find_changes(local_a, {})) == _triples(find_changes(local_b, {}))


def test_local_cache_scenario_matches_local_exactly() -> None:
    local = {"en": {"home": {"welcome": "Hi"}}}

    assert find_changes(local, {}) == local


def test_has_changes() -> None:
    assert has_changes({"en-GB": {"home": {"welcome": "Hi"}}})
    assert not has_changes({})
    assert not has_changes({"en-GB": {}})
