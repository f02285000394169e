"""Tests for the persisted practice filters."""

import json

import pytest

from italian_practice.core import build_verb_item
from italian_practice.services import (
    FilterPreferences,
    FilterPreferencesStore,
    SortMode,
    VerbTypeFilter,
)


@pytest.fixture
def store(tmp_path):
    return FilterPreferencesStore(tmp_path / "prefs" / "filters.json")


class TestFilterPreferencesStore:
    def test_missing_file_returns_defaults(self, store):
        assert store.load("nouns") == FilterPreferences()

    def test_missing_kind_returns_given_defaults(self, store):
        defaults = FilterPreferences(exclude_mastered=False, display_cap="all")
        assert store.load("conjugations", defaults) is defaults

    def test_save_then_load(self, store):
        prefs = FilterPreferences(
            exclude_mastered=False,
            sort_mode=SortMode.MOST_ERRORS,
            display_cap=30,
            verb_type_filter=VerbTypeFilter.REFLEXIVE,
        )
        store.save("verbs", prefs)

        assert store.load("verbs") == prefs
        assert store.load("nouns") == FilterPreferences()

    def test_kinds_are_stored_side_by_side(self, store):
        store.save("nouns", FilterPreferences(display_cap=20))
        store.save("adjectives", FilterPreferences(display_cap="all"))

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["version"] == FilterPreferencesStore.STORE_VERSION
        assert data["kinds"]["nouns"]["display_cap"] == 20
        assert data["kinds"]["adjectives"]["display_cap"] == "all"

    def test_corrupt_file_falls_back_to_defaults(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        assert store.load("nouns") == FilterPreferences()

    def test_invalid_values_fall_back_to_defaults(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps({"version": 1, "kinds": {"nouns": {"sort_mode": "sideways"}}}),
            encoding="utf-8",
        )
        assert store.load("nouns") == FilterPreferences()

    def test_partial_entry_keeps_defaults_for_missing_keys(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps({"version": 1, "kinds": {"nouns": {"sort_mode": "random"}}}),
            encoding="utf-8",
        )
        prefs = store.load("nouns")
        assert prefs.sort_mode is SortMode.RANDOM
        assert prefs.display_cap == 10
        assert prefs.exclude_mastered is True


class TestVerbTypeFilter:
    @pytest.mark.parametrize(
        "verb_filter,expected",
        [
            (VerbTypeFilter.ALL, {"parlare", "essere", "alzarsi"}),
            (VerbTypeFilter.REGULAR, {"parlare"}),
            (VerbTypeFilter.IRREGULAR, {"essere"}),
            (VerbTypeFilter.REFLEXIVE, {"alzarsi"}),
        ],
    )
    def test_matches(self, verb_filter, expected):
        verbs = [
            build_verb_item("v1", "parlare", "to speak", regular=True),
            build_verb_item("v2", "essere", "to be", regular=False),
            build_verb_item("v3", "alzarsi", "to get up", regular=True, reflexive=True),
        ]
        matched = {v.field("italian").expected for v in verbs if verb_filter.matches(v)}
        assert matched == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            VerbTypeFilter.parse("modal")
