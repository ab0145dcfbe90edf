"""Tests for park code (natural key) derivation."""

from __future__ import annotations

import re

import pytest

from src.models.park_code import derive_park_code, to_url_friendly

ALLOWED = re.compile(r"^[a-z0-9_-]*$")

NAMES = [
    ("Grand Canyon", "AZ"),
    ("  Starved   Rock State Park ", "il"),
    ("Devil's Lake", "WI"),
    ("Crater Lake -- Rim Village", "OR"),
    ("Parc du Mont-Royal (Été)", "QC"),
    ("snake_case_park", "TX"),
    ("Tabs\tand\nnewlines", "CA"),
]


class TestToUrlFriendly:
    """Test the slug transform used for each key component."""

    def test_lowercases_and_hyphenates(self) -> None:
        assert to_url_friendly("Grand Canyon") == "grand-canyon"

    def test_collapses_whitespace_runs(self) -> None:
        assert to_url_friendly("  Starved   Rock\tState ") == "starved-rock-state"

    def test_strips_punctuation(self) -> None:
        assert to_url_friendly("Devil's Lake!") == "devils-lake"

    def test_strips_non_ascii_letters(self) -> None:
        assert to_url_friendly("Été") == "t"

    def test_collapses_repeated_hyphens(self) -> None:
        assert to_url_friendly("Crater Lake -- Rim") == "crater-lake-rim"

    def test_trims_edge_hyphens(self) -> None:
        assert to_url_friendly("-Lake-") == "lake"

    def test_keeps_underscores_and_digits(self) -> None:
        assert to_url_friendly("Area_51 Park 2") == "area_51-park-2"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_input(self, value) -> None:
        assert to_url_friendly(value) == ""


class TestDeriveParkCode:
    """Test composite park code derivation."""

    def test_concrete_example(self) -> None:
        assert derive_park_code("Grand Canyon", "AZ") == "grand-canyon-az"

    def test_degenerate_keys_are_allowed(self) -> None:
        assert derive_park_code("", "AZ") == "-az"
        assert derive_park_code("Grand Canyon", "  ") == "grand-canyon-"

    @pytest.mark.parametrize("name,state", NAMES)
    def test_deterministic(self, name: str, state: str) -> None:
        assert derive_park_code(name, state) == derive_park_code(name, state)

    @pytest.mark.parametrize("name,state", NAMES)
    def test_components_are_idempotent(self, name: str, state: str) -> None:
        slug_name, slug_state = to_url_friendly(name), to_url_friendly(state)
        assert derive_park_code(slug_name, slug_state) == derive_park_code(name, state)

    @pytest.mark.parametrize("name,state", NAMES)
    def test_only_allowed_characters(self, name: str, state: str) -> None:
        code = derive_park_code(name, state)
        assert ALLOWED.match(code)
        assert "--" not in code
        assert not code.startswith("-")
        assert not code.endswith("-")
