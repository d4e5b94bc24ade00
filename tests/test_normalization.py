"""Tests for name normalization."""

import pytest

from contribution_search.normalization import normalize_name, tokenize


class TestNormalizeName:
    """Tests for normalize_name."""

    def test_lowercases_and_strips_punctuation(self):
        """Punctuation is removed, letters lower-cased."""
        assert normalize_name("SMITH, JOHN A.") == "smith john a"

    def test_removes_inner_punctuation_without_spacing(self):
        """Apostrophes and hyphens join the surrounding letters."""
        assert normalize_name("O'Brien-Jones") == "obrienjones"

    def test_collapses_and_trims_whitespace(self):
        """Whitespace runs collapse to a single space; ends are trimmed."""
        assert normalize_name("  John \t\n  Smith  ") == "john smith"

    def test_keeps_digits(self):
        """Digits survive normalization."""
        assert normalize_name("Acme 2020 PAC") == "acme 2020 pac"

    def test_drops_non_ascii_letters(self):
        """Characters outside a-z0-9 are dropped after lower-casing."""
        assert normalize_name("José Núñez") == "jos nez"

    @pytest.mark.parametrize("value", [None, "", "   ", ",.;'"])
    def test_total_on_empty_input(self, value):
        """Empty-ish input normalizes to the empty string."""
        assert normalize_name(value) == ""

    @pytest.mark.parametrize(
        "value",
        [
            "SMITH, JOHN",
            "  mixed   CASE\tname ",
            "Ünïcödé — dash",
            "İstanbul KELVIN K",
            "tab\x1cseparated names",
            "123 !!! abc",
        ],
    )
    def test_idempotent(self, value):
        """Normalizing twice equals normalizing once."""
        once = normalize_name(value)
        assert normalize_name(once) == once


class TestTokenize:
    """Tests for tokenize."""

    def test_splits_on_spaces(self):
        assert tokenize("john a smith") == ["john", "a", "smith"]

    def test_empty(self):
        assert tokenize("") == []
