"""Unit tests for answer normalization and validation."""

import pytest

from italian_practice.services import is_blank, is_correct, normalize_answer


class TestNormalizeAnswer:
    """Tests for normalize_answer function."""

    def test_lowercases(self):
        assert normalize_answer("Gatto") == "gatto"

    def test_trims_whitespace(self):
        assert normalize_answer("  gatto \t") == "gatto"

    def test_strips_accents(self):
        assert normalize_answer("CAFFÈ ") == normalize_answer("caffe")
        assert normalize_answer("perché") == "perche"

    def test_keeps_internal_spaces(self):
        assert normalize_answer("lui  è") == "lui  e"

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "Città", "  PERCHÉ  ", "ﬁore", "Straße", "é ", " più "],
    )
    def test_idempotent(self, text):
        once = normalize_answer(text)
        assert normalize_answer(once) == once


class TestIsCorrect:
    """Tests for is_correct function."""

    @pytest.mark.parametrize("text", ["gatto", "Città", "  perché ", ""])
    def test_matches_itself(self, text):
        assert is_correct(text, text)

    def test_accent_and_case_insensitive(self):
        assert is_correct("CITTÀ", "citta")
        assert is_correct("  perché  ", "PERCHE")

    def test_partial_answer_is_wrong(self):
        assert not is_correct("gat", "gatto")
        assert not is_correct("gatto nero", "gatto")

    def test_both_blank_counts_as_correct(self):
        assert is_correct("", "")

    def test_blank_input_against_answer_is_wrong(self):
        assert not is_correct("", "gatto")


def test_is_blank():
    assert is_blank("")
    assert is_blank("  \t")
    assert not is_blank(" a ")
