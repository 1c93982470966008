"""
Unit tests for services/evaluation/normalizer.py
"""
import pytest

from app.services.evaluation.normalizer import fold, normalize, tokenize


@pytest.mark.unit
class TestNormalize:

    def test_strips_diacritics_and_punctuation(self):
        assert normalize("  L'Été, déjà fini!  ") == "l'ete deja fini"

    def test_keeps_apostrophes_and_hyphens(self):
        assert normalize("Co-op, it's OK.") == "co-op it's ok"

    def test_underscore_is_not_a_word_char(self):
        assert normalize("snake_case") == "snake case"

    def test_collapses_whitespace(self):
        assert normalize("a\t\tb\n\nc   d") == "a b c d"

    def test_none_and_empty(self):
        assert normalize(None) == ""
        assert normalize("") == ""
        assert normalize("?!...") == ""

    def test_non_latin_scripts_survive(self):
        assert normalize("日本語のテキスト。") == "日本語のテキスト"
        assert normalize("Ελληνικά!") == "ελληνικα"


@pytest.mark.unit
class TestTokenize:

    def test_basic(self):
        assert tokenize("Hello,   world!") == ["hello", "world"]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_numbers_are_tokens(self):
        assert tokenize("J'ai 3 chats.") == ["j'ai", "3", "chats"]


@pytest.mark.unit
class TestFold:

    def test_keeps_punctuation(self):
        assert fold("  Héllo,   World ") == "hello, world"

    def test_none(self):
        assert fold(None) == ""
