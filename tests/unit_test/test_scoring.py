"""
Unit tests for services/evaluation/scoring.py
"""
import pytest

from app.models.rubric import GrammarFinding
from app.services.evaluation.scoring import (
    grammar_spelling_scores,
    is_spelling_issue,
    structure_heuristics,
)


def _finding(category="grammar", rule_id="AGREEMENT"):
    return GrammarFinding(issue_category=category, rule_id=rule_id, message="issue")


@pytest.mark.unit
class TestSpellingClassification:

    @pytest.mark.parametrize("category,rule_id", [
        ("misspelling", "MORFOLOGIK_RULE_EN_US"),
        ("typographical", "COMMA_PARENTHESIS_WHITESPACE"),
        ("grammar", "FR_SPELLING_RULE"),
        ("MISSPELLING", None),
    ])
    def test_spelling(self, category, rule_id):
        assert is_spelling_issue(_finding(category, rule_id)) is True

    def test_grammar(self):
        assert is_spelling_issue(_finding("grammar", "AGREEMENT_SENT_START")) is False
        assert is_spelling_issue(_finding("", None)) is False


@pytest.mark.unit
class TestGrammarSpellingScores:

    def test_counts_by_category(self):
        findings = [_finding()] * 2 + [_finding("misspelling", "SPELL")] * 3
        scores = grammar_spelling_scores(findings, grammar_pts_per_error=6, spelling_pts_per_error=5)
        assert scores.grammar_err == 2
        assert scores.spelling_err == 3
        assert scores.grammar_score == 88
        assert scores.spelling_score == 85

    def test_no_findings(self):
        scores = grammar_spelling_scores([], 6, 5)
        assert (scores.grammar_score, scores.spelling_score) == (100, 100)
        assert grammar_spelling_scores(None, 6, 5).grammar_err == 0

    def test_floored_at_zero(self):
        scores = grammar_spelling_scores([_finding()] * 20, 6, 5)
        assert scores.grammar_score == 0

    def test_fractional_penalty_rounds_half_up(self):
        scores = grammar_spelling_scores([_finding()], grammar_pts_per_error=2.5, spelling_pts_per_error=5)
        assert scores.grammar_score == 98


@pytest.mark.unit
class TestStructureHeuristics:

    def test_keyword_coverage(self):
        result = structure_heuristics("Le Chat noir", ["chat", "chien"], "fr", detectors={})
        assert result["found"] == 1
        assert result["total"] == 2
        assert result["keyword_score"] == 50

    def test_no_keywords(self):
        result = structure_heuristics("anything", [], "en", detectors={})
        assert result["keyword_score"] is None
        assert result["total"] == 0

    def test_plain_containment_keeps_accents(self):
        # unlike the content rules, no accent folding here
        result = structure_heuristics("un élève", ["eleve"], "fr", detectors={})
        assert result["found"] == 0

    def test_verb(self):
        assert structure_heuristics("Nous sommes là", [], "fr", detectors={})["has_verb"] is True
        assert structure_heuristics("chat noir", [], "fr", detectors={})["has_verb"] is False
