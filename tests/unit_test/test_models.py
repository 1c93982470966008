"""
Unit tests for request/response models
"""
import pytest
from pydantic import ValidationError

from app.models.request import AnalyseTextRequest, EvaluationConfig, RuleWeights
from app.models.response import ContentEvalResult, KeywordsBannedReason, RegexReason


@pytest.mark.unit
class TestAnalyseTextRequest:

    def test_wire_names(self):
        req = AnalyseTextRequest.model_validate({
            "text": "Bonjour",
            "expectedAnswer": "Salut",
            "expectedLang": " FR ",
            "eval": {"keywords": {"all": ["bonjour"]}},
        })
        assert req.expected_answer == "Salut"
        assert req.expected_lang == "fr"
        assert req.eval_config.keywords.all == ["bonjour"]
        assert req.keywords == []
        assert req.rubric is None

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_rejected(self, text):
        with pytest.raises(ValidationError):
            AnalyseTextRequest(text=text)

    def test_missing_text_rejected(self):
        with pytest.raises(ValidationError):
            AnalyseTextRequest.model_validate({"expectedAnswer": "x"})

    def test_eval_is_optional(self):
        assert AnalyseTextRequest(text="x").eval_config is None


@pytest.mark.unit
class TestEvaluationConfig:

    def test_defaults(self):
        cfg = EvaluationConfig()
        assert cfg.similarity_threshold == 70
        assert cfg.any_at_least == 1
        assert cfg.regex == []
        assert cfg.weights == RuleWeights.default_budget()

    def test_partial_weights(self):
        cfg = EvaluationConfig.model_validate({"weights": {"similarity": 50, "penaltyBanned": 10}})
        assert cfg.weights.similarity == 50
        assert cfg.weights.penalty_banned == 10
        assert cfg.weights.all == 0
        assert cfg.weights.verb == 0

    def test_null_fields_use_defaults(self):
        cfg = EvaluationConfig.model_validate({"weights": None, "keywords": None, "regex": None})
        assert cfg.weights.all == 25
        assert cfg.keywords.banned == []
        assert cfg.regex == []

    def test_single_regex_string(self):
        assert EvaluationConfig(regex="^a").regex == ["^a"]

    def test_numeric_keywords_become_strings(self):
        cfg = EvaluationConfig.model_validate({"keywords": {"all": [1945, "war"]}})
        assert cfg.keywords.all == ["1945", "war"]

    @pytest.mark.parametrize("payload,field,expected", [
        ({"minWords": None}, "min_words", 0),
        ({"maxWords": None}, "max_words", 0),
        ({"requireVerb": None}, "require_verb", False),
        ({"anyAtLeast": None}, "any_at_least", 1),
        ({"similarityThreshold": None}, "similarity_threshold", 70),
        ({"expectedAnswer": None}, "expected_answer", None),
    ])
    def test_null_scalar_means_unset(self, payload, field, expected):
        assert getattr(EvaluationConfig.model_validate(payload), field) == expected

    def test_null_keyword_lists(self):
        cfg = EvaluationConfig.model_validate({"keywords": {"all": None, "any": ["x", None], "banned": None}})
        assert cfg.keywords.all == []
        assert cfg.keywords.any == ["x", ""]
        assert cfg.keywords.banned == []

    def test_null_regex_entries_dropped(self):
        assert EvaluationConfig.model_validate({"regex": ["^a", None]}).regex == ["^a"]

    def test_out_of_range_values_kept(self):
        cfg = EvaluationConfig.model_validate({"similarityThreshold": 150, "minWords": -2})
        assert cfg.similarity_threshold == 150
        assert cfg.min_words == -2

    def test_negative_and_null_weights_count_as_zero(self):
        cfg = EvaluationConfig.model_validate({"weights": {"regex": -1, "all": None, "verb": 5}})
        assert cfg.weights.regex == 0
        assert cfg.weights.all == 0
        assert cfg.weights.verb == 5

    @pytest.mark.parametrize("payload", [
        {"minWords": "lots"},
        {"keywords": "cat"},
        {"weights": {"regex": "heavy"}},
    ])
    def test_wrong_types_rejected(self, payload):
        with pytest.raises(ValidationError):
            EvaluationConfig.model_validate(payload)


@pytest.mark.unit
class TestContentEvalResult:

    def test_reason_lookup(self):
        result = ContentEvalResult(
            content_score=40,
            reasons=[RegexReason(ok=True, weight=20, points=20), KeywordsBannedReason(found=0)],
        )
        assert result.reason("regex").ok is True
        assert result.reason("keywords_banned").penalty == 0
        assert result.reason("similarity") is None

    def test_reasons_parse_by_rule(self):
        result = ContentEvalResult.model_validate({
            "contentScore": 10,
            "isCorrect": False,
            "reasons": [{"rule": "requireVerb", "hasVerb": True, "weight": 10, "points": 10}],
        })
        assert result.reasons[0].has_verb is True

    def test_score_range(self):
        with pytest.raises(ValidationError):
            ContentEvalResult(content_score=101)
