from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from app.models.base import CamelModel


class LenientModel(CamelModel):
    """Evaluation config pieces: an explicit null means "not configured"."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class KeywordSets(LenientModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    all: List[str] = Field(default_factory=list)
    any: List[str] = Field(default_factory=list)
    banned: List[str] = Field(default_factory=list)

    @field_validator("all", "any", "banned", mode="before")
    @classmethod
    def _null_entries(cls, v):
        # null entries are skipped when matching but still count toward the total
        if isinstance(v, list):
            return ["" if k is None else k for k in v]
        return v


class RuleWeights(LenientModel):
    """Point budget per rule kind.

    Entries left out of a caller-supplied map weigh 0; the full default
    budget only applies when no map is given at all. Negative weights count as 0.
    """
    similarity: float = 0
    all: float = 0
    any: float = 0
    regex: float = 0
    length: float = 0
    verb: float = 0
    penalty_banned: float = 0

    @field_validator("*", mode="before")
    @classmethod
    def _negative_is_zero(cls, v):
        if isinstance(v, (int, float)) and v < 0:
            return 0
        return v

    @classmethod
    def default_budget(cls) -> "RuleWeights":
        return cls(similarity=60, all=25, any=15, regex=20, length=10, verb=10, penalty_banned=30)


class EvaluationConfig(LenientModel):
    expected_answer: Optional[str] = None
    # not clamped: a threshold above 100 is simply never reached
    similarity_threshold: float = 70
    keywords: KeywordSets = Field(default_factory=KeywordSets)
    any_at_least: int = 1
    regex: List[str] = Field(default_factory=list)
    min_words: int = 0
    max_words: int = 0
    require_verb: bool = False
    weights: RuleWeights = Field(default_factory=RuleWeights.default_budget)

    @field_validator("regex", mode="before")
    @classmethod
    def _single_pattern(cls, v):
        # a lone pattern string is accepted as a one-item list
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return [p for p in v if p is not None]
        return v


class AnalyseTextRequest(CamelModel):
    text: str
    expected_answer: str = ""
    expected_lang: str = ""
    keywords: List[str] = Field(default_factory=list)
    eval_config: Optional[EvaluationConfig] = Field(default=None, alias="eval")
    rubric: Optional[str] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field 'text' is required (non-empty string)")
        return v

    @field_validator("expected_lang")
    @classmethod
    def validate_expected_lang(cls, v):
        return (v or "").strip().lower()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "D'abord, je mange une pomme.\n\nEnsuite, je bois du lait.\n\nEnfin, je pars.",
                "expectedAnswer": "Je mange une pomme et je bois du lait.",
                "expectedLang": "fr",
                "keywords": ["pomme", "lait"],
                "eval": {
                    "keywords": {"all": ["pomme"], "banned": ["banane"]},
                    "requireVerb": True,
                },
            }
        }
    )
