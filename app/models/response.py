from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field

from app.models.base import CamelModel
from app.models.rubric import RubricResult


class SimilarityReason(CamelModel):
    rule: Literal["similarity"] = "similarity"
    value: int
    weight: float
    points: int
    threshold: float


class KeywordsAllReason(CamelModel):
    rule: Literal["keywords_all"] = "keywords_all"
    found: int
    total: int
    pct: Optional[int] = None
    weight: float
    points: int


class KeywordsAnyReason(CamelModel):
    rule: Literal["keywords_any"] = "keywords_any"
    found: int
    total: int
    required: int
    weight: float
    points: float


class KeywordsBannedReason(CamelModel):
    rule: Literal["keywords_banned"] = "keywords_banned"
    found: int
    penalty: float = 0


class RegexReason(CamelModel):
    rule: Literal["regex"] = "regex"
    ok: bool
    weight: float
    points: float


class LengthReason(CamelModel):
    rule: Literal["length"] = "length"
    word_count: int
    min_words: int
    max_words: int
    weight: float
    points: float


class VerbReason(CamelModel):
    rule: Literal["requireVerb"] = "requireVerb"
    has_verb: bool
    weight: float
    points: float


Reason = Annotated[
    Union[
        SimilarityReason,
        KeywordsAllReason,
        KeywordsAnyReason,
        KeywordsBannedReason,
        RegexReason,
        LengthReason,
        VerbReason,
    ],
    Field(discriminator="rule"),
]


class ContentEvalResult(CamelModel):
    content_score: int = Field(default=0, ge=0, le=100)
    is_correct: bool = False
    reasons: List[Reason] = Field(default_factory=list)

    def reason(self, rule: str):
        """First reason recorded for `rule`, or None when the rule was inactive."""
        return next((r for r in self.reasons if r.rule == rule), None)


class Issue(CamelModel):
    type: str
    message: str
    rule_id: Optional[str] = None
    description: Optional[str] = None
    offset: Optional[int] = None
    length: Optional[int] = None
    replacements: List[str] = Field(default_factory=list)


class AnalysisDetails(CamelModel):
    grammar_errors: int
    spelling_errors: int
    lt_error: Optional[str] = None
    has_verb: bool
    keyword_score: Optional[int] = None
    keywords_found: int
    keywords_total: int


class AnalyseTextResponse(CamelModel):
    lang: str
    grammar_score: int
    spelling_score: int
    similarity_score: int
    issues: List[Issue]
    content: ContentEvalResult
    rubric: RubricResult
    details: AnalysisDetails
    timings: Dict[str, float] = Field(default_factory=dict)
