# app/models/rubric.py
from typing import Dict, List, Optional

from pydantic import ConfigDict, Field

from app.models.base import CamelModel

PILLARS: tuple = ("content", "organization", "lexis", "grammar", "mechanics")


class PillarWeights(CamelModel):
    """Percentages per pillar. They usually sum to 100 but are not renormalized."""
    model_config = ConfigDict(frozen=True)

    content: float = Field(default=0, ge=0)
    organization: float = Field(default=0, ge=0)
    lexis: float = Field(default=0, ge=0)
    grammar: float = Field(default=0, ge=0)
    mechanics: float = Field(default=0, ge=0)


class Rubric(CamelModel):
    model_config = ConfigDict(frozen=True)

    name: str = "writing_default"
    weights: PillarWeights


class GrammarFinding(CamelModel):
    """One issue reported by the external grammar checker."""
    issue_category: str = ""
    rule_id: Optional[str] = None
    description: Optional[str] = None
    offset: int = 0
    length: int = 0
    message: str = ""
    short_message: Optional[str] = None
    replacements: List[str] = Field(default_factory=list)


class GrammarScores(CamelModel):
    grammar_score: int
    spelling_score: int
    grammar_err: int
    spelling_err: int


class OrganizationMetrics(CamelModel):
    paragraphs: int
    words: int
    found_connectors: int
    para_score: int
    conn_score: int


class LexisMetrics(CamelModel):
    total: int
    types: int
    ttr: float
    ttr_score: int
    repeated_top: List[str]
    penalty: int
    lexis_score: int


class RubricBreakdown(CamelModel):
    content: int
    organization: int
    lexis: int
    grammar: int
    mechanics: int


class RubricDetails(CamelModel):
    semantic: Optional[int] = None
    semantic_error: Optional[str] = None
    organization: OrganizationMetrics
    lexis: LexisMetrics
    grammar: GrammarScores


class RubricResult(CamelModel):
    rubric: str
    overall: int
    breakdown: RubricBreakdown
    details: RubricDetails

    def pillar_scores(self) -> Dict[str, int]:
        return self.breakdown.model_dump()
