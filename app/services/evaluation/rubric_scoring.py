from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from app.core.async_manager import guarded
from app.core.config import settings
from app.models.rubric import (
    GrammarFinding,
    GrammarScores,
    LexisMetrics,
    OrganizationMetrics,
    PILLARS,
    Rubric,
    RubricBreakdown,
    RubricDetails,
    RubricResult,
)
from app.services.evaluation.lexis import lexis_metrics
from app.services.evaluation.metrics import round_half_up
from app.services.evaluation.organization import organization_metrics
from app.services.evaluation.language import LANGUAGE_PROFILES, LanguageProfile
from app.services.evaluation.scoring import grammar_spelling_scores
from app.client.bootstrap import SimilarityService

logger = logging.getLogger(__name__)


def weighted_overall(scores: Mapping[str, float], rubric: Rubric) -> int:
    """Σ pillar × weight/100. Weights are taken as given, never renormalized."""
    weights = rubric.weights.model_dump()
    total = sum(float(scores.get(p, 0)) * (float(weights.get(p, 0)) / 100) for p in PILLARS)
    return round_half_up(total)


def combine_pillars(
    *,
    rubric: Rubric,
    semantic: Optional[int],
    has_expected_answer: bool,
    grammar: GrammarScores,
    organization: OrganizationMetrics,
    lexis: LexisMetrics,
    semantic_error: Optional[str] = None,
) -> RubricResult:
    """Pure arithmetic part of the aggregation, no collaborator involved."""
    content = (semantic or 0) if has_expected_answer else 0
    organization_pillar = round_half_up(organization.para_score * 0.5 + organization.conn_score * 0.5)
    lexis_pillar = lexis.lexis_score
    # mechanics = spelling & punctuation, taken from the spelling score
    mechanics = grammar.spelling_score

    breakdown = RubricBreakdown(
        content=round_half_up(content),
        organization=organization_pillar,
        lexis=round_half_up(lexis_pillar),
        grammar=round_half_up(grammar.grammar_score),
        mechanics=round_half_up(mechanics),
    )

    return RubricResult(
        rubric=rubric.name,
        overall=weighted_overall(breakdown.model_dump(), rubric),
        breakdown=breakdown,
        details=RubricDetails(
            semantic=semantic,
            semantic_error=semantic_error,
            organization=organization,
            lexis=lexis,
            grammar=grammar,
        ),
    )


class RubricAggregator:
    """Blends content, organization, lexis, grammar and mechanics into one grade.

    The semantic-similarity collaborator is only called when an expected answer
    is supplied; if it is unavailable the content pillar scores 0 and
    `details.semantic` stays None.
    """

    def __init__(
        self,
        similarity: SimilarityService,
        *,
        timeout: Optional[float] = None,
        grammar_pts_per_error: Optional[float] = None,
        spelling_pts_per_error: Optional[float] = None,
        profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES,
    ):
        self.similarity = similarity
        self.timeout = timeout if timeout is not None else settings.EMB_TIMEOUT_S
        self.grammar_pts_per_error = grammar_pts_per_error
        self.spelling_pts_per_error = spelling_pts_per_error
        self.profiles = profiles

    async def aggregate(
        self,
        text: str,
        lang: Optional[str],
        grammar_findings: Optional[Sequence[GrammarFinding]],
        expected_answer: Optional[str],
        rubric: Rubric,
    ) -> RubricResult:
        grammar = grammar_spelling_scores(
            grammar_findings, self.grammar_pts_per_error, self.spelling_pts_per_error
        )

        semantic: Optional[int] = None
        semantic_error: Optional[str] = None
        if expected_answer:
            outcome = await guarded(
                self.similarity.similarity(text, expected_answer),
                timeout=self.timeout,
                default=None,
                label="semantic_similarity",
            )
            semantic, semantic_error = outcome.value, outcome.error

        organization = organization_metrics(text, lang, self.profiles)
        lexis = lexis_metrics(text)

        result = combine_pillars(
            rubric=rubric,
            semantic=semantic,
            has_expected_answer=bool(expected_answer),
            grammar=grammar,
            organization=organization,
            lexis=lexis,
            semantic_error=semantic_error,
        )
        logger.info(f"Rubric '{rubric.name}' overall={result.overall} breakdown={result.pillar_scores()}")
        return result


async def rubric_aggregate(
    text: str,
    lang: Optional[str],
    grammar_findings: Optional[Sequence[GrammarFinding]],
    expected_answer: Optional[str],
    rubric: Rubric,
    similarity: SimilarityService,
) -> RubricResult:
    return await RubricAggregator(similarity).aggregate(text, lang, grammar_findings, expected_answer, rubric)
