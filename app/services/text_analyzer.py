from __future__ import annotations

import logging
from time import perf_counter
from typing import Dict, List, Optional

from app.client.bootstrap import SimilarityService
from app.client.languagetool import LanguageToolClient
from app.core.async_manager import guarded
from app.core.config import settings
from app.models.request import AnalyseTextRequest
from app.models.response import AnalyseTextResponse, AnalysisDetails, ContentEvalResult, Issue
from app.models.rubric import GrammarFinding, Rubric
from app.services.evaluation.content_eval import ContentEvaluator
from app.services.evaluation.language import UNDETERMINED
from app.services.evaluation.metrics import similarity_score
from app.services.evaluation.rubric_scoring import RubricAggregator
from app.services.evaluation.scoring import grammar_spelling_scores, structure_heuristics

logger = logging.getLogger(__name__)

MAX_ISSUES = 100
MAX_REPLACEMENTS = 5
LT_UNREACHABLE = "LanguageTool unreachable"


def format_issues(findings: List[GrammarFinding]) -> List[Issue]:
    return [
        Issue(
            type=(f.issue_category or "grammar").lower(),
            message=f.message or f.short_message or "Issue detected",
            rule_id=f.rule_id,
            description=f.description,
            offset=f.offset,
            length=f.length,
            replacements=f.replacements[:MAX_REPLACEMENTS],
        )
        for f in findings[:MAX_ISSUES]
    ]


class TextAnalyzer:
    """Top-level orchestration for one submission.

    Flow:
      detect language → grammar check → heuristics → content eval → rubric

    External calls are awaited one after the other, each with its own timeout,
    and degrade to neutral defaults instead of failing the request.
    """

    def __init__(
        self,
        languagetool: LanguageToolClient,
        similarity: SimilarityService,
        rubric: Rubric,
        content_evaluator: Optional[ContentEvaluator] = None,
    ):
        self.languagetool = languagetool
        self.similarity = similarity
        self.rubric = rubric
        self.content_evaluator = content_evaluator or ContentEvaluator()

    async def analyse(self, req: AnalyseTextRequest) -> AnalyseTextResponse:
        t0 = perf_counter()
        timings_ms: Dict[str, float] = {}
        text = req.text

        # 1) language identification
        detected = await guarded(
            self.languagetool.detect_language(text),
            timeout=settings.LANG_DETECT_TIMEOUT_S,
            default=UNDETERMINED,
            label="language_detection",
        )
        lang = detected.value
        timings_ms["language"] = detected.elapsed_ms
        effective_lang = req.expected_lang or lang

        # 2) grammar / spelling
        checked = await guarded(
            self.languagetool.check(text, effective_lang),
            timeout=self.languagetool.timeout,
            default=[],
            label="languagetool",
        )
        findings: List[GrammarFinding] = checked.value
        lt_error = None if checked.ok else LT_UNREACHABLE
        timings_ms["grammar"] = checked.elapsed_ms

        # 3) string similarity + 4) structure heuristics
        t1 = perf_counter()
        similarity = similarity_score(text, req.expected_answer)
        struct = structure_heuristics(
            text, req.keywords, effective_lang, detectors=self.content_evaluator.verb_detectors
        )

        # 5) grammar scores
        scores = grammar_spelling_scores(findings)

        # 6) issues, 7) unexpected language first
        issues = format_issues(findings)
        if req.expected_lang and req.expected_lang != lang:
            issues.insert(0, Issue(
                type="language",
                message=f"Answer detected as '{lang}' instead of '{req.expected_lang}'.",
            ))

        # 8) configurable content evaluation
        content = ContentEvalResult()
        if req.eval_config is not None:
            content = self.content_evaluator.evaluate(text, req.eval_config, effective_lang)
        timings_ms["heuristics"] = (perf_counter() - t1) * 1000.0

        # 9) rubric
        t2 = perf_counter()
        aggregator = RubricAggregator(self.similarity)
        rubric_result = await aggregator.aggregate(
            text, effective_lang, findings, req.expected_answer, self.rubric
        )
        timings_ms["rubric"] = (perf_counter() - t2) * 1000.0
        timings_ms["total"] = (perf_counter() - t0) * 1000.0

        logger.info(
            f"Analysis done lang={lang} content={content.content_score} "
            f"overall={rubric_result.overall} lt_error={lt_error} in {timings_ms['total']:.1f}ms"
        )

        return AnalyseTextResponse(
            lang=lang,
            grammar_score=scores.grammar_score,
            spelling_score=scores.spelling_score,
            similarity_score=similarity,
            issues=issues,
            content=content,
            rubric=rubric_result,
            details=AnalysisDetails(
                grammar_errors=scores.grammar_err,
                spelling_errors=scores.spelling_err,
                lt_error=lt_error,
                has_verb=struct["has_verb"],
                keyword_score=struct["keyword_score"],
                keywords_found=struct["found"],
                keywords_total=struct["total"],
            ),
            timings=timings_ms,
        )
