from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Optional, Sequence

from app.core.config import settings
from app.models.rubric import GrammarFinding, GrammarScores
from app.services.evaluation.language import VerbDetector, has_verb
from app.services.evaluation.metrics import round_half_up

# LanguageTool issue types: "misspelling", "typographical", "grammar", "style", ...
_SPELLING_TYPE = re.compile(r"spelling|typographical", re.IGNORECASE)
_SPELLING_RULE = re.compile(r"spelling", re.IGNORECASE)


def is_spelling_issue(finding: GrammarFinding) -> bool:
    return bool(
        _SPELLING_TYPE.search(finding.issue_category or "")
        or _SPELLING_RULE.search(finding.rule_id or "")
    )


def grammar_spelling_scores(
    findings: Optional[Sequence[GrammarFinding]],
    grammar_pts_per_error: Optional[float] = None,
    spelling_pts_per_error: Optional[float] = None,
) -> GrammarScores:
    """Linear penalty per finding, floored at 0, one score per category."""
    if grammar_pts_per_error is None:
        grammar_pts_per_error = settings.GRAMMAR_PTS_PER_ERROR
    if spelling_pts_per_error is None:
        spelling_pts_per_error = settings.SPELLING_PTS_PER_ERROR

    grammar_err = 0
    spelling_err = 0
    for f in findings or []:
        if is_spelling_issue(f):
            spelling_err += 1
        else:
            grammar_err += 1

    return GrammarScores(
        grammar_score=max(0, round_half_up(100 - grammar_err * grammar_pts_per_error)),
        spelling_score=max(0, round_half_up(100 - spelling_err * spelling_pts_per_error)),
        grammar_err=grammar_err,
        spelling_err=spelling_err,
    )


def structure_heuristics(
    text: Optional[str],
    expected_keywords: Optional[Sequence[Any]] = None,
    lang: Optional[str] = "fr",
    detectors: Optional[Mapping[str, VerbDetector]] = None,
) -> Dict[str, Any]:
    """Quick structural signals: verb presence and plain lower-case keyword coverage."""
    keywords = list(expected_keywords or [])
    base = (text or "").lower()
    found = sum(1 for k in keywords if k and str(k).lower() in base)

    return {
        "has_verb": has_verb(text, lang, detectors=detectors),
        "keyword_score": round_half_up(found / len(keywords) * 100) if keywords else None,
        "found": found,
        "total": len(keywords),
    }
