"""Rule-based content evaluation of a single free-text answer.

Rules run in a fixed order because the banned-keyword penalty can only take
back points that earlier rules already awarded:

    similarity → keywords_all → keywords_any → keywords_banned
    → regex → length → requireVerb

Every active rule except keywords_banned adds its weight to the denominator,
pass or fail. Binary rules award their full weight. The score is
points / max_points on 0..100; a config with no active rule scores 0.
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Union

from app.core.exceptions import InvalidPatternException
from app.models.request import EvaluationConfig
from app.models.response import (
    ContentEvalResult,
    KeywordsAllReason,
    KeywordsAnyReason,
    KeywordsBannedReason,
    LengthReason,
    Reason,
    RegexReason,
    SimilarityReason,
    VerbReason,
)
from app.services.evaluation.language import (
    LANGUAGE_PROFILES,
    LanguageProfile,
    VerbDetector,
    default_verb_detectors,
    has_verb,
)
from app.services.evaluation.metrics import clamp, count_keywords, round_half_up, similarity_ratio
from app.services.evaluation.normalizer import tokenize

logger = logging.getLogger(__name__)

ConfigLike = Union[EvaluationConfig, Mapping[str, Any], None]


def as_config(config: ConfigLike) -> EvaluationConfig:
    if isinstance(config, EvaluationConfig):
        return config
    return EvaluationConfig.model_validate(dict(config or {}))


def _all_patterns_match(patterns: List[str], text: str) -> bool:
    for pattern in patterns:
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise InvalidPatternException(
                f"Invalid regex pattern: {pattern!r}",
                details={"pattern": pattern, "error": str(e)},
            ) from e
        if not compiled.search(text):
            return False
    return True


class ContentEvaluator:
    def __init__(
        self,
        profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES,
        verb_detectors: Optional[Mapping[str, VerbDetector]] = None,
    ):
        self.profiles = profiles
        self.verb_detectors = verb_detectors if verb_detectors is not None else default_verb_detectors(profiles)

    def evaluate(self, text: Optional[str], config: ConfigLike = None, lang: Optional[str] = "fr") -> ContentEvalResult:
        cfg = as_config(config)
        text = text or ""
        w = cfg.weights
        kw = cfg.keywords

        reasons: List[Reason] = []
        points = 0.0
        max_points = 0.0

        # 1) similarity to the expected answer
        if cfg.expected_answer:
            sim = similarity_ratio(text, cfg.expected_answer)
            pts = round_half_up(sim / 100 * w.similarity)
            points += pts
            max_points += w.similarity
            reasons.append(SimilarityReason(
                value=sim, weight=w.similarity, points=pts, threshold=cfg.similarity_threshold,
            ))

        # 2) required keywords, proportional
        if kw.all:
            c = count_keywords(text, kw.all)
            ratio = c.found / c.total if c.total else 0
            pts = round_half_up(ratio * w.all)
            points += pts
            max_points += w.all
            reasons.append(KeywordsAllReason(
                found=c.found, total=c.total, pct=c.pct, weight=w.all, points=pts,
            ))

        # 3) optional keywords, all or nothing
        if kw.any:
            c = count_keywords(text, kw.any)
            ok = c.found >= max(1, cfg.any_at_least)
            pts = w.any if ok else 0
            points += pts
            max_points += w.any
            reasons.append(KeywordsAnyReason(
                found=c.found, total=c.total, required=cfg.any_at_least, weight=w.any, points=pts,
            ))

        # 4) banned keywords take back points, never below zero
        if kw.banned:
            c = count_keywords(text, kw.banned)
            penalty = 0.0
            if c.found > 0:
                penalty = min(points, w.penalty_banned)
                points -= penalty
            reasons.append(KeywordsBannedReason(found=c.found, penalty=penalty))

        # 5) regex, on the raw text
        if cfg.regex:
            ok = _all_patterns_match(cfg.regex, text)
            pts = w.regex if ok else 0
            points += pts
            max_points += w.regex
            reasons.append(RegexReason(ok=ok, weight=w.regex, points=pts))

        # 6) word count bounds, 0 means unbounded
        if cfg.min_words or cfg.max_words:
            word_count = len(tokenize(text))
            ok_min = word_count >= cfg.min_words if cfg.min_words else True
            ok_max = word_count <= cfg.max_words if cfg.max_words else True
            pts = w.length if (ok_min and ok_max) else 0
            points += pts
            max_points += w.length
            reasons.append(LengthReason(
                word_count=word_count, min_words=cfg.min_words, max_words=cfg.max_words,
                weight=w.length, points=pts,
            ))

        # 7) verb presence
        if cfg.require_verb:
            hv = has_verb(text, lang, detectors=self.verb_detectors, profiles=self.profiles)
            pts = w.verb if hv else 0
            points += pts
            max_points += w.verb
            reasons.append(VerbReason(has_verb=hv, weight=w.verb, points=pts))

        content_score = clamp(round_half_up(points / max_points * 100)) if max_points > 0 else 0
        result = ContentEvalResult(content_score=content_score, is_correct=False, reasons=reasons)
        result.is_correct = self._is_correct(cfg, result)

        logger.debug(f"Content evaluation: score={content_score} points={points}/{max_points} rules={len(reasons)}")
        return result

    @staticmethod
    def _is_correct(cfg: EvaluationConfig, result: ContentEvalResult) -> bool:
        if cfg.expected_answer:
            sim = result.reason("similarity")
            return (sim.value if sim else 0) >= cfg.similarity_threshold

        all_r = result.reason("keywords_all")
        any_r = result.reason("keywords_any")
        banned_r = result.reason("keywords_banned")
        regex_r = result.reason("regex")

        all_ok = all_r.found == all_r.total if all_r else True
        any_ok = any_r.found >= max(1, any_r.required) if any_r else True
        banned_ok = banned_r.found == 0 if banned_r else True
        regex_ok = regex_r.ok if regex_r else True
        return all_ok and any_ok and banned_ok and regex_ok


@lru_cache()
def get_content_evaluator() -> ContentEvaluator:
    return ContentEvaluator()


def evaluate_answer(text: Optional[str], config: ConfigLike = None, lang: Optional[str] = "fr") -> ContentEvalResult:
    return get_content_evaluator().evaluate(text, config, lang)
