from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import textdistance

from app.services.evaluation.normalizer import fold, normalize

_WHITESPACE = re.compile(r"\s+")
# Dice over character bigram multisets
_BIGRAM_DICE = textdistance.Sorensen(qval=2, as_set=False, external=False)


def round_half_up(x: float) -> int:
    """Round .5 away from zero for non-negative scores (Python's round() is banker's)."""
    return int(math.floor(x + 0.5))


def clamp(x: int, lo: int = 0, hi: int = 100) -> int:
    return max(lo, min(hi, x))


def dice_coefficient(first: str, second: str) -> float:
    """Sørensen–Dice coefficient over character bigrams, whitespace ignored."""
    first = _WHITESPACE.sub("", first)
    second = _WHITESPACE.sub("", second)

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    return float(_BIGRAM_DICE.similarity(first, second))


def similarity_ratio(a: Optional[str], b: Optional[str]) -> int:
    """0..100 similarity of the normalized strings; 0 when either side is empty."""
    if not a or not b:
        return 0
    return round_half_up(dice_coefficient(normalize(a), normalize(b)) * 100)


def similarity_score(user_text: Optional[str], expected_text: Optional[str]) -> int:
    """Like similarity_ratio but on folded text (punctuation kept)."""
    if not expected_text:
        return 0
    return round_half_up(dice_coefficient(fold(user_text), fold(expected_text)) * 100)


@dataclass(frozen=True)
class KeywordCount:
    found: int
    total: int
    pct: Optional[int]


def count_keywords(text: Optional[str], keywords: Optional[Sequence[str]]) -> KeywordCount:
    """Count keywords whose normalized form occurs inside the normalized text.

    Matching is substring based: "cat" also matches "category".
    Empty entries are skipped but still count toward the total.
    """
    keywords = list(keywords or [])
    base = normalize(text)
    found = 0
    for k in keywords:
        if not k:
            continue
        if normalize(str(k)) in base:
            found += 1
    total = len(keywords)
    pct = round_half_up(found / total * 100) if total else None
    return KeywordCount(found=found, total=total, pct=pct)


def type_token_ratio(tokens: Sequence[str]) -> Dict[str, float]:
    total = len(tokens)
    ttr = len(set(tokens)) / total if total else 0.0
    ttr_score = round_half_up(min(1.0, ttr / 0.5) * 100)
    return {"ttr": ttr, "ttr_score": ttr_score}


def repetition_penalty(frequencies: Mapping[str, int], threshold: int = 4) -> Dict[str, object]:
    """Tokens seen `threshold`+ times cost 10 points each, capped at 40."""
    repeated: List[str] = [w for w, n in frequencies.items() if n >= threshold]
    return {
        "repeated_top": repeated[:5],
        "penalty": min(40, len(repeated) * 10),
    }


def token_frequencies(tokens: Iterable[str]) -> Dict[str, int]:
    # Counter keeps first-occurrence order, which repeated_top relies on
    return dict(Counter(tokens))
