import re
from typing import List, Optional

from app.models.rubric import LexisMetrics
from app.services.evaluation.metrics import repetition_penalty, token_frequencies, type_token_ratio

# letters only: digits and underscore excluded from \w
_LETTER_RUN = re.compile(r"[^\W\d_]+")


def letter_tokens(text: Optional[str]) -> List[str]:
    return _LETTER_RUN.findall((text or "").lower())


def lexis_metrics(text: Optional[str]) -> LexisMetrics:
    tokens = letter_tokens(text)
    ttr = type_token_ratio(tokens)
    rep = repetition_penalty(token_frequencies(tokens))

    return LexisMetrics(
        total=len(tokens),
        types=len(set(tokens)),
        ttr=round(ttr["ttr"], 3),
        ttr_score=ttr["ttr_score"],
        repeated_top=rep["repeated_top"],
        penalty=rep["penalty"],
        lexis_score=max(0, ttr["ttr_score"] - rep["penalty"]),
    )
