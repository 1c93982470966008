import re
from typing import Mapping, Optional, Sequence

from app.models.rubric import OrganizationMetrics
from app.services.evaluation.language import LANGUAGE_PROFILES, LanguageProfile, get_profile
from app.services.evaluation.metrics import round_half_up

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")


def organization_score(text: Optional[str], connectors: Sequence[str]) -> OrganizationMetrics:
    """Paragraph and connector counts, each reduced to 0..100.

    3+ paragraphs saturate para_score, 4+ distinct connectors saturate conn_score.
    """
    t = (text or "").replace("\r\n", "\n").strip()
    paragraphs = len([p for p in _PARAGRAPH_BREAK.split(t) if p]) or 1
    words = len(t.split())

    lower = t.lower()
    found = sum(1 for c in dict.fromkeys(connectors) if c and c.lower() in lower)

    return OrganizationMetrics(
        paragraphs=paragraphs,
        words=words,
        found_connectors=found,
        para_score=min(100, round_half_up(paragraphs / 3 * 100)),
        conn_score=min(100, found * 25),
    )


def organization_metrics(
    text: Optional[str],
    lang: Optional[str],
    profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES,
) -> OrganizationMetrics:
    return organization_score(text, get_profile(lang, profiles).connectors)
