"""Per-language tables and verb detection.

Everything language-specific (discourse connectors, verb hints, which spaCy
pipeline to ask) lives in one immutable lookup keyed by ISO-639-1 tag, with
an explicit fallback profile for languages we know nothing about.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Tuple

import spacy
from spacy.language import Language

logger = logging.getLogger(__name__)

UNDETERMINED = "und"


@dataclass(frozen=True)
class LanguageProfile:
    code: str
    connectors: Tuple[str, ...] = ()
    # fragments scanned in " " + lower(text) + " " when no verb was detected structurally
    verb_hints: Tuple[str, ...] = ()
    spacy_model: Optional[str] = None


_FR_VERB_HINTS = (
    " ai ", " as ", " a ", " avons ", " avez ", " ont ",
    " suis ", " es ", " est ", " sommes ", " êtes ", " sont ",
    "er ", "ez ", "e ", "ons ", "ent ", "ait ", "ais ", "aient ",
)

LANGUAGE_PROFILES: Mapping[str, LanguageProfile] = MappingProxyType({
    "fr": LanguageProfile(
        code="fr",
        connectors=("d'abord", "ensuite", "puis", "enfin", "cependant", "toutefois",
                    "par conséquent", "de plus", "en revanche"),
        verb_hints=_FR_VERB_HINTS,
        spacy_model="fr_core_news_sm",
    ),
    "en": LanguageProfile(
        code="en",
        connectors=("first", "then", "next", "finally", "however", "nevertheless",
                    "therefore", "moreover", "on the other hand"),
        spacy_model="en_core_web_sm",
    ),
    "de": LanguageProfile(
        code="de",
        connectors=("zuerst", "dann", "danach", "schließlich", "jedoch", "trotzdem",
                    "deshalb", "außerdem", "andererseits"),
        spacy_model="de_core_news_sm",
    ),
    "es": LanguageProfile(
        code="es",
        connectors=("primero", "luego", "después", "finalmente", "sin embargo",
                    "no obstante", "por lo tanto", "además", "por otro lado"),
        spacy_model="es_core_news_sm",
    ),
    "it": LanguageProfile(code="it", spacy_model="it_core_news_sm"),
    "pt": LanguageProfile(code="pt", spacy_model="pt_core_news_sm"),
    "nl": LanguageProfile(code="nl", spacy_model="nl_core_news_sm"),
    "pl": LanguageProfile(code="pl", spacy_model="pl_core_news_sm"),
    "ru": LanguageProfile(code="ru", spacy_model="ru_core_news_sm"),
    "ja": LanguageProfile(code="ja", spacy_model="ja_core_news_sm"),
    "zh": LanguageProfile(code="zh", spacy_model="zh_core_web_sm"),
    "ko": LanguageProfile(code="ko", spacy_model="ko_core_news_sm"),
    "tr": LanguageProfile(code="tr"),
    "ar": LanguageProfile(code="ar"),
})

FALLBACK_PROFILE = LanguageProfile(code=UNDETERMINED)

SUPPORTED_LANGUAGES = frozenset(LANGUAGE_PROFILES)


def get_profile(lang: Optional[str], profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES) -> LanguageProfile:
    code = (lang or "").strip().lower().split("-")[0]
    return profiles.get(code, FALLBACK_PROFILE)


class VerbDetector(Protocol):
    def detect(self, text: str) -> Optional[bool]:
        """True/False when a verb was (not) found, None when the capability is unavailable."""
        ...


@lru_cache(maxsize=None)
def _load_pipeline(model: str) -> Optional[Language]:
    try:
        return spacy.load(model, exclude=["parser", "ner", "lemmatizer", "textcat"])
    except OSError as e:
        # model package not installed: treat the capability as absent
        logger.warning(f"spaCy model '{model}' unavailable, verb detection falls back to heuristics: {e}")
        return None


class SpacyVerbDetector:
    """Asks a spaCy pipeline for VERB/AUX tokens. The pipeline loads on first use."""

    def __init__(self, model: str):
        self.model = model

    def detect(self, text: str) -> Optional[bool]:
        nlp = _load_pipeline(self.model)
        if nlp is None:
            return None
        doc = nlp(text or "")
        return any(tok.pos_ in ("VERB", "AUX") for tok in doc)


def default_verb_detectors(
    profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES,
) -> Mapping[str, VerbDetector]:
    return MappingProxyType({
        code: SpacyVerbDetector(p.spacy_model) for code, p in profiles.items() if p.spacy_model
    })


def has_verb_hint(text: Optional[str], profile: LanguageProfile) -> bool:
    if not profile.verb_hints:
        return False
    lower = f" {(text or '').lower()} "
    return any(h in lower for h in profile.verb_hints)


def has_verb(
    text: Optional[str],
    lang: Optional[str],
    detectors: Optional[Mapping[str, VerbDetector]] = None,
    profiles: Mapping[str, LanguageProfile] = LANGUAGE_PROFILES,
) -> bool:
    profile = get_profile(lang, profiles)
    if detectors is None:
        detectors = default_verb_detectors(profiles)
    detector = detectors.get(profile.code)

    if detector is not None and detector.detect(text or ""):
        return True
    return has_verb_hint(text, profile)
