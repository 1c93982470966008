# app/core/dependencies.py
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from app.client.bootstrap import SimilarityService, build_similarity_service
from app.client.languagetool import LanguageToolClient
from app.core.config import settings
from app.services.evaluation.content_eval import ContentEvaluator, get_content_evaluator
from app.services.text_analyzer import TextAnalyzer
from app.utils.rubric_loader import RubricLoader

logger = logging.getLogger(__name__)

# Process-wide, read-only collaborators. Each request gets its own TextAnalyzer.

@lru_cache()
def get_rubric_loader() -> RubricLoader:
    return RubricLoader(rubric_file=settings.RUBRIC_FILE or None, default_name=settings.RUBRIC_NAME)

@lru_cache()
def get_similarity_service() -> SimilarityService:
    return build_similarity_service(settings)

def get_languagetool() -> LanguageToolClient:
    return LanguageToolClient()

def get_evaluator() -> ContentEvaluator:
    return get_content_evaluator()

def get_text_analyzer_factory(
    languagetool: LanguageToolClient = Depends(get_languagetool),
    similarity: SimilarityService = Depends(get_similarity_service),
    loader: RubricLoader = Depends(get_rubric_loader),
    evaluator: ContentEvaluator = Depends(get_evaluator),
):
    def _build(rubric_name: Optional[str] = None) -> TextAnalyzer:
        return TextAnalyzer(
            languagetool=languagetool,
            similarity=similarity,
            rubric=loader.get(rubric_name),
            content_evaluator=evaluator,
        )
    return _build
