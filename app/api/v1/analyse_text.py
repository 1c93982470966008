import time
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.core.dependencies import get_text_analyzer_factory
from app.models.request import AnalyseTextRequest
from app.models.response import AnalyseTextResponse

logger = logging.getLogger(__name__)


async def route_timer(request: Request) -> AsyncIterator[None]:
    start = time.perf_counter()
    method = request.method
    path = request.url.path
    request_id = f"req_{int(time.time() * 1000)}"
    request.state.request_id = request_id

    logger.info(f"[{request_id}] → {method} {path}")
    try:
        yield
    finally:
        dur_ms = (time.perf_counter() - start) * 1000.0
        slow_tag = " SLOW" if dur_ms > settings.SLOW_REQUEST_MS else ""
        logger.info(f"[{request_id}] ← {method} {path} {dur_ms:.1f}ms{slow_tag}")


router = APIRouter(dependencies=[Depends(route_timer)])


@router.post("/analyse-text", response_model=AnalyseTextResponse)
async def analyse_text(
    req: AnalyseTextRequest,
    build_analyzer=Depends(get_text_analyzer_factory),
) -> AnalyseTextResponse:
    """Grammar, heuristics, optional content evaluation and rubric score for one text."""
    analyzer = build_analyzer(req.rubric)
    return await analyzer.analyse(req)
