"""
Pytest configuration and shared fixtures
"""
import asyncio
import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.services.evaluation.content_eval import ContentEvaluator


class StubSimilarity:
    """Semantic similarity collaborator returning a fixed value."""

    def __init__(self, value: Optional[int] = None, delay: float = 0.0, error: Optional[Exception] = None):
        self.value = value
        self.delay = delay
        self.error = error
        self.calls: List[tuple] = []

    async def similarity(self, a: str, b: str) -> Optional[int]:
        self.calls.append((a, b))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


class StubVerbDetector:
    def __init__(self, answer: Optional[bool]):
        self.answer = answer
        self.seen: List[str] = []

    def detect(self, text: str) -> Optional[bool]:
        self.seen.append(text)
        return self.answer


def lt_match(message: str, issue_type: str = "grammar", rule_id: str = "SOME_RULE",
             offset: int = 0, length: int = 1, replacements: Optional[List[str]] = None) -> Dict[str, Any]:
    """One LanguageTool match, shaped like the /v2/check payload."""
    return {
        "message": message,
        "shortMessage": "",
        "offset": offset,
        "length": length,
        "replacements": [{"value": r} for r in (replacements or [])],
        "rule": {"id": rule_id, "description": f"{rule_id} description", "issueType": issue_type},
    }


def languagetool_transport(
    matches: Optional[List[Dict[str, Any]]] = None,
    detected: str = "fr",
    requests: Optional[List[Dict[str, List[str]]]] = None,
) -> httpx.MockTransport:
    """Fake LanguageTool: `language=auto` answers detection, anything else returns `matches`."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v2/check"
        form = parse_qs(request.content.decode())
        if requests is not None:
            requests.append(form)
        if form.get("language") == ["auto"]:
            body = {"language": {"detectedLanguage": {"code": detected}}, "matches": []}
        else:
            body = {"language": {"code": form["language"][0]}, "matches": matches or []}
        return httpx.Response(200, content=json.dumps(body), headers={"Content-Type": "application/json"})

    return httpx.MockTransport(handler)


def failing_transport(exc_factory: Callable[[httpx.Request], Exception] = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if exc_factory is None:
            raise httpx.ConnectError("connection refused", request=request)
        raise exc_factory(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def evaluator():
    """Content evaluator without any NLP pipeline (heuristics only)."""
    return ContentEvaluator(verb_detectors={})


@pytest.fixture
def french_essay():
    return (
        "D'abord, je prends mon petit déjeuner avec ma famille.\n\n"
        "Ensuite, je vais à l'école à pied.\n\n"
        "Enfin, je rentre à la maison. Cependant, je suis fatigué."
    )
