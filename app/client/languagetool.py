"""LanguageTool HTTP client (public API or self-hosted via LT_BASE_URL).

Used for two things: grammar/spelling findings and, with ``language=auto``,
best-effort language identification.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.models.rubric import GrammarFinding
from app.services.evaluation.language import SUPPORTED_LANGUAGES, UNDETERMINED

logger = logging.getLogger(__name__)

# shorter texts are too ambiguous to identify
MIN_DETECT_LENGTH = 10


def to_language_tag(code: Optional[str]) -> str:
    """Reduce a BCP-47 code ("en-US", "fr", "zh-CN") to a supported ISO-639-1 tag or "und"."""
    primary = (code or "").strip().lower().split("-")[0]
    return primary if primary in SUPPORTED_LANGUAGES else UNDETERMINED


def parse_matches(data: Dict[str, Any]) -> List[GrammarFinding]:
    findings: List[GrammarFinding] = []
    for m in data.get("matches") or []:
        rule = m.get("rule") or {}
        findings.append(GrammarFinding(
            issue_category=rule.get("issueType") or "",
            rule_id=rule.get("id"),
            description=rule.get("description"),
            offset=m.get("offset") or 0,
            length=m.get("length") or 0,
            message=m.get("message") or "",
            short_message=m.get("shortMessage"),
            replacements=[r.get("value", "") for r in (m.get("replacements") or []) if isinstance(r, dict)],
        ))
    return findings


class LanguageToolClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.LT_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else (settings.LT_API_KEY or None)
        self.timeout = timeout if timeout is not None else settings.LT_TIMEOUT_S
        self._transport = transport

    @property
    def check_url(self) -> str:
        return f"{self.base_url}/v2/check"

    async def _post_check(self, text: str, language: str) -> Dict[str, Any]:
        form = {
            "language": language,
            "text": text,
            "enabledOnly": "false",
        }
        if self.api_key:
            form["apiKey"] = self.api_key

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(self.check_url, data=form)
            resp.raise_for_status()
            return resp.json()

    async def check(self, text: str, lang: Optional[str] = None) -> List[GrammarFinding]:
        """Grammar/spelling findings for `text`. Raises httpx errors on failure."""
        language = lang if lang and lang != UNDETERMINED else "auto"
        data = await self._post_check(text, language)
        findings = parse_matches(data)
        logger.info(f"LanguageTool ({language}) returned {len(findings)} matches")
        return findings

    async def detect_language(self, text: str) -> str:
        if len((text or "").strip()) < MIN_DETECT_LENGTH:
            return UNDETERMINED
        data = await self._post_check(text, "auto")
        detected = ((data.get("language") or {}).get("detectedLanguage") or {}).get("code")
        tag = to_language_tag(detected)
        logger.debug(f"Detected language {detected!r} -> {tag}")
        return tag
