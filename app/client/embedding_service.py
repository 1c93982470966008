from __future__ import annotations

import logging
import math
from typing import Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


def to_percent(similarity: object) -> Optional[int]:
    """[0..1] similarity -> clamped 0..100 int, None when not a finite number."""
    try:
        value = float(similarity)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return max(0, min(100, int(math.floor(value * 100 + 0.5))))


class EmbeddingServiceClient:
    """Semantic similarity from the embeddings micro-service (POST /similarity {a, b})."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.EMB_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.EMB_TIMEOUT_S
        self._transport = transport

    async def similarity(self, a: str, b: str) -> Optional[int]:
        if not self.base_url or not a or not b:
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(f"{self.base_url}/similarity", json={"a": a, "b": b})
            resp.raise_for_status()
            data = resp.json()

        sim = to_percent((data or {}).get("similarity", 0))
        if sim is None:
            logger.warning(f"Embeddings service returned a non-numeric similarity: {data!r}")
        return sim
