import asyncio
import math
from typing import Any, List, Optional, Sequence

from openai import AzureOpenAI

from app.core.config import settings
from app.client.embedding_service import to_percent


def cosine(u: Sequence[float], v: Sequence[float]) -> float:
    dot = sum(x * y for x, y in zip(u, v))
    nu = math.sqrt(sum(x * x for x in u))
    nv = math.sqrt(sum(y * y for y in v))
    if nu == 0 or nv == 0:
        return 0.0
    return dot / (nu * nv)


class AzureOpenAIEmbeddings:
    """Semantic similarity from Azure OpenAI embeddings (cosine of the two vectors)."""

    def __init__(self, client: Optional[Any] = None, deployment: Optional[str] = None):
        self.client = client or AzureOpenAI(
            api_key=settings.AZURE_OPENAI_API_KEY,
            api_version=settings.AZURE_OPENAI_API_VERSION,
            azure_endpoint=settings.AZURE_OPENAI_ENDPOINT,
        )
        self.deployment = deployment or settings.AZURE_OPENAI_EMBEDDING_DEPLOYMENT

    async def similarity(self, a: str, b: str) -> Optional[int]:
        if not a or not b:
            return None

        def _invoke_sync() -> List[List[float]]:
            resp = self.client.embeddings.create(model=self.deployment, input=[a, b])
            return [item.embedding for item in sorted(resp.data, key=lambda d: d.index)]

        vectors = await asyncio.to_thread(_invoke_sync)
        if len(vectors) != 2:
            raise ValueError(f"Expected 2 embeddings, got {len(vectors)}")
        return to_percent(cosine(vectors[0], vectors[1]))
