from typing import Optional, Protocol, runtime_checkable
import logging

from openai import AzureOpenAI

from app.client.azure_openai import AzureOpenAIEmbeddings
from app.client.embedding_service import EmbeddingServiceClient
from app.core.config import Settings, settings

logger = logging.getLogger(__name__)


@runtime_checkable
class SimilarityService(Protocol):
    async def similarity(self, a: str, b: str) -> Optional[int]: ...


class NullSimilarity:
    """No semantic backend configured: similarity is always absent."""

    async def similarity(self, a: str, b: str) -> Optional[int]:
        return None


def build_similarity_service(cfg: Settings = settings) -> SimilarityService:
    if cfg.EMB_BASE_URL:
        logger.info(f"Semantic similarity via embeddings service at {cfg.EMB_BASE_URL}")
        return EmbeddingServiceClient(base_url=cfg.EMB_BASE_URL, timeout=cfg.EMB_TIMEOUT_S)
    if cfg.AZURE_OPENAI_EMBEDDING_DEPLOYMENT and cfg.AZURE_OPENAI_ENDPOINT:
        logger.info(f"Semantic similarity via Azure OpenAI deployment {cfg.AZURE_OPENAI_EMBEDDING_DEPLOYMENT}")
        client = AzureOpenAI(
            api_key=cfg.AZURE_OPENAI_API_KEY,
            api_version=cfg.AZURE_OPENAI_API_VERSION,
            azure_endpoint=cfg.AZURE_OPENAI_ENDPOINT,
        )
        return AzureOpenAIEmbeddings(client=client, deployment=cfg.AZURE_OPENAI_EMBEDDING_DEPLOYMENT)
    logger.info("No semantic similarity backend configured; content pillar will score 0")
    return NullSimilarity()
