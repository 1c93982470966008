# app/core/config.py
import os
from dotenv import load_dotenv

# Load .env before anything reads the environment
load_dotenv()

class Settings:
    # LanguageTool (public API unless a self-hosted instance is given)
    LT_BASE_URL: str = os.getenv("LT_BASE_URL", "").strip() or "https://api.languagetool.org"
    LT_API_KEY: str = os.getenv("LT_API_KEY", "")
    LT_TIMEOUT_S: float = float(os.getenv("LT_TIMEOUT_S", "15.0"))
    LANG_DETECT_TIMEOUT_S: float = float(os.getenv("LANG_DETECT_TIMEOUT_S", "10.0"))

    # Semantic similarity: embeddings micro-service or Azure OpenAI embeddings
    EMB_BASE_URL: str = os.getenv("EMB_BASE_URL", "").strip()
    EMB_TIMEOUT_S: float = float(os.getenv("EMB_TIMEOUT_S", "10.0"))
    AZURE_OPENAI_ENDPOINT: str = os.getenv("AZURE_OPENAI_ENDPOINT", "")
    AZURE_OPENAI_API_KEY: str = os.getenv("AZURE_OPENAI_API_KEY", "")
    AZURE_OPENAI_API_VERSION: str = os.getenv("AZURE_OPENAI_API_VERSION", "2024-10-21")
    AZURE_OPENAI_EMBEDDING_DEPLOYMENT: str = os.getenv("AZURE_OPENAI_EMBEDDING_DEPLOYMENT", "")

    # Linear penalties applied per LanguageTool match
    GRAMMAR_PTS_PER_ERROR: float = float(os.getenv("GRAMMAR_PTS_PER_ERROR", "6"))
    SPELLING_PTS_PER_ERROR: float = float(os.getenv("SPELLING_PTS_PER_ERROR", "5"))

    RUBRIC_NAME: str = os.getenv("RUBRIC_NAME", "writing_default")
    RUBRIC_FILE: str = os.getenv("RUBRIC_FILE", "")

    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    PORT: int = int(os.getenv("PORT", "8080"))
    SLOW_REQUEST_MS: float = float(os.getenv("SLOW_REQUEST_MS", "2000"))

    LANGFUSE_PUBLIC_KEY: str = os.getenv("LANGFUSE_PUBLIC_KEY", "")
    LANGFUSE_SECRET_KEY: str = os.getenv("LANGFUSE_SECRET_KEY", "")
    LANGFUSE_HOST: str = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")

settings = Settings()
