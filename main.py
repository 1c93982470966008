import time
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
load_dotenv()  # before any app module reads settings

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.analyse_text import router as analyse_router
from app.core.config import settings
from app.core.dependencies import get_rubric_loader, get_similarity_service
from app.core.exceptions import (
    EvaluationException,
    evaluation_exception_handler,
    unhandled_exception_handler,
)
from app.utils.tracer import get_tracer

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

STARTED_AT = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_time = time.time()
    logger.info("Starting text analysis service...")

    # Fail fast on a broken rubric file; warm the collaborator wiring
    loader = get_rubric_loader()
    logger.info(f"Rubrics available: {loader.get_available_rubrics()}")
    get_similarity_service()

    logger.info(f"Startup completed in {(time.time() - startup_time) * 1000:.1f}ms")
    yield

    logger.info("Shutting down text analysis service...")
    get_tracer().flush()


app = FastAPI(
    title="Text Analysis & Rubric Scoring",
    version="1.0.0",
    lifespan=lifespan,
)

if "*" in settings.CORS_ORIGINS:
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

app.add_exception_handler(EvaluationException, evaluation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(analyse_router)
app.include_router(analyse_router, prefix="/v1")


@app.get("/health")
async def health():
    return {"status": "ok", "uptime": time.time() - STARTED_AT, "ts": int(time.time() * 1000)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
