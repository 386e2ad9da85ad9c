"""
Hybrid Reranker - FastAPI application for candidate re-ranking

Final re-ranking stage of a retrieval pipeline:
- Upstream retriever (vector / full-text / hybrid search) supplies candidates
- This service fuses semantic, BM25 and recency signals into one score
- Returns the top-N candidates, each augmented with rerank_score and bm25_raw

Everything runs in-process: no database, no model downloads, no network calls.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

# Load .env.local first (highest priority), then .env as fallback
env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .logging_config import setup_logging
from .reranking import get_reranker, rerank_request
from .reranking.factory import RerankingFactory

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
setup_logging(
    log_file=os.getenv("LOG_FILE") or None,
    console_level=getattr(logging, log_level, logging.INFO),
)

logger = logging.getLogger(__name__)

PORT = int(os.getenv("PORT", "8080"))

# Version tracking
APP_VERSION = "0.1.0"
APP_START_TIME = datetime.now(timezone.utc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the env-configured reranker once, drop it on shutdown"""
    reranker = get_reranker(force_reload=True)
    logger.info(f"Reranker ready: {reranker.get_model_info()['fusion']} fusion")

    yield

    logger.info("Shutting down...")
    RerankingFactory.cleanup()


app = FastAPI(
    title="Hybrid Reranker API",
    description="Offline hybrid reranking (semantic + BM25 + recency)",
    version=APP_VERSION,
    lifespan=lifespan,
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float


class RerankHTTPRequest(BaseModel):
    """
    Rerank request body.

    Fields are typed loosely on purpose: type errors are reported through
    the reranker's own error record, not as HTTP 422.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    query: Any = Field(None, description="User query")
    query_embedding: Any = Field(None, description="Query embedding vector (may be empty)")
    items: Any = Field(None, description="Candidate records: [{\"json\": {\"chunk\": ...}}]")
    options: Optional[Dict[str, Any]] = Field(
        None,
        alias="config",
        description="Per-request option overrides, e.g. {\"topN\": 3, \"normalizeMethod\": \"minmax\"}",
    )


@app.get("/", response_model=dict)
async def root():
    """Service info"""
    return {
        "service": "hybrid-reranker",
        "version": APP_VERSION,
        "reranker": get_reranker().get_model_info(),
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME.isoformat(),
        uptime_seconds=uptime,
    )


@app.post("/v1/rerank", response_model=List[Dict[str, Any]])
def rerank(request: RerankHTTPRequest):
    """
    Rerank candidates by fused semantic + lexical + recency score.

    **Parameters:**
    - `query` (str): Query text
    - `query_embedding` (list[float]): Query vector, may be empty
    - `items` (list): Candidate records `{"json": {"chunk", "embedding"?, "score"?, "timestamp"?}}`
    - `config` (dict, optional): Overrides of the server defaults
      (`topN`, `batchSize`, `semWeight`, `lexWeight`, `exactWeight`, `timeWeight`,
      `useExternalScore`, `recencyHalfLife`, `minTokenLength`, `normalizeMethod`,
      `customStopwords`, `useModel`, `modelWeights`, `debug`)

    **Returns:** top-N records with `rerank_score` and `bm25_raw`, or a single
    `{"error": true, "message": ...}` record (always HTTP 200).
    """
    config = get_reranker().config.merged(request.options)
    payload = request.model_dump(exclude={"options"})
    return rerank_request(payload, config)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=PORT,
    )
