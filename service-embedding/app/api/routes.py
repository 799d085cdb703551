"""API routes for the embedding service."""

import math
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field
import structlog

from lingvec.embedding_store import (
    EmbeddingManager,
    InvalidArgumentError,
    InvalidTableError,
    LanguageNotLoadedError,
    ModelNotFoundError,
)

logger = structlog.get_logger("embedding_service.api")

router = APIRouter()


class LanguageInfo(BaseModel):
    """Catalog entry model."""
    code: str = Field(..., description="Language code")
    name: str = Field(..., description="Language name")
    installed: bool = Field(..., description="Model artifact present in the model source")
    loaded: bool = Field(..., description="Table currently held in memory")


class LoadResponse(BaseModel):
    """Response model for language load endpoint."""
    code: str = Field(..., description="Language code")
    size: int = Field(..., description="Vocabulary size")
    dimension: int = Field(..., description="Vector dimension")
    latency_ms: float = Field(..., description="Load latency in milliseconds")


class EmbedRequest(BaseModel):
    """Request model for embedding endpoint."""
    words: List[str] = Field(..., description="Words to embed, in order")
    lang: str = Field("en", description="Language code of the words")


class EmbedResponse(BaseModel):
    """Response model for embedding endpoint."""
    lang: str = Field(..., description="Language code used")
    dimension: int = Field(..., description="Vector dimension")
    vectors: List[Optional[List[float]]] = Field(..., description="One row per word, null when not in vocabulary")
    missing: List[str] = Field(..., description="Input words not found in the vocabulary")
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


class NeighborsRequest(BaseModel):
    """Request model for nearest-neighbor endpoint."""
    words: List[str] = Field(..., description="Query words, in order")
    lang: str = Field("en", description="Language code of the query words")
    lang_out: Optional[str] = Field(None, description="Language code of the neighbors; defaults to lang")
    k: Optional[int] = Field(None, description="Neighbors per word; defaults to the configured value")


class NeighborsResponse(BaseModel):
    """Response model for nearest-neighbor endpoint."""
    lang: str = Field(..., description="Language code of the query words")
    lang_out: str = Field(..., description="Language code of the neighbors")
    k: int = Field(..., description="Neighbors per word")
    neighbors: List[Optional[List[str]]] = Field(..., description="Ranked neighbors per word, null when not in vocabulary")
    scores: List[Optional[List[Optional[float]]]] = Field(..., description="Cosine similarities aligned with neighbors")
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


def get_embedding_manager(request: Request) -> EmbeddingManager:
    """Get embedding manager from application state."""
    return request.app.state.embedding_manager


def _finite_or_none(values: Optional[List[float]]) -> Optional[List[Optional[float]]]:
    if values is None:
        return None
    return [value if math.isfinite(value) else None for value in values]


@router.get("/languages", response_model=List[LanguageInfo])
async def list_languages(
    embedding_manager: EmbeddingManager = Depends(get_embedding_manager)
):
    """List catalog languages with installed/loaded flags."""
    entries = await run_in_threadpool(embedding_manager.list_languages)
    logger.info("Languages listed", count=len(entries))
    return [LanguageInfo(**entry.to_dict()) for entry in entries]


@router.post("/languages/{code}/load", response_model=LoadResponse)
async def load_language(
    code: str,
    embedding_manager: EmbeddingManager = Depends(get_embedding_manager)
):
    """Load (or reload) a language table into memory."""
    if code not in embedding_manager.registry.catalog:
        raise HTTPException(status_code=404, detail=f"Unknown language code: {code}")

    start_time = time.time()
    try:
        table = await run_in_threadpool(embedding_manager.load_language, code)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTableError as e:
        raise HTTPException(status_code=500, detail=f"Model file for '{code}' is invalid: {e}")

    return LoadResponse(
        code=code,
        size=len(table),
        dimension=table.dimension,
        latency_ms=(time.time() - start_time) * 1000
    )


@router.delete("/languages/{code}")
async def unload_language(
    code: str,
    embedding_manager: EmbeddingManager = Depends(get_embedding_manager)
):
    """Release a loaded language table."""
    if not embedding_manager.unload_language(code):
        raise HTTPException(status_code=404, detail=f"Language {code} is not loaded")
    return {"status": "success", "message": f"Language {code} unloaded"}


@router.post("/embed", response_model=EmbedResponse)
async def embed(
    request: EmbedRequest,
    embedding_manager: EmbeddingManager = Depends(get_embedding_manager)
):
    """Return the vector of each input word."""
    start_time = time.time()
    try:
        result = await run_in_threadpool(embedding_manager.lookup, request.words, request.lang)
    except LanguageNotLoadedError as e:
        raise HTTPException(status_code=409, detail=str(e))

    latency_ms = (time.time() - start_time) * 1000
    logger.info(
        "Embeddings returned",
        lang=request.lang,
        count=len(result),
        missing=len(result.missing_words),
        latency_ms=latency_ms
    )
    return EmbedResponse(
        lang=request.lang,
        dimension=result.vectors.shape[1],
        vectors=result.rows(),
        missing=result.missing_words,
        latency_ms=latency_ms
    )


@router.post("/neighbors", response_model=NeighborsResponse)
async def neighbors(
    request: NeighborsRequest,
    embedding_manager: EmbeddingManager = Depends(get_embedding_manager)
):
    """Return the nearest neighbors of each input word."""
    start_time = time.time()
    lang_out = request.lang_out or request.lang
    try:
        result = await run_in_threadpool(
            embedding_manager.nearest_neighbors,
            request.words,
            request.lang,
            lang_out,
            request.k
        )
    except LanguageNotLoadedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidArgumentError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return NeighborsResponse(
        lang=request.lang,
        lang_out=lang_out,
        k=result.k,
        neighbors=result.labels,
        scores=[_finite_or_none(row) for row in result.scores],
        latency_ms=(time.time() - start_time) * 1000
    )
