"""Embedding service main application."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from .api.routes import router as api_router
from .runtime.metrics import get_metrics_collector
from lingvec.common.config import EmbeddingServiceConfig
from lingvec.common.logging import configure_logging
from lingvec.embedding_store import EmbeddingManager, EmbeddingStoreError

logger = structlog.get_logger("embedding_service")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config: EmbeddingServiceConfig = getattr(app.state, "config", None) or EmbeddingServiceConfig()
    configure_logging("embedding-service", config.lingvec_log_level, config.lingvec_log_format)
    app.state.config = config
    app.state.startup_time = time.time()

    logger.info("Starting embedding service")

    app.state.metrics_collector = get_metrics_collector("embedding-service")
    if not hasattr(app.state, "embedding_manager"):
        app.state.embedding_manager = EmbeddingManager(config, metrics=app.state.metrics_collector)

    for code in config.preload_languages:
        try:
            app.state.embedding_manager.load_language(code)
        except EmbeddingStoreError as e:
            logger.warning("Preload failed", language=code, error=str(e))

    logger.info(
        "Embedding service started successfully",
        languages_loaded=app.state.embedding_manager.loaded_languages()
    )

    yield

    # Shutdown
    logger.info("Shutting down embedding service")
    app.state.embedding_manager.close()
    logger.info("Embedding service shutdown complete")


app = FastAPI(
    title="Embedding Service",
    description="Multilingual word vectors and cross-lingual nearest neighbors",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


def endpoint_label(request: Request) -> str:
    """Route template of the matched route; unmatched paths share one label."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "unmatched"


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Collect metrics for HTTP requests."""
    start_time = time.time()

    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as e:
        logger.exception("Unhandled request error", path=request.url.path)
        status_code = 500
        response = JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(e)}
        )

    duration = time.time() - start_time

    if hasattr(app.state, 'metrics_collector'):
        app.state.metrics_collector.record_http_request(
            method=request.method,
            endpoint=endpoint_label(request),
            status=status_code,
            duration=duration
        )

    return response


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    if hasattr(app.state, 'embedding_manager'):
        return {"status": "healthy", "service": "embedding-service"}
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "service": "embedding-service"}
    )


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    if hasattr(app.state, 'metrics_collector'):
        metrics_data = app.state.metrics_collector.get_metrics()
        return Response(content=metrics_data, media_type="text/plain")
    else:
        return Response(content="# No metrics available\n", media_type="text/plain")


@app.get("/live")
async def liveness():
    """Liveness probe. Returns quickly if process is responsive."""
    return {
        "status": "alive",
        "service": "embedding-service",
        "uptime_seconds": time.time() - getattr(app.state, "startup_time", time.time())
    }


@app.get("/ready")
async def readiness():
    """Readiness probe. Ready once every preload language is in memory."""
    manager: Optional[EmbeddingManager] = getattr(app.state, "embedding_manager", None)
    config: Optional[EmbeddingServiceConfig] = getattr(app.state, "config", None)
    if manager is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "service": "embedding-service", "error": "Embedding manager not initialized"}
        )

    pending = [code for code in (config.preload_languages if config else []) if not manager.is_loaded(code)]
    if pending:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "service": "embedding-service", "pending_languages": pending}
        )

    return {
        "status": "ready",
        "service": "embedding-service",
        "languages_loaded": manager.loaded_languages()
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "embedding-service",
        "version": "0.1.0",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "metrics": "/metrics",
            "languages": "/api/v1/languages",
            "embed": "/api/v1/embed",
            "neighbors": "/api/v1/neighbors"
        },
        "probes": {
            "health": "/health",
            "live": "/live",
            "ready": "/ready"
        }
    }


if __name__ == "__main__":
    config = EmbeddingServiceConfig()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=config.lingvec_service_port,
        log_level=config.lingvec_log_level.lower()
    )
