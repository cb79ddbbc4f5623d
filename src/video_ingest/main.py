"""FastAPI application entrypoint for the video-processor function."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from video_ingest.api.routes import router
from video_ingest.config import settings
from video_ingest.logging_config import configure_logging

logger = structlog.get_logger()

# Always-allow CORS, same headers the hosted function answered with
_CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
_CORS_HEADERS = ["Content-Type", "Authorization"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging once and report the wiring in use."""
    configure_logging()
    logger.info(
        "app.startup",
        storage_backend=settings.storage_backend,
        videos_bucket=settings.videos_bucket,
        thumbnails_bucket=settings.thumbnails_bucket,
        ffmpeg_bin=settings.ffmpeg_bin,
    )
    yield
    logger.info("app.shutdown")


app = FastAPI(
    title="Video Ingest",
    description="Thumbnail extraction and metadata persistence for uploaded videos",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=_CORS_METHODS,
    allow_headers=_CORS_HEADERS,
)

app.include_router(router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
