"""Overflow search service FastAPI application."""
from datetime import datetime
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.middleware.request_logging import RequestLoggingMiddleware
from app.models.schemas import HealthCheck
from app.routers import search
from app.utils.exceptions import SearchIndexError

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.search_app_name,
    description="Full-text search over questions",
    version="1.0.0"
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Make sure the search collection exists."""
    logger.info("Initializing search service...")
    try:
        search.search_index.ensure_collection()
        logger.info("Search service startup complete")
    except SearchIndexError as e:
        logger.error(f"Failed to initialize search collection: {e.detail}")
        raise


app.include_router(search.router)


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow()
    )


@app.exception_handler(SearchIndexError)
async def search_index_error_handler(request, exc):
    logger.error(f"Search index error: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )
