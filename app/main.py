"""Overflow question service FastAPI application."""
from datetime import datetime
import logging

import psycopg2
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.database import initialize_connection_pool, close_connection_pool
from app.middleware.request_logging import RequestLoggingMiddleware
from app.models.schemas import HealthCheck
from app.routers import questions, tags
from app.utils.exceptions import BrokerError, DatabaseError

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Questions, answers and tags",
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
    """Initialize resources on application startup."""
    logger.info("Initializing application resources...")
    try:
        initialize_connection_pool()
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on application shutdown."""
    logger.info("Shutting down application...")
    try:
        close_connection_pool()
        logger.info("Application shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


app.include_router(questions.router)
app.include_router(tags.router)


@app.get("/", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    return HealthCheck(
        status="healthy",
        timestamp=datetime.utcnow()
    )


# Error handlers
@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc):
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(psycopg2.Error)
async def psycopg2_error_handler(request, exc):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    error = DatabaseError()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.detail}
    )


@app.exception_handler(BrokerError)
async def broker_error_handler(request, exc):
    # The relational write has already committed at this point.
    logger.error(f"Broker error after committed write on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )
