"""
FastAPI application entry point for the EODSA results engine backend.

This module initializes the FastAPI application with:
- Explicit one-time startup initialization (logging, settings check,
  optional schema creation)
- CORS middleware for the competition frontend
- Exception handlers for consistent error responses
- Engine routers under /api

Environment Variables:
    EODSA_JWT_SECRET_KEY: Token signing key (required)
    EODSA_DB_URL: Database URL
    EODSA_AUTO_CREATE_SCHEMA: Create tables at boot (default: false)
    EODSA_ENV: Environment (production/development, default: development)
    EODSA_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
"""

import sys
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from backend.src.config.settings import get_settings
from backend.src.db.database import init_db, dispose_engine
from backend.src.utils.logging_config import init_logging, get_logger


APP_VERSION = "1.0.0"


def validate_settings() -> None:
    """
    Validate that EODSA_JWT_SECRET_KEY is configured.

    Raises:
        SystemExit: If the secret is not set
    """
    if not get_settings().jwt_configured:
        print(
            "\n" + "=" * 70,
            "\nERROR: EODSA_JWT_SECRET_KEY environment variable is not set.",
            "\n\nThe key signs judge bearer tokens and must be at least",
            "\n32 characters long.",
            "\n" + "=" * 70 + "\n",
            file=sys.stderr
        )
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup runs once per process before any request is served:
    validate settings, then create the schema if EODSA_AUTO_CREATE_SCHEMA
    is set. Shutdown disposes the connection pool.
    """
    logger = get_logger("api")
    logger.info("Starting EODSA results engine")

    validate_settings()

    if get_settings().auto_create_schema:
        get_logger("db").info("Creating database schema")
        init_db()

    logger.info("EODSA results engine started successfully")

    yield

    logger.info("Shutting down EODSA results engine")
    dispose_engine()


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="EODSA Results Engine API",
    description="Rankings, fees, running order and judge allocation "
                "for EODSA dance competitions.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors raised outside request parsing."""
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "errors": exc.errors(),
        }},
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": exc.errors(include_url=False, include_context=False),
        }
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handle SQLAlchemy database errors."""
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Database Error",
            "message": "An error occurred while accessing the database. "
                      "Please try again later.",
        }
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={"extra_fields": {
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        }},
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "eodsa-results-engine",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import (  # noqa: E402
    entries,
    fees,
    judge_assignments,
    performances,
    rankings,
    scores,
)

app.include_router(entries.router, prefix="/api")
app.include_router(performances.router, prefix="/api")
app.include_router(judge_assignments.router, prefix="/api")
app.include_router(rankings.router, prefix="/api")
app.include_router(fees.router, prefix="/api")
app.include_router(scores.router, prefix="/api")
