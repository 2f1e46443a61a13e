# src/crew_deck/main.py
"""Main entry point for the Crew Deck application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from crew_deck.api.v1 import (
    comments_router,
    invites_router,
    karma_router,
    moderation_router,
    posts_router,
    roles_router,
    stations_router,
)
from crew_deck.core.errors import StationError
from crew_deck.core.settings import settings

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Station governance: roles, moderation, invites and karma",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(stations_router, prefix="/api/v1")
app.include_router(roles_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(invites_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(karma_router, prefix="/api/v1")


@app.exception_handler(StationError)
async def station_error_handler(request: Request, exc: StationError) -> JSONResponse:
    """Render service-layer failures as ``{"detail", "code"}`` payloads."""
    logger.debug("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}

@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("crew_deck.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
