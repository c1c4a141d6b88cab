# Project Health - Main Application
"""
FastAPI application for the project health analyzer.
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from project_health.api import router as project_health_router
from project_health.config import get_settings

load_dotenv()
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    if not settings.clickup_api_token:
        logger.warning("ClickUp API token is not configured; analysis requests will be rejected")

    yield

    logger.info("Shutting down project health analyzer")


app = FastAPI(
    title=settings.service_name,
    version=settings.service_version,
    description="Project health scoring, risk assessment and recommendations",
    lifespan=lifespan
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.service_version,
        "data_source_configured": bool(settings.clickup_api_token),
    }


app.include_router(project_health_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "project_health.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
