"""
Ward Round Evaluation PDF Service — FastAPI Application

This is the entry point for the backend. It:
1. Configures logging
2. Creates the FastAPI app instance
3. Configures CORS (so the evaluation form can call us from the browser)
4. Registers route handlers

Run with:
    uvicorn app.main:app --reload --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.routers import evaluations

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Ward Round Evaluation PDF Service"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic.

    Code before 'yield' runs on startup.
    Code after 'yield' runs on shutdown.
    """
    logger.info("Starting %s (%s)", SERVICE_NAME, settings.APP_ENV)

    yield  # App is running, handling requests

    logger.info("Shutting down %s", SERVICE_NAME)


app = FastAPI(
    title=f"{SERVICE_NAME} API",
    description="Renders ward round evaluation forms as downloadable PDFs",
    version=SERVICE_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# --- CORS Middleware ---
# The form is a static page opened from another origin (often file://),
# and its JS needs to read Content-Disposition to name the download.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    expose_headers=["Content-Disposition"],
)

app.include_router(evaluations.router)


# --- Health Check Endpoints ---

@app.get("/", tags=["health"])
async def root():
    """Root endpoint — confirms the API is alive."""
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": SERVICE_VERSION,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Health check for load balancers. No external dependencies to probe."""
    return {
        "status": "healthy",
        "environment": settings.APP_ENV,
    }
