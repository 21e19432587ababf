"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import router
from .config import get_settings
from . import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown."""
    settings = get_settings()
    if settings.debug:
        logging.getLogger("expiry_ocr").setLevel(logging.DEBUG)

    logger.info(f"Starting {settings.app_name} - Version {__version__}")
    logger.info(f"Past-date tolerance: {settings.past_tolerance_days} day(s)")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Food Package Expiry Extraction API

Turns raw OCR text from a photographed food package into a probable
food name and expiry date for the registration form.

### Features
- **Date Parsing**: 2025.9.12, 25/9/12, 2025年9月12日, 令和7年9月12日, 20250912, ...
- **Food Names**: Common perishable foods (dairy, bread, eggs, produce, meat, fish, tofu, bento)
- **Notes**: A short residual text hint when no date could be read
- **Batch Extraction**: Many OCR texts at once from CSV

### Quick Start
1. Use `/health` to check API status
2. Use `/extract` with `{"text": "..."}` to extract fields
        """,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include routes
    app.include_router(router, prefix="/api/v1")

    # Root redirect to docs
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": settings.app_name,
            "version": __version__,
            "docs": "/docs"
        }

    return app


# Create app instance
app = create_app()
