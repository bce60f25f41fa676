"""FastAPI application entry point for chuuana."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from chuuana import __version__
from chuuana.api import picks
from chuuana.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    logger.info(f"Starting chuuana {__version__} (strong field policy: {settings.strong_field_policy})")
    yield
    logger.info("Shutting down chuuana")


app = FastAPI(
    title="chuuana",
    description="Mid-tier place-bet picks from pasted race cards",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.include_router(picks.router, prefix="/api", tags=["picks"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chuuana.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
