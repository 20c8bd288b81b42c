"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from backend.config import settings
from backend.api.routes import conditions, locations
from conditions_pipeline.errors import (
    ConditionsError,
    InvalidInput,
    NoDataForLocation,
    NoDataForTime,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log provider configuration on startup."""
    if not settings.stormglass_api_key:
        logger.info("Stormglass API key not set, marine and weather use Open-Meteo")
    if not settings.worldtides_api_key:
        logger.warning("WorldTides API key not set, tide requests may be rejected")
    yield

# orjson handles the aware datetimes in reports
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    redirect_slashes=False,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(conditions.router)
app.include_router(locations.router)


@app.exception_handler(ConditionsError)
async def conditions_error_handler(request: Request, exc: ConditionsError):
    """Turn pipeline errors into a single human-readable message."""
    if isinstance(exc, InvalidInput):
        status_code = 422
    elif isinstance(exc, (NoDataForLocation, NoDataForTime)):
        status_code = 404
    else:
        status_code = 502
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return ORJSONResponse(status_code=status_code, content={"detail": exc.user_message})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "docs": "/docs",
        "endpoints": ["/conditions", "/locations/search", "/locations/coastline-bearing", "/locations/reverse"],
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
