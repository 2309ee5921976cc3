"""
Gym Route Catalog FastAPI Application
Main entry point for the backend API.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gym_catalog.config import settings
from gym_catalog.exceptions import CatalogError, NotFoundError, RouteValidationError
from gym_catalog.api.v1 import gym_routes, statistics

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Climbing gym route catalog: route lifecycle, grouping and statistics",
    version="1.0.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RouteValidationError)
async def handle_route_validation_error(request: Request, exc: RouteValidationError):
    """Rejected update or transition: report the field errors."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors}")
    return JSONResponse(status_code=422, content={"error": exc.errors})


@app.exception_handler(NotFoundError)
async def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(CatalogError)
async def handle_catalog_error(request: Request, exc: CatalogError):
    logger.error(f"Catalog error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Gym Route Catalog API",
        "version": "1.0.0",
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }


@app.get("/health")
async def health_check_root():
    """Root health check endpoint for Docker/load balancers"""
    return {"status": "healthy"}


@app.get(f"{settings.API_V1_PREFIX}/health")
async def health_check():
    """API health check endpoint"""
    return {"status": "healthy"}


# Include API routers
app.include_router(gym_routes.router, prefix=settings.API_V1_PREFIX, tags=["gym routes"])
app.include_router(statistics.router, prefix=settings.API_V1_PREFIX, tags=["statistics"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gym_catalog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
    )
