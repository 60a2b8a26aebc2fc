# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Cellar Enrichment API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    CellarException,
    cellar_exception_handler,
    validation_exception_handler,
)
from app.routers import health, enrich, vivino
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup/shutdown; the Supabase client is created lazily on first use.
    """
    logger.info(f"Starting Cellar Enrichment API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Vivino fetch endpoint: {settings.vivino_fetch_url} "
        f"(delay {settings.ENRICH_DELAY_SECONDS}s per call)"
    )

    yield

    logger.info("Shutting down Cellar Enrichment API")


# Create FastAPI application
app = FastAPI(
    title="Cellar Enrichment API",
    description="""
## Wine cellar enrichment

Fills in missing Vivino data (rating, region, grapes) on cellar wines.

### Endpoints

| Endpoint | Who | What |
|----------|-----|------|
| `POST /api/v1/batch-enrich` | admins | Sweep wines with a Vivino URL and missing data |
| `POST /api/v1/vivino/fetch` | anyone | Fetch cleaned Vivino data for one wine id |
| `GET /api/v1/auth/admin` | signed-in users | Is the current user an admin? |

### Quick Start

```bash
# Dry run: how many wines would be touched?
curl -X POST http://localhost:8000/api/v1/batch-enrich \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"dryRun": true, "limit": 100}'
```

A live run holds the request open for roughly `limit x 2s`.
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Token verification and admin status",
        },
        {
            "name": "Enrichment",
            "description": "Admin batch Vivino enrichment",
        },
        {
            "name": "Vivino",
            "description": "Vivino fetch-by-id proxy",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - the admin page calls this API from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CellarException)
async def handle_cellar_exception(request: Request, exc: CellarException):
    """Handle custom Cellar exceptions."""
    return await cellar_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
            "details": str(exc) or type(exc).__name__,
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Batch enrichment endpoint
app.include_router(
    enrich.router,
    prefix="/api/v1",
    tags=["Enrichment"]
)

# Vivino proxy endpoint
app.include_router(
    vivino.router,
    prefix="/api/v1",
    tags=["Vivino"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Cellar Enrichment API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
