"""
Main FastAPI application for the office betting pool.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from betpool.core.config import settings
from betpool.core.database import init_db, SessionLocal
from betpool.core.errors import InvalidPayloadError
from betpool.core.logging import configure_logging, get_logger
from betpool.core.middleware import CorrelationIdMiddleware
from betpool.core.rate_limit import limiter
from betpool.core import metrics
from betpool.api.routes import state, bets, arrivals, auth

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

configure_logging(
    level=settings.LOG_LEVEL,
    json_output=settings.LOG_JSON
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    init_db()

    db = SessionLocal()
    try:
        from betpool.repositories import MetaRepository
        metrics.update_rollover(MetaRepository(db).get_rollover())
    finally:
        db.close()

    if not settings.ADMIN_SECRET:
        logger.warning("ADMIN_SECRET is not set - admin endpoints will refuse every request")

    logger.info("Application started")
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Office betting pool: wager on the arrival slot, admins record the outcome",
    lifespan=lifespan
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Correlation IDs first so every later log line carries one
app.add_middleware(CorrelationIdMiddleware)

instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1
for router_module in (state, bets, arrivals, auth):
    app.include_router(router_module.router, prefix="/api/v1")

# Unversioned paths used by the original front end
for router_module in (state, bets, arrivals, auth):
    app.include_router(router_module.router, prefix="/api", include_in_schema=False)


@app.get("/")
@limiter.limit("60/minute")
async def root(request: Request):
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": {
            "api_version": "v1",
            "state": "/api/v1/state",
            "bets": "/api/v1/bets",
            "arrivals": "/api/v1/arrivals",
            "login": "/api/v1/login",
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics"
        }
    }


@app.get("/health")
@limiter.limit("120/minute")
async def health_check(request: Request):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


@app.get("/api/health")
@limiter.limit("60/minute")
async def api_health(request: Request):
    """Health check with database connectivity and row counts."""
    from betpool.repositories import WagerRepository, OutcomeRepository, MetaRepository

    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "components": {}
    }

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "connected",
            "counts": {
                "bets": WagerRepository(db).count(),
                "arrivals": OutcomeRepository(db).count(),
            },
            "rollover": MetaRepository(db).get_rollover(),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "degraded"
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "error": str(e)
        }
    finally:
        db.close()

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=health_status)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same answer as domain validation failures."""
    logger.info(f"Rejected payload on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=InvalidPayloadError.status_code,
        content={"detail": InvalidPayloadError.message}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "betpool.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
