"""
FederalTalks IQ API - Government Procurement Intelligence

FastAPI entry point: logging, table creation, CORS, error mapping and
the versioned router.
"""

import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from federaltalks.api import api_router
from federaltalks.config import settings
from federaltalks.database import Base, SessionLocal, engine
from federaltalks.services.errors import StoreError

logger = logging.getLogger(__name__)

VERSION = "1.0.0"
API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(f"{settings.app_name} starting ({settings.app_env}, reports: {settings.report_generator})")

    import federaltalks.models  # noqa: F401  (registers tables on Base)

    # Migrations own the schema in production; create_all only fills gaps
    Base.metadata.create_all(bind=engine)

    yield

    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title="FederalTalks IQ API",
    description="Procurement contracts, agency contacts, bulk import and sales pipelines",
    version=VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")] if settings.cors_origins else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Mapping
# =============================================================================

@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Rejected table operations are client errors."""
    logger.warning(f"Store error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    content = {"detail": "Internal server error"}
    if settings.debug:
        content.update({
            "detail": str(exc),
            "type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        })
    return JSONResponse(status_code=500, content=content)


app.include_router(api_router, prefix=API_PREFIX)


# =============================================================================
# Service Endpoints
# =============================================================================

@app.get("/")
async def root():
    return {
        "name": "FederalTalks IQ API",
        "version": VERSION,
        "endpoints": {
            "auth": f"{API_PREFIX}/auth",
            "contracts": f"{API_PREFIX}/contracts",
            "contacts": f"{API_PREFIX}/contacts",
            "uploads": f"{API_PREFIX}/uploads",
            "pipelines": f"{API_PREFIX}/pipelines",
        },
        "docs": "/docs" if settings.debug else None,
    }


@app.get("/health")
def health():
    """Liveness plus a round trip to the database."""
    database = "ok"
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
        "version": VERSION,
    }
