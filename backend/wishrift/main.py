from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import (
    GZipMiddleware,
)
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from wishrift.api.alerts import router as alerts_router
from wishrift.api.items import router as items_router
from wishrift.api.shared import router as shared_router
from wishrift.api.wishlists import router as wishlists_router
from wishrift.core.config import settings
from wishrift.core.errors import NotFoundError, PersistenceError, ValidationError
from wishrift.core.logger import configure_logging
from wishrift.services.search import ProductSearchService

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.DB_CREATE_ALL:
        from wishrift.db.models import Base, engine

        Base.metadata.create_all(bind=engine)
    logger.info(
        "app.startup",
        affiliate_keys=settings.affiliate.has_any_keys(),
        search_ttl=settings.SEARCH_CACHE_TTL_SECONDS,
    )
    yield
    logger.info("app.shutdown")


app = FastAPI(
    title="Wishrift API",
    description="Wishlists with price history, price-drop alerts and share links",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.search = ProductSearchService(
    settings.affiliate, ttl_seconds=settings.SEARCH_CACHE_TTL_SECONDS
)


app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(wishlists_router, prefix="/api")
app.include_router(items_router, prefix="/api")
app.include_router(alerts_router, prefix="/api")
app.include_router(shared_router, prefix="/api")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400, content={"message": exc.message, "errors": exc.errors}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    message = errors[0]["message"] if errors else "Invalid request"
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(PersistenceError)
@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: Exception):
    logger.error(
        "request.persistence_failed",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("request.failed", path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.api_route("/health", methods=["GET", "HEAD"])
def health_check():
    try:
        from wishrift.db.base import engine

        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "service": "wishrift-api",
            "database": "connected",
        }
    except Exception as e:
        return {
            "status": "degraded",
            "service": "wishrift-api",
            "database": "disconnected",
            "error": str(e),
        }
