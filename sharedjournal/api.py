"""
Top-level shared journals API
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import db
from .data import HealthResponse, VersionResponse
from .journal.api import router as journal_router, tags_metadata
from .utils.settings import (
    CORS_ALLOWED_ORIGINS,
    DOCS_TARGET_PATH,
    SERVICE_NAME,
    SHAREDJOURNAL_DEBUG,
    SHAREDJOURNAL_OPENAPI,
)
from .version import SHAREDJOURNAL_VERSION

LOG_LEVEL = logging.INFO
if SHAREDJOURNAL_DEBUG:
    LOG_LEVEL = logging.DEBUG

LOG_FORMAT = "[%(levelname)s] %(name)s (Source: %(pathname)s:%(lineno)d, Time: %(asctime)s) - %(message)s"
logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    db.dispose_engine()


app = FastAPI(
    title="Shared journals",
    description="API endpoints to create, sync and share journals.",
    version=SHAREDJOURNAL_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json" if SHAREDJOURNAL_OPENAPI else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    # Raised by the router itself when no route or no method matches
    if exc.status_code == 405 or (
        exc.status_code == 404 and exc.detail == "Not Found"
    ):
        return JSONResponse(
            status_code=404, content={"success": False, "error": "Endpoint not found"}
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(f"Invalid request body for {request.url.path}: {exc.errors()!r}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        service=SERVICE_NAME,
        version=SHAREDJOURNAL_VERSION,
    )


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    return VersionResponse(version=SHAREDJOURNAL_VERSION)


app.include_router(journal_router)
