"""
FastAPI application for the LMS admin console.

Mounts the storage and users routers under /api and turns every
ServiceError into a JSON body with a human-readable ``error`` string.

Usage:
    uvicorn app.main:app --reload --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.storage.factory import get_resolver
from app.storage.routes import router as storage_router
from app.users.routes import router as users_router
from lmsadmin_core.config import settings
from lmsadmin_core.logging import setup_logging
from lmsadmin_core.runtime import ErrorCode, ServiceError

# Initialize logging
setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Release pooled connections of every tenant client handed out
    await get_resolver().aclose()


app = FastAPI(
    title="LMS Admin Console",
    description="Multi-tenant user and storage administration",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.http_status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc} (debug_id={exc.debug_id})")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    fields = ", ".join(".".join(str(p) for p in e.get("loc", ())[1:]) or "body" for e in errors)
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {fields}", "code": "INVALID_INPUT"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    error = ServiceError(
        code=ErrorCode.INTERNAL_ERROR,
        message_safe="Internal server error",
        message_debug=str(exc),
        cause=exc,
    )
    logger.opt(exception=exc).error(
        f"{request.method} {request.url.path} crashed (debug_id={error.debug_id})"
    )
    return JSONResponse(status_code=500, content=error.to_dict())


# CORS configuration for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative frontend
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Mount the storage router under /api/storage prefix
app.include_router(storage_router, prefix="/api/storage", tags=["Storage"])

# Mount the users router under /api/users prefix
app.include_router(users_router, prefix="/api/users", tags=["Users"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": "1.0.0"}
