import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasks_api.database import engine, get_db, init_db, check_migration_version
from tasks_api.config import get_settings
from tasks_api.logger import logger
from tasks_api.responses import (
    BAD_REQUEST,
    INTERNAL_ERROR,
    NOT_FOUND,
    internal_error,
    write_json_error,
)
from tasks_api.routers import tasks
from tasks_api.schemas import ErrorDescription

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events"""
    logger.info(f"Starting {settings.app_name}")
    try:
        if settings.migration_table:
            check_migration_version(engine, settings.migration_table, settings.migration_min_version)
        if settings.auto_create_tables:
            init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    yield

    logger.info(f"Shutting down {settings.app_name}")
    engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Task API with soft delete",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_credentials,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {process_time * 1000:.1f}ms"
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Global exception handlers: everything leaves as the error envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code = NOT_FOUND
    elif exc.status_code < 500:
        code = BAD_REQUEST
    else:
        code = INTERNAL_ERROR
    return write_json_error(
        exc.status_code,
        ErrorDescription(code=code, status=exc.status_code, detail=str(exc.detail)),
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error: {str(exc)}")
    return internal_error("database error occurred", str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {str(exc)}")
    return internal_error("an unexpected error occurred", str(exc))


# Health check endpoints
@app.get("/health", tags=["Health"])
def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/health/ready", tags=["Health"])
def readiness_check(db: Session = Depends(get_db)):
    """Check if service is ready (including database)"""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "service": settings.app_name,
            "database": "connected"
        }
    except SQLAlchemyError as e:
        logger.error(f"Readiness check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready"
        )


@app.get("/", tags=["Root"])
def read_root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.version,
        "docs": "/docs"
    }


app.include_router(tasks.router, prefix=settings.api_prefix)
