"""
Restaurant POS System - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.core.exceptions import POSError
from app.api import routes_orders, routes_public, routes_tables, routes_waiters
from app.utils.responses import error_response, validation_message

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if settings.USE_FIREBASE:
        logger.info("Using Firestore document store")
    else:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Restaurant POS System",
    description="Point-of-sale backend for tables, orders and waiters",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_tables.router, prefix="/api/tables", tags=["tables"])
app.include_router(routes_orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(routes_waiters.router, prefix="/api/waiters", tags=["waiters"])

@app.exception_handler(POSError)
async def pos_error_handler(request: Request, exc: POSError) -> JSONResponse:
    """Map service errors to {message} responses"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return error_response("Server error", status_code=exc.status_code)
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.message, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as 400"""
    message = validation_message(exc.errors())
    logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
    return error_response(message, status_code=400)

@app.exception_handler(SQLAlchemyError)
@app.exception_handler(GoogleAPIError)
async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Store failures: log the traceback, answer with a generic message"""
    logger.exception(f"Store error on {request.method} {request.url.path}: {exc}")
    return error_response("Server error", status_code=500)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler"""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return error_response("Server error", status_code=500)

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True
    )
