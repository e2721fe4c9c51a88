"""Main FastAPI application entry point.

Provides CORS, the uniform error envelope, health endpoints and the
storefront API (catalog, auth, enrollments, contact forms, admin, blogs).
"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os

# Import routers
from edule.routers import (
    health, courses, auth, enrollments, contact, admin, blogs
)
from edule.db.config import create_store
from edule.errors import ServiceError
from edule.utils.timestamps import utcnow_iso

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Application metadata
APP_NAME = "EduLe Storefront API"
VERSION = "1.0.0"
DESCRIPTION = """
EduLe Storefront Backend API

## Features

* **Catalog**: Course listing with category/search filters, course detail, categories
* **Accounts**: Registration, login sessions, profiles and password changes
* **Enrollments**: Enroll in courses and track progress
* **Contact**: Contact form and instructor applications
* **Admin**: Stats, user roles, course management and application moderation
* **Blogs**: Read-only blog posts

Data lives in one JSON document per collection under ``DATA_DIR``.
"""

# Initialize FastAPI app
app = FastAPI(
    title=APP_NAME,
    description=DESCRIPTION,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware configuration
cors_origins = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5500"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Global exception handlers


def _error_response(request, status_code: int, content: dict) -> JSONResponse:
    content.update({"timestamp": utcnow_iso(), "path": str(request.url)})
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ServiceError)
async def service_error_handler(request, exc: ServiceError):
    """Map service-layer failures onto their status codes"""
    return _error_response(request, exc.status_code, exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc: RequestValidationError):
    """Malformed request bodies/paths are plain 400s, like other input errors"""
    # Only locations and messages: raw inputs may contain passwords
    problems = [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error_response(
        request,
        400,
        {"success": False, "message": "Invalid request", "error": "; ".join(problems)},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions with consistent error format"""
    return _error_response(
        request,
        exc.status_code,
        {"success": False, "message": exc.detail, "error": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(
        request, 500, {"success": False, "message": "Internal server error"}
    )

# Include routers
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(courses.router, prefix="/api")
app.include_router(auth.router, prefix="/api")
app.include_router(enrollments.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
app.include_router(blogs.router, prefix="/api")

# Root endpoint


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "name": APP_NAME,
        "version": VERSION,
        "status": "running",
        "environment": os.getenv("ENVIRONMENT", "development"),
        "timestamp": utcnow_iso(),
        "docs": "/docs",
        "health": "/api/health"
    }

# Application startup event


@app.on_event("startup")
async def startup_event():
    """Create the record store and make sure writable collections exist"""
    logger.info(f"Starting {APP_NAME} v{VERSION}")
    logger.info(f"Environment: {os.getenv('ENVIRONMENT', 'development')}")
    logger.info(f"CORS Origins: {cors_origins}")
    store = create_store()
    logger.info(f"Data directory: {store.data_dir}")
    for name in ("users", "enrollments"):
        await store.ensure(name)
    app.state.store = store

# Application shutdown event


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown tasks"""
    logger.info(f"Shutting down {APP_NAME}")

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 3000))
    host = os.getenv("HOST", "0.0.0.0")

    uvicorn.run(
        "edule.main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info"
    )
