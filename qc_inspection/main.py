from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from qc_inspection.config import settings
from qc_inspection.api.v1.router import api_router
from qc_inspection.core.exceptions import (
    ConcurrentUpdateError,
    Forbidden,
    InspectionError,
    InvalidState,
    NotFound,
    StoreError,
    Unauthenticated,
    ValidationFailed,
)


logger = logging.getLogger(__name__)

# Most specific class first; ConcurrentUpdateError is an InvalidState.
ERROR_STATUS_CODES = (
    (Unauthenticated, 401),
    (Forbidden, 403),
    (ConcurrentUpdateError, 409),
    (InvalidState, 409),
    (ValidationFailed, 422),
    (NotFound, 404),
    (StoreError, 502),
)


def status_code_for(exc: InspectionError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 400


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    yield

    # Shutdown
    logger.info("Shutting down...")


OPENAPI_TAGS = [
    {"name": "Authentication", "description": "Sign-up with a role code and bearer tokens"},
    {"name": "Parts", "description": "Part definitions and their characteristics (Quality Head)"},
    {"name": "Inspection Reports", "description": "Submission, four-step sign-off, logs and log sheets"},
    {"name": "Compliance", "description": "Part x month status grid"},
    {"name": "Users", "description": "User listing and access removal (Quality Head)"},
]

API_DESCRIPTION = """
## Inspection Sign-off API

Auditors record dimensional inspection reports against part definitions.
Each report is signed off in order by Team Leader Audit, H.O.F. Audit and
the Quality Head; any reviewer can reject it for re-scheduling.

### Authentication

Include the token returned by `/api/v1/auth/signup` in the Authorization
header: `Bearer <token>`

### Error Codes

| Code | Description |
|------|-------------|
| 401 | Not signed in, or invalid/expired token |
| 403 | Role not allowed to perform the action |
| 404 | Part, report or user not found |
| 409 | Report status does not allow the action (or changed meanwhile) |
| 422 | Missing confirmation, signature or required fields |
| 502 | Document store failure |
"""

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=API_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.exception_handler(InspectionError)
async def inspection_exception_handler(request: Request, exc: InspectionError):
    """Map domain errors to HTTP responses."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error_code} - {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.message,
            "error_code": exc.error_code,
            "details": exc.details,
            "path": str(request.url.path),
            "method": request.method,
        },
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }
