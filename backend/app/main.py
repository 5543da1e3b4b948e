"""
Org Portal - FastAPI Application

Main entry point for the student organization portal backend.

Architecture:
- Events (OSLD) → DeadlineEngine → DeadlineEntry (derived on every read)
- DeadlineEntry + Letters of Appeal → resolve_state → AppealDecision
- Submissions → routing → reviewer organization
- Every state change → NotificationDispatcher
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import init_db
from .routers import (
    auth_router, events_router, deadlines_router, appeals_router,
    submissions_router, notifications_router, accounts_router,
)
from .services.errors import (
    AccountOnHoldError, ConflictError, NotFoundError, PermissionDeniedError,
    PersistenceError, PortalError, UploadError, ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AccountOnHoldError: status.HTTP_423_LOCKED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    UploadError: status.HTTP_502_BAD_GATEWAY,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    yield

# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title="Org Portal",
    description="""
    Org Portal - Student Organization Deadlines and Appeals

    ## Flow
    1. **Events**: OSLD schedules events and marks required reports
    2. **Deadlines**: Due dates are derived in working days from the event end date
    3. **Appeals**: The deadline owner files a Letter of Appeal; its reviewer sets a new due date
    4. **Submissions**: Reports and activity requests are routed to the reviewing organization
    5. **Notifications**: Every state change is announced to the affected organization
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def portal_error_handler(request: Request, exc: PortalError):
    """Translate service errors into one user-facing message."""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = {"detail": str(exc)}
    if isinstance(exc, ValidationError):
        body["fields"] = exc.invalid_fields
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content=body)


app.add_exception_handler(PortalError, portal_error_handler)

# Include routers
app.include_router(auth_router)
app.include_router(events_router)
app.include_router(deadlines_router)
app.include_router(appeals_router)
app.include_router(submissions_router)
app.include_router(notifications_router)
app.include_router(accounts_router)


@app.get("/")
async def root():
    """Root endpoint - API information."""
    return {
        "name": "Org Portal",
        "version": "1.0.0",
        "description": "Student Organization Deadlines and Appeals",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


# For running with: python -m app.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
