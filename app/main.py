# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the dance academy API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    AcademyException,
    academy_exception_handler,
    backend_exception_handler,
)
from app.routers import (
    health,
    inquiries,
    notifications,
    photos,
    profile,
    students,
    testimonials,
    videos,
)
from app.auth import routes as auth_routes
from core.services.email_service import EmailService
from core.services.storage_service import create_object_store
from lib.supabase_client import SupabaseClient, SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup builds the backend clients once and keeps them on app.state:
    - supabase: database access (and Supabase Storage)
    - object_store: photo/video binaries (Supabase Storage or S3)
    - email: inquiry emails
    """
    logger.info(f"Starting {settings.ACADEMY_NAME} API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    supabase = SupabaseClient.from_settings(settings)
    app.state.supabase = supabase
    app.state.object_store = create_object_store(settings, supabase)
    app.state.email = EmailService(settings)

    if not settings.email_configured:
        logger.warning("SMTP_USER / SMTP_PASSWORD not set; inquiry emails will only be logged")

    yield

    logger.info(f"Shutting down {settings.ACADEMY_NAME} API")


# Create FastAPI application
app = FastAPI(
    title="Dance Academy API",
    description="""
## Dance Academy Site and Admin API

Backend for the academy's public site and admin panel.

### Public

- **Contact form** - submit an inquiry (the academy and the student get an email)
- **Galleries** - published photos and videos
- **Testimonials** - published testimonials
- **Profile** - contact details, about text, founder bios, social links

### Admin (Supabase Auth bearer token)

- **Student board** - review inquiries; completed + enrolled inquiries move to students
- **Media manager** - upload, rename, archive and delete photos/videos
- **Testimonials / Profile** - edit the site content

### Quick Start

```bash
# Submit an inquiry
curl -X POST http://localhost:8000/api/v1/inquiries \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Asha", "email": "asha@example.com", "mobile": "9876543210"}'

# Enroll it (admin)
curl -X PATCH http://localhost:8000/api/v1/inquiries/{id} \\
  -H "Authorization: Bearer $TOKEN" \\
  -d '{"review": "completed", "status": "enrolled"}'
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Verify Supabase Auth tokens",
        },
        {
            "name": "Inquiries",
            "description": "Contact form and the admin student board",
        },
        {
            "name": "Students",
            "description": "Enrolled students",
        },
        {
            "name": "Photos",
            "description": "Photo gallery and photo management",
        },
        {
            "name": "Videos",
            "description": "Video gallery, signed uploads and video management",
        },
        {
            "name": "Testimonials",
            "description": "Published and archived testimonials",
        },
        {
            "name": "Profile",
            "description": "The academy profile document",
        },
        {
            "name": "Notifications",
            "description": "Inquiry emails",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - the public site and admin panel call from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AcademyException)
async def handle_academy_exception(request: Request, exc: AcademyException):
    """Handle custom academy exceptions."""
    return await academy_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_backend_exception(request: Request, exc: SupabaseClientError):
    """Surface database/storage SDK failures."""
    return await backend_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Contact form and student board
app.include_router(
    inquiries.router,
    prefix="/api/v1/inquiries",
    tags=["Inquiries"]
)

# Enrolled students
app.include_router(
    students.router,
    prefix="/api/v1/students",
    tags=["Students"]
)

# Media
app.include_router(
    photos.router,
    prefix="/api/v1/photos",
    tags=["Photos"]
)

app.include_router(
    videos.router,
    prefix="/api/v1/videos",
    tags=["Videos"]
)

# Site content
app.include_router(
    testimonials.router,
    prefix="/api/v1/testimonials",
    tags=["Testimonials"]
)

app.include_router(
    profile.router,
    prefix="/api/v1/profile",
    tags=["Profile"]
)

# Email
app.include_router(
    notifications.router,
    prefix="/api/v1/notifications",
    tags=["Notifications"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": f"{settings.ACADEMY_NAME} API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
