"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from carwash.auth import AdminRequired, AuthenticationRequired
from carwash.config import get_settings
from carwash.database import AsyncSessionLocal, init_db
from carwash.log_config import configure_logging
from carwash.routers import activity, admin, auth, cars, dashboard, packages, payments, profile, reports, services, sessions
from carwash.templating import render
from carwash.web_sessions import cleanup_expired_sessions

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    await init_db()
    async with AsyncSessionLocal() as db:
        await cleanup_expired_sessions(db)
    logger.info("Web session store ready")
    logger.info("Backend API: %s", settings.api_url)

    yield

    # Shutdown
    logger.info("Shutting down %s", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## CaX Car Wash Admin

    Back office for a car wash: register cars, define service packages,
    log service records, record payments and follow activity and reports.
    All records live in the car wash backend API.
    """,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def session_cookie(request: Request, call_next):
    """Issue the web-session cookie when a request created a new session."""
    response = await call_next(request)
    token = getattr(request.state, "session_token", None)
    if token and request.cookies.get(settings.session_cookie_name) != token:
        response.set_cookie(
            settings.session_cookie_name,
            token,
            max_age=settings.session_ttl_minutes * 60,
            httponly=True,
            samesite="lax",
            secure=settings.secure_cookies,
        )
    return response


@app.exception_handler(AuthenticationRequired)
async def authentication_required(request: Request, exc: AuthenticationRequired):
    return render(request, "auth_required.html", context={"login_url": exc.login_url}, status_code=401)


@app.exception_handler(AdminRequired)
async def admin_required(request: Request, exc: AdminRequired):
    return RedirectResponse("/dashboard", status_code=303)


# Include routers
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(cars.router)
app.include_router(packages.router)
app.include_router(services.router)
app.include_router(payments.router)
app.include_router(activity.router)
app.include_router(sessions.router)
app.include_router(reports.router)
app.include_router(profile.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carwash.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
