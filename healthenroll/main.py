"""
Main FastAPI application entry point.
Configures the application, middleware, and includes routers.

Run with ``uvicorn healthenroll.main:app``.
"""
from dotenv import load_dotenv

# Load environment variables from .env file first
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .auth.router import router as auth_router
from .auth.service import bootstrap_admin_if_needed
from .config import Settings
from .core.email import Mailer
from .core.middleware import setup_middlewares
from .database import build_engine, build_session_factory
from .enrollments.router import router as enrollments_router
from .exceptions import register_exception_handlers
from .models import Base
from .programs.router import router as programs_router
from .users.router import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables and the bootstrap admin before serving requests."""
    logger.info("Starting Health Program Enrollment API...")
    Base.metadata.create_all(bind=app.state.engine)
    db = app.state.session_factory()
    try:
        bootstrap_admin_if_needed(db, app.state.settings)
    except Exception as e:
        logger.error(f"Bootstrap process failed: {str(e)}")
    finally:
        db.close()
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings.

    Args:
        settings: Application settings; read from the environment when omitted

    Returns:
        FastAPI: Configured application. The settings, database engine,
            session factory and mailer are kept on ``app.state``.
    """
    settings = settings or Settings()

    # Configure logging
    logging.basicConfig(level=settings.log_level.upper())
    if settings.secret_key == "change-me":
        logger.warning("SECRET_KEY is not set; using the insecure development default")

    app = FastAPI(
        title="Health Program Enrollment API",
        description="Accounts, health programs and program enrollment",
        version="1.0.0",
        lifespan=lifespan,
    )

    engine = build_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.mailer = Mailer(settings)

    # Register exception handlers
    register_exception_handlers(app)

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list({*settings.cors_origins, settings.frontend_url}),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware
    setup_middlewares(app)

    # Include routers
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(programs_router)
    app.include_router(enrollments_router)

    @app.get("/")
    def root():
        """
        Root endpoint for API health check.

        Returns:
            dict: Simple welcome message
        """
        return {"message": "Welcome to the Health Program Enrollment API", "version": app.version}

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint for monitoring.

        Returns:
            dict: Health status information
        """
        return {"status": "healthy", "database": engine.dialect.name}

    return app


app = create_app()
