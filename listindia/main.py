"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listindia.config import get_settings
from listindia.core.exceptions import register_exception_handlers
from listindia.core.logging import configure_logging
from listindia.core.middleware import setup_middleware
from listindia.infrastructure.database import Base, SessionLocal, engine

# Import all models so SQLAlchemy knows about them
from listindia.domain.models.user import User
from listindia.domain.models.business import Business
from listindia.domain.models.review import Review

from listindia.application.services.token_service import get_token_service

# Import routers
from listindia.interfaces.api.auth import router as auth_router
from listindia.interfaces.api.businesses import router as businesses_router
from listindia.interfaces.api.reviews import router as reviews_router
from listindia.interfaces.api.users import router as users_router

# Settings validation fails here when JWT_SECRET is missing
settings = get_settings()

configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting ListIndia API...", env=settings.ENVIRONMENT)

    # Create DB tables (dev only, use migrations in production)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    get_token_service()

    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        from listindia.application.services.auth_service import ensure_admin
        from listindia.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

        db = SessionLocal()
        try:
            ensure_admin(SQLAlchemyUserRepository(db, User), settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
        finally:
            db.close()

    yield

    engine.dispose()
    logger.info("ListIndia API stopped")


app = FastAPI(
    title="ListIndia — Business Directory API",
    description="Business listings, search and review-based ratings",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Exception handlers (AppError, store outages, catch-all)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
)

# Include routers
app.include_router(auth_router)
app.include_router(businesses_router)
app.include_router(reviews_router)
app.include_router(users_router)


@app.get("/")
def root():
    return {
        "name": "ListIndia Business Directory API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}
