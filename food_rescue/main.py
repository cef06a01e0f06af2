"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from food_rescue.application.command_gate import CommandGate
from food_rescue.config import get_settings
from food_rescue.infrastructure.database import engine, Base
from food_rescue.core.logging import configure_logging
from food_rescue.core.middleware import setup_middleware
from food_rescue.core.exceptions import AppError, global_exception_handler

# Import all models so SQLAlchemy knows about them
from food_rescue.domain.models.kv_record import KeyValueRecord  # noqa: F401

# Import routers
from food_rescue.interfaces.api.auth import router as auth_router
from food_rescue.interfaces.api.listings import router as listings_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Food Rescue...", env=settings.ENVIRONMENT)

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    logger.info("Food Rescue stopped")


app = FastAPI(
    title="Food Rescue",
    description="Surplus-food listings between donors and charities",
    version="1.0.0",
    lifespan=lifespan,
)

# One gate per app: serializes commands and tracks in-flight creates
app.state.command_gate = CommandGate()

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Application errors map to their status codes; anything else becomes a 500
app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(listings_router)


@app.get("/")
def root():
    return {
        "name": "Food Rescue",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
