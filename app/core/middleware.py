"""
Middleware and exception handler wiring shared by both services
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from app.core.error_handling import register_exception_handlers


def configure_logging():
    # Set SQLAlchemy engine logging to WARNING level to reduce query log noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    # Keep our application logs at INFO level
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def get_cors_origins():
    """Get CORS origins from settings, plus the local development defaults"""
    origins = [origin.strip() for origin in settings.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    default_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Merge and deduplicate
    return list(set(origins + default_origins))


def configure_app(app: FastAPI):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,  # Cache preflight requests for 1 hour
    )
    register_exception_handlers(app)
