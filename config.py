from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """Application settings - All values are loaded from .env file automatically"""

    # API Settings
    APP_NAME: str = "Vital Alerts"
    APP_VERSION: str = "1.0.0"

    # Database Settings (each service owns its own store)
    READINGS_DATABASE_URL: str = "sqlite+aiosqlite:///./readings.db"
    ALERTS_DATABASE_URL: str = "sqlite+aiosqlite:///./alerts.db"

    # Threshold Evaluator (downstream of Reading Intake)
    EVALUATOR_URL: str = "http://localhost:8082"
    EVALUATOR_TIMEOUT_SECONDS: float = 5.0

    # CORS Settings
    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Server Settings (optional)
    HOST: str = "0.0.0.0"
    PORT: int = 8081
    EVALUATOR_PORT: int = 8082

    # Monitoring (optional)
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: str = "development"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"  # Ignore extra fields from .env
    }

settings = Settings()
