from fastapi import FastAPI
from contextlib import asynccontextmanager
import uvicorn
import logging
from dotenv import load_dotenv

# Load environment variables from .env file FIRST, before any other imports
load_dotenv()

from config import settings
from database import ReadingsBase, readings_engine, init_models
from app.api.endpoints import readings
from app.api.endpoints.health import build_health_router
from app.core.monitoring import init_sentry
from app.core.middleware import configure_app, configure_logging

configure_logging()
logger = logging.getLogger(__name__)

SERVICE_NAME = "Reading Intake"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"{SERVICE_NAME} starting up, evaluator at {settings.EVALUATOR_URL}")

    if init_sentry(SERVICE_NAME):
        logger.info("Sentry monitoring initialized")

    await init_models(readings_engine, ReadingsBase)

    yield

    await readings_engine.dispose()
    logger.info(f"{SERVICE_NAME} shutting down")


app = FastAPI(
    title="Reading Intake API",
    description="Validates, stores and forwards patient vital readings",
    version=settings.APP_VERSION,
    lifespan=lifespan
)
configure_app(app)

app.include_router(build_health_router(SERVICE_NAME))
app.include_router(readings.router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
