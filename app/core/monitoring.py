"""
Application monitoring and error tracking with Sentry
"""
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.asyncio import AsyncioIntegration

from config import settings


def init_sentry(service_name: str) -> bool:
    """
    Initialize Sentry for error tracking when SENTRY_DSN is configured
    """
    if not settings.SENTRY_DSN:
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            AsyncioIntegration(),
        ],
        traces_sample_rate=1.0 if settings.SENTRY_ENVIRONMENT == "development" else 0.1,
        release=settings.APP_VERSION,
        server_name=service_name,
    )
    return True
