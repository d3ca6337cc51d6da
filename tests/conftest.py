"""
Pytest configuration and fixtures
"""
import os
from typing import AsyncGenerator

import httpx
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from database import AlertsBase, ReadingsBase, get_alerts_db, get_readings_db
from app.api.endpoints.readings import get_evaluator_client
from app.services.evaluator_client import EvaluatorClient
import evaluator_main
import main


# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:"
)


async def _session_factory_for(base):
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DATABASE_URL else None,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)

    return engine, async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def _teardown(engine, base):
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.drop_all)
    await engine.dispose()


def _override(session_factory):
    async def get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session
            await session.commit()
    return get_test_db


@pytest.fixture
async def readings_sessions():
    """Session factory on a fresh reading store"""
    engine, factory = await _session_factory_for(ReadingsBase)
    yield factory
    await _teardown(engine, ReadingsBase)


@pytest.fixture
async def alerts_sessions():
    """Session factory on a fresh alert store"""
    engine, factory = await _session_factory_for(AlertsBase)
    yield factory
    await _teardown(engine, AlertsBase)


@pytest.fixture
async def readings_db(readings_sessions) -> AsyncGenerator[AsyncSession, None]:
    async with readings_sessions() as session:
        yield session


@pytest.fixture
async def alerts_db(alerts_sessions) -> AsyncGenerator[AsyncSession, None]:
    async with alerts_sessions() as session:
        yield session


@pytest.fixture
def evaluator_app(alerts_sessions):
    evaluator_main.app.dependency_overrides[get_alerts_db] = _override(alerts_sessions)
    yield evaluator_main.app
    evaluator_main.app.dependency_overrides.clear()


@pytest.fixture
def evaluator_client(evaluator_app) -> EvaluatorClient:
    """Intake-side client wired straight into the evaluator app"""
    return EvaluatorClient(
        "http://evaluator",
        timeout=5.0,
        transport=ASGITransport(app=evaluator_app),
    )


@pytest.fixture
def intake_app(readings_sessions, evaluator_client):
    main.app.dependency_overrides[get_readings_db] = _override(readings_sessions)
    main.app.dependency_overrides[get_evaluator_client] = lambda: evaluator_client
    yield main.app
    main.app.dependency_overrides.clear()


@pytest.fixture
def use_evaluator(intake_app):
    """Replace the evaluator behind the intake app with an httpx transport"""
    def apply(transport: httpx.AsyncBaseTransport, timeout: float = 5.0):
        client = EvaluatorClient("http://evaluator", timeout=timeout, transport=transport)
        intake_app.dependency_overrides[get_evaluator_client] = lambda: client
    return apply


@pytest.fixture
async def intake(intake_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=intake_app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def evaluator(evaluator_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=evaluator_app), base_url="http://test") as client:
        yield client
