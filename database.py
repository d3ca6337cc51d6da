from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from dotenv import load_dotenv
import logging

load_dotenv()

from config import settings

# Configure SQLAlchemy logging to reduce verbosity
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

ECHO_SQL = False

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """
    Create an async engine for one of the service stores.
    SQLite needs check_same_thread disabled because aiosqlite runs the
    connection on a worker thread.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    try:
        engine = create_async_engine(
            url,
            echo=ECHO_SQL,
            future=True,
            pool_pre_ping=True,  # Test connections before using them
            connect_args=connect_args,
        )
    except Exception as e:
        logger.error(f"Failed to create database engine for {url}: {e}", exc_info=True)
        raise
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def build_session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# Reading Intake store
readings_engine = build_engine(settings.READINGS_DATABASE_URL)
ReadingsSessionLocal = build_session_factory(readings_engine)
ReadingsBase = declarative_base()

# Threshold Evaluator store
alerts_engine = build_engine(settings.ALERTS_DATABASE_URL)
AlertsSessionLocal = build_session_factory(alerts_engine)
AlertsBase = declarative_base()


def session_dependency(session_factory):
    """
    Build a FastAPI dependency yielding a session from the given factory
    Usage in FastAPI routes:
        async def my_route(db: AsyncSession = Depends(get_readings_db)):

    Note: Session is automatically closed in the finally block to ensure
    connections are returned to the pool.
    """
    async def get_db():
        session = None
        try:
            session = session_factory()
            yield session
            await session.commit()
        except Exception as e:
            if session:
                await session.rollback()
            # Log database errors for debugging
            logger.error(f"Database error in session: {str(e)}", exc_info=True)
            raise
        finally:
            if session:
                try:
                    await session.close()
                except Exception as close_error:
                    logger.warning(f"Error closing session: {close_error}")

    return get_db


# Dependencies for FastAPI routes
get_readings_db = session_dependency(ReadingsSessionLocal)
get_alerts_db = session_dependency(AlertsSessionLocal)


async def init_models(engine, base):
    """Create the tables of one store if they do not exist yet"""
    async with engine.begin() as conn:
        await conn.run_sync(base.metadata.create_all)
