"""
CrudHub Backend — Document Store (Async SQLAlchemy)
=====================================================

What:  Async SQLAlchemy engine, session factory and the DocumentStore that
       owns them.
Why:   Document resources (games, ...) need a store shared by all of their
       collections, the way every collection of a database shares one client.
How:   DocumentStore wraps one async engine. connect() verifies the connection
       with tenacity-driven retries and optionally creates the schema.
       Collections obtain sessions from store.session_factory.
Who:   Built by the ResourceRegistry; used by DocumentCollection.
When:  Created when the app is built; connected in the lifespan startup;
       disposed in the lifespan shutdown.

Connection Pooling:
    Pool options (pool_size, max_overflow, pre_ping) only apply to pooled
    drivers such as asyncpg. SQLite URLs get SQLAlchemy's defaults.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from crudhub.config import Settings
from crudhub.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a single metadata object, which Alembic and
    create_all() both read.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    What:  Creates the async engine for the configured DATABASE_URL.
    Why:   SQLite's async pools reject pool sizing arguments, so they are only
           passed to server databases.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


class DocumentStore:
    """
    A connected-or-not handle on the document database.

    Lifecycle:
        1. __init__: engine and session factory are created (no I/O yet)
        2. connect(): SELECT 1 with retries, then create_all if configured
        3. session_factory: used by collections for every operation
        4. dispose(): closes all pooled connections

    Invariant:
        `connected` is True only after connect() succeeded and before dispose().
    """

    def __init__(self, settings: Settings, engine: Optional[AsyncEngine] = None):
        self.settings = settings
        self.engine = engine or build_engine(settings)
        # expire_on_commit=False: documents are read after the session closes
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.connected = False
        self._connect_lock = asyncio.Lock()

    @property
    def url(self) -> str:
        """Connection URL with the password masked, safe for logs."""
        return self.engine.url.render_as_string(hide_password=True)

    async def connect(self) -> None:
        """
        Verify connectivity and prepare the schema.

        Idempotent: concurrent callers share one attempt; once connected,
        further calls return immediately.

        Raises:
            StoreUnavailableError: the store could not be reached after all
                configured attempts, or the schema could not be created.
        """
        async with self._connect_lock:
            if self.connected:
                return

            try:
                async for attempt in AsyncRetrying(
                    retry=retry_if_exception_type((OSError, SQLAlchemyError)),
                    stop=stop_after_attempt(self.settings.store_connect_attempts),
                    wait=wait_exponential_jitter(
                        initial=self.settings.store_connect_min_wait,
                        max=self.settings.store_connect_max_wait,
                        jitter=1,
                    ),
                    before_sleep=before_sleep_log(logger, logging.WARNING),
                    reraise=True,
                ):
                    with attempt:
                        await self._ping_once()

                if self.settings.create_schema_on_startup:
                    # Import registers the Document model with Base.metadata
                    from crudhub.models.document import Document  # noqa: F401

                    async with self.engine.begin() as conn:
                        await conn.run_sync(Base.metadata.create_all)
            except (OSError, SQLAlchemyError) as e:
                logger.error("Document store %s unreachable: %s", self.url, str(e))
                raise StoreUnavailableError(
                    message="The document store could not be reached",
                    store=self.url,
                    context={"error_type": type(e).__name__},
                ) from e

            self.connected = True
            logger.info("Document store connected: %s", self.url)

    async def ping(self) -> bool:
        """Lightweight health probe. Never raises."""
        if not self.connected:
            return False
        try:
            await self._ping_once()
        except (OSError, SQLAlchemyError) as e:
            logger.warning("Document store ping failed: %s", str(e))
            return False
        return True

    def ensure_connected(self) -> None:
        if not self.connected:
            raise StoreUnavailableError(store=self.url)

    async def dispose(self) -> None:
        """
        What:  Gracefully closes all connections in the pool.
        When:  Called during application shutdown (lifespan handler).
        """
        self.connected = False
        await self.engine.dispose()

    async def _ping_once(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
