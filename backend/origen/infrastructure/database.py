"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy exceptions and driver connect failures (OSError) mapped to DatabaseError
    - A missing table maps to SchemaMissingError, never to a plain DatabaseError

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: rows are converted to entities after the session closes
    - Missing-relation detection by message: sqlite ("no such table") and
      postgres ("relation ... does not exist") report it only in the driver text
"""

import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from origen.core.errors import DatabaseError, SchemaMissingError, OrigenError

logger = logging.getLogger(__name__)

_MISSING_RELATION = re.compile(
    r"no such table: (?P<sqlite>[\w.]+)"
    r"|relation \"?(?P<pg>[\w.]+)\"? does not exist"
    r"|Could not find the table '?(?P<rest>[\w.]+)'?",
)


def missing_relation(exc: BaseException) -> str | None:
    """Name of the missing table if `exc` reports one, else None."""
    match = _MISSING_RELATION.search(str(exc))
    if not match:
        return None
    return match.group("sqlite") or match.group("pg") or match.group("rest")


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except OrigenError:
            await session.rollback()
            raise
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except (OperationalError, DBAPIError) as e:
            await session.rollback()
            relation = missing_relation(e)
            if relation:
                logger.error(
                    f"DB schema missing: {relation}",
                    extra={"error_code": "SCHEMA_MISSING"},
                )
                raise SchemaMissingError(relation)
            logger.error(f"DB driver error: {e}")
            if isinstance(e, OperationalError):
                raise DatabaseError("Connection or operational error", "execute")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        except OSError as e:
            # asyncpg connect failures (refused, unreachable host) are not wrapped by SQLAlchemy
            await session.rollback()
            logger.error(f"DB connection failed: {e}")
            raise DatabaseError("Connection refused", "connect")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
