# tokenledger/database/connection.py

from typing import Generator, Optional
from contextlib import contextmanager

from sqlalchemy import create_engine, Engine, text
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from ..core.logging import LedgerLogger, log_with_context, DEBUG, INFO, ERROR
from ..types import DatabaseConfig, StoreTimeout, StoreUnavailable
from .base import LedgerBase

_TIMEOUT_MARKERS = ("statement timeout", "canceling statement", "querycanceled", "timeout expired")


def translate_store_error(error: Exception) -> Exception:
    """Map a driver/pool failure onto the ledger's store error taxonomy."""
    if isinstance(error, PoolTimeoutError):
        return StoreTimeout(str(error))

    message = str(error).lower()
    orig = getattr(error, "orig", None)
    orig_name = type(orig).__name__.lower() if orig is not None else ""

    if any(marker in message for marker in _TIMEOUT_MARKERS) or "querycanceled" in orig_name:
        return StoreTimeout(str(error))
    return StoreUnavailable(str(error))


class DatabaseManager:
    def __init__(self, config: DatabaseConfig, name: str = "primary"):
        if not config:
            raise ValueError("DatabaseConfig is required")

        self.config = config
        self.name = name
        self.logger = LedgerLogger.get_logger(f'database.{name}')
        self._engine = None
        self._session_factory = None

        log_with_context(self.logger, INFO, "DatabaseManager initialized",
                         db_url_host=self._extract_host_from_url(config.url))

    def _extract_host_from_url(self, url: str) -> str:
        if '@' in url and '/' in url:
            return url.split('@')[1].split('/')[0]
        return "local"

    def _engine_options(self) -> dict:
        if self.config.is_sqlite:
            options = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.config.url or self.config.url in ("sqlite://", "sqlite+pysqlite://"):
                options["poolclass"] = StaticPool
            return options

        options = {
            "poolclass": QueuePool,
            "pool_size": self.config.pool_size,
            "max_overflow": self.config.max_overflow,
            "pool_timeout": 30,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
        }
        if self.config.statement_timeout_ms:
            options["connect_args"] = {
                "options": f"-c statement_timeout={int(self.config.statement_timeout_ms)}"
            }
        return options

    def initialize(self) -> None:
        if self._engine is not None:
            self.logger.warning("Database already initialized")
            return

        try:
            self.logger.info("Initializing database engine")

            self._engine = create_engine(self.config.url, echo=False, **self._engine_options())
            self._session_factory = sessionmaker(
                bind=self._engine,
                expire_on_commit=False,
            )

            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            log_with_context(self.logger, INFO, "Database initialized successfully",
                             pool_size=self.config.pool_size,
                             max_overflow=self.config.max_overflow)

        except (OperationalError, DBAPIError) as e:
            log_with_context(self.logger, ERROR, "Failed to initialize database",
                             error=str(e),
                             exception_type=type(e).__name__)
            self._engine = None
            self._session_factory = None
            raise translate_store_error(e) from e

    def shutdown(self) -> None:
        self.logger.info("Shutting down database connections")

        if self._engine:
            self._engine.dispose()
            self._engine = None

        self._session_factory = None
        self.logger.info("Database shutdown completed")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._session_factory

    def create_schema(self) -> None:
        from . import tables  # noqa: F401  registers every table on the metadata

        LedgerBase.metadata.create_all(self.engine)
        log_with_context(self.logger, INFO, "Schema created",
                         table_count=len(LedgerBase.metadata.tables))

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        session = self._session_factory()
        try:
            log_with_context(self.logger, DEBUG, "Database session created")
            yield session
        except (OperationalError, DBAPIError, PoolTimeoutError) as e:
            log_with_context(self.logger, ERROR, "Database session error, rolling back",
                             error=str(e),
                             exception_type=type(e).__name__)
            session.rollback()
            raise translate_store_error(e) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            log_with_context(self.logger, DEBUG, "Database session closed")

    @contextmanager
    def get_transaction(self) -> Generator[Session, None, None]:
        with self.get_session() as session:
            yield session
            session.commit()
            log_with_context(self.logger, DEBUG, "Database transaction committed")

    def health_check(self) -> bool:
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            return True
        except (StoreUnavailable, StoreTimeout) as e:
            log_with_context(self.logger, ERROR, "Database health check failed",
                             error=str(e),
                             exception_type=type(e).__name__)
            return False


class ReplicaRouter:
    """Sends API reads to the replica when one is configured, everything else to the primary"""

    def __init__(self, primary: DatabaseManager, replica: Optional[DatabaseManager] = None):
        self.primary = primary
        self.replica = replica

    def select(self, api: bool = False) -> DatabaseManager:
        if api and self.replica is not None:
            return self.replica
        return self.primary

    @contextmanager
    def get_session(self, api: bool = False) -> Generator[Session, None, None]:
        with self.select(api).get_session() as session:
            yield session

    def initialize(self) -> None:
        self.primary.initialize()
        if self.replica is not None:
            self.replica.initialize()

    def shutdown(self) -> None:
        if self.replica is not None:
            self.replica.shutdown()
        self.primary.shutdown()
