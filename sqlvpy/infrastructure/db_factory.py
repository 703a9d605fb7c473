"""
Database connection factory utilities for sqlvpy.

Provides centralized management of the synchronous PostgreSQL connection
pool. The PoolManager singleton ensures the pool is closed on application
exit. Connection failures are not retried: they surface to the caller.
"""

from __future__ import annotations

import atexit
import threading
from typing import Optional

from psycopg_pool import ConnectionPool

from sqlvpy.config import Settings, get_settings
from sqlvpy.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    return (settings or get_settings()).dsn


def create_pool(dsn: str, settings: Optional[Settings] = None) -> ConnectionPool:
    """
    Open a new connection pool bounded by the configured pool sizes.

    Connections run in autocommit mode, so every statement (each single-row
    insert in particular) commits on its own.
    """
    settings = settings or get_settings()
    return ConnectionPool(
        conninfo=dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        max_lifetime=settings.db_pool_max_lifetime,
        kwargs={"autocommit": True},
        open=True,
    )


class PoolManager:
    """
    Thread-safe singleton for managing the shared connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._sync_pool = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_sync_pool(self, settings: Optional[Settings] = None) -> ConnectionPool:
        """
        Get or create the synchronous connection pool.

        Returns
        -------
        ConnectionPool
            The managed sync pool instance.
        """
        with self._lock:
            if self._sync_pool is None:
                settings = settings or get_settings()
                log.debug(
                    "Opening connection pool",
                    extra={
                        "db_host": settings.db_host,
                        "db_name": settings.db_name,
                        "max_size": settings.db_pool_max_size,
                    },
                )
                self._sync_pool = create_pool(build_dsn(settings), settings)
            return self._sync_pool

    def close_all(self) -> None:
        """
        Close the managed pool and release its connections.

        This is called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._sync_pool is not None:
                try:
                    self._sync_pool.close()
                finally:
                    self._sync_pool = None


def get_sync_pool(settings: Optional[Settings] = None) -> ConnectionPool:
    """Get or create the shared synchronous pool via PoolManager."""
    return PoolManager().get_sync_pool(settings)


__all__ = [
    "PoolManager",
    "build_dsn",
    "create_pool",
    "get_sync_pool",
]
