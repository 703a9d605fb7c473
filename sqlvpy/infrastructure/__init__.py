"""
Infrastructure package for sqlvpy.

Centralizes database concerns: the connection pool, the row store gateway and
the query-builder SQL. Keep this layer focused on I/O and resource
management, decoupled from variant/harness logic.
"""

from sqlvpy.infrastructure.db_factory import PoolManager, build_dsn, create_pool, get_sync_pool
from sqlvpy.infrastructure.gateway import RowStoreGateway

__all__ = [
    "PoolManager",
    "RowStoreGateway",
    "build_dsn",
    "create_pool",
    "get_sync_pool",
]
