"""
Pytest configuration for sqlvpy.

Provides fixtures for:
- Settings isolation (the cached settings are reset around every test)
- An in-memory gateway for harness tests that need no database
- Database connection management and table cleanup for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator, Iterable, List, Optional

import psycopg
import pytest

from sqlvpy.config import Settings, get_settings
from sqlvpy.domain.filtering import matches
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.domain.models import Record
from sqlvpy.infrastructure.db_factory import create_pool
from sqlvpy.infrastructure.gateway import RowStoreGateway
from sqlvpy.infrastructure.query_builder import compile_select_where


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class InMemoryGateway:
    """
    Gateway stand-in keeping rows in a list.

    Insertion order plays the role of the counter column; the "unordered"
    reads return rows sorted by id so they differ from insertion order.
    """

    def __init__(self, table: str = "testdata") -> None:
        self.table = table
        self.rows: List[Record] = []
        self.builder_queries: List[str] = []
        self.truncate_calls = 0

    def truncate(self) -> None:
        self.truncate_calls += 1
        self.rows.clear()

    def insert(self, record: Record) -> int:
        self.rows.append(record)
        return 1

    def populate(self, num_records: int, generator: Optional[RecordGenerator] = None) -> int:
        generator = generator or RecordGenerator()
        return sum(self.insert(record) for record in generator.records(num_records))

    def count(self) -> int:
        return len(self.rows)

    def select_all(self) -> List[Record]:
        return sorted(self.rows, key=lambda r: r.id)

    def select_all_ordered(self) -> List[Record]:
        return list(self.rows)

    def _where(self, candidates: Iterable[int], ordered: bool) -> List[Record]:
        wanted = frozenset(candidates)
        source = self.select_all_ordered() if ordered else self.select_all()
        return [r for r in source if matches(r, wanted)]

    def select_where(self, candidates: Iterable[int], ordered: bool = True) -> List[Record]:
        return self._where(candidates, ordered)

    def select_where_builder(self, candidates: Iterable[int], ordered: bool = True) -> List[Record]:
        wanted = list(candidates)
        if wanted:
            query, _ = compile_select_where(self.table, wanted, ordered=ordered)
            self.builder_queries.append(query)
        return self._where(wanted, ordered)

    def close(self) -> None:
        return None


@pytest.fixture
def memory_gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "127.0.0.1"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "password"),
        db_name=os.getenv("DB_NAME", "testing"),
        db_pool_min_size=1,
        db_pool_max_size=4,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def db_schema_initialized(db_connection: psycopg.Connection) -> bool:
    """
    Ensure the record table exists by applying `db/init.sql` (idempotent).
    """
    init_sql_path = Path(__file__).parent.parent / "db" / "init.sql"
    db_connection.execute(init_sql_path.read_text(encoding="utf-8"))
    return True


@pytest.fixture
def store_gateway(
    test_dsn: str, test_settings: Settings, db_schema_initialized: bool
) -> Generator[RowStoreGateway, None, None]:
    """
    Gateway over a dedicated pool, on an empty table.
    """
    gateway = RowStoreGateway(
        create_pool(test_dsn, test_settings), table=test_settings.db_table, owns_pool=True
    )
    gateway.truncate()
    try:
        yield gateway
    finally:
        gateway.truncate()
        gateway.close()
