"""
Row store gateway: the only code in sqlvpy that talks to PostgreSQL.

Every operation borrows a connection from the pool and releases it (and the
cursor) on all exit paths. Reads go through server-side prepared statements
and build `Record` instances straight from the cursor.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from psycopg import Cursor, sql
from psycopg.rows import class_row
from psycopg_pool import ConnectionPool

from sqlvpy.config import Settings, get_settings
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.domain.models import RECORD_COLUMNS, Record
from sqlvpy.infrastructure.db_factory import get_sync_pool
from sqlvpy.infrastructure.query_builder import compile_select_where
from sqlvpy.utils.logging import get_logger

log = get_logger(__name__)

PROGRESS_EVERY = 10_000


class RowStoreGateway:
    """
    Truncate / insert / select operations over the record table.

    Parameters
    ----------
    pool : ConnectionPool
        Pool to borrow connections from. Connections are expected to run in
        autocommit mode (see `create_pool`).
    table : str
        Name of the record table.
    owns_pool : bool
        Whether `close()` should also close the pool.
    """

    def __init__(self, pool: ConnectionPool, table: str = "testdata", owns_pool: bool = False) -> None:
        self._pool = pool
        self.table = table
        self._owns_pool = owns_pool
        self._table_ident = sql.Identifier(table)
        self._select_base = sql.SQL("SELECT {fields} FROM {table}").format(
            fields=sql.SQL(", ").join(sql.Identifier(c) for c in RECORD_COLUMNS),
            table=self._table_ident,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RowStoreGateway":
        """Gateway over the shared, process-wide pool."""
        settings = settings or get_settings()
        return cls(get_sync_pool(settings), table=settings.db_table)

    def close(self) -> None:
        if self._owns_pool:
            self._pool.close()

    # Writes

    def truncate(self) -> None:
        """Remove every row and reset the counter sequence."""
        query = sql.SQL("TRUNCATE TABLE {table} RESTART IDENTITY").format(table=self._table_ident)
        with self._pool.connection() as conn:
            conn.execute(query)
        log.debug("Table truncated", extra={"table": self.table})

    def _insert_query(self) -> sql.Composed:
        return sql.SQL("INSERT INTO {table} (id, name, rtype, rstate) VALUES (%s, %s, %s, %s)").format(
            table=self._table_ident
        )

    def _insert_with(self, cur: Cursor, record: Record) -> int:
        cur.execute(
            self._insert_query(),
            (record.id, record.name, record.rtype, record.rstate),
            prepare=True,
        )
        return cur.rowcount

    def insert(self, record: Record) -> int:
        """Insert a single record; returns the number of rows affected."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                return self._insert_with(cur, record)

    def populate(self, num_records: int, generator: Optional[RecordGenerator] = None) -> int:
        """
        Insert `num_records` generated records one statement at a time.

        Rows inserted before a failure stay in the table; the error propagates.

        Returns
        -------
        int
            Number of rows inserted.
        """
        generator = generator or RecordGenerator()
        inserted = 0
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                try:
                    for record in generator.records(num_records):
                        inserted += self._insert_with(cur, record)
                        if inserted % PROGRESS_EVERY == 0:
                            log.debug(
                                "Population progress",
                                extra={"inserted": inserted, "target": num_records},
                            )
                except Exception:
                    log.warning(
                        "Population stopped early",
                        extra={"inserted": inserted, "target": num_records, "table": self.table},
                    )
                    raise
        return inserted

    # Reads

    def _fetch(self, query: sql.Composable | str, params: Optional[Sequence | dict] = None) -> List[Record]:
        with self._pool.connection() as conn:
            with conn.cursor(row_factory=class_row(Record)) as cur:
                cur.execute(query, params, prepare=True)
                return cur.fetchall()

    def count(self) -> int:
        query = sql.SQL("SELECT count(*) FROM {table}").format(table=self._table_ident)
        with self._pool.connection() as conn:
            row = conn.execute(query).fetchone()
        return int(row[0]) if row else 0

    def select_all(self) -> List[Record]:
        """Full scan in whatever order the store returns rows."""
        return self._fetch(self._select_base)

    def select_all_ordered(self) -> List[Record]:
        """Full scan ordered by the monotonic counter column."""
        return self._fetch(sql.SQL("{base} ORDER BY counter").format(base=self._select_base))

    def _where_query(self, count: int, ordered: bool) -> sql.Composed:
        placeholders = sql.SQL(",").join(sql.Placeholder() * count)
        query = sql.SQL("{base} WHERE rstate IN ({ph}) AND rtype IN ({ph})").format(
            base=self._select_base, ph=placeholders
        )
        if ordered:
            query = sql.SQL("{query} ORDER BY counter").format(query=query)
        return query

    def select_where(self, candidates: Iterable[int], ordered: bool = True) -> List[Record]:
        """Dual-predicate select with a hand-built placeholder list."""
        wanted = list(candidates)
        if not wanted:
            return []
        # rstate placeholders first, then rtype.
        params: Tuple[int, ...] = tuple(wanted) + tuple(wanted)
        return self._fetch(self._where_query(len(wanted), ordered), params)

    def select_where_builder(self, candidates: Iterable[int], ordered: bool = True) -> List[Record]:
        """Dual-predicate select with SQL generated by the query builder."""
        wanted = list(candidates)
        if not wanted:
            return []
        query, params = compile_select_where(self.table, wanted, ordered=ordered)
        return self._fetch(query, params)


__all__ = ["PROGRESS_EVERY", "RowStoreGateway"]
