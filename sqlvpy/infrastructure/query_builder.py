"""
Query-builder rendition of the dual-predicate select.

The statement is assembled with SQLAlchemy Core and compiled for the
PostgreSQL psycopg dialect with expanded IN parameters, producing a plain SQL
string plus a parameter dict that psycopg executes directly.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, Tuple

from sqlalchemy import BigInteger, Column, DateTime, MetaData, SmallInteger, String, Table, select
from sqlalchemy.dialects.postgresql.psycopg import PGDialect_psycopg

from sqlvpy.domain.models import NAME_LENGTH, RECORD_COLUMNS

_DIALECT = PGDialect_psycopg(paramstyle="pyformat")


@lru_cache(maxsize=8)
def records_table(name: str) -> Table:
    """SQLAlchemy description of the record table (mirrors `db/init.sql`)."""
    return Table(
        name,
        MetaData(),
        Column("counter", BigInteger, nullable=False),
        Column("id", String(36), primary_key=True),
        Column("name", String(NAME_LENGTH), nullable=False),
        Column("rtype", SmallInteger, nullable=False),
        Column("rstate", SmallInteger, nullable=False),
        Column("created_at", DateTime(timezone=True)),
        Column("updated_at", DateTime(timezone=True)),
    )


def compile_select_where(
    table_name: str, candidates: Iterable[int], ordered: bool = True
) -> Tuple[str, Dict[str, Any]]:
    """
    Build ``SELECT ... WHERE rstate IN (...) AND rtype IN (...)``.

    Returns
    -------
    tuple[str, dict]
        The compiled SQL text and its bound parameters.
    """
    table = records_table(table_name)
    wanted = list(candidates)
    stmt = select(*(table.c[name] for name in RECORD_COLUMNS)).where(
        table.c.rstate.in_(wanted),
        table.c.rtype.in_(wanted),
    )
    if ordered:
        stmt = stmt.order_by(table.c.counter.asc())

    compiled = stmt.compile(dialect=_DIALECT, compile_kwargs={"render_postcompile": True})
    return compiled.string, dict(compiled.params)


__all__ = ["compile_select_where", "records_table"]
