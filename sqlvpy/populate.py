"""
Library entry point for filling the record table.

Usage:
    from sqlvpy.populate import populate

    inserted = populate(100_000, truncate=True)
"""

from __future__ import annotations

from typing import Optional

from sqlvpy.config import get_settings
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.infrastructure.gateway import RowStoreGateway
from sqlvpy.utils.logging import get_logger
from sqlvpy.utils.profiler import profile_block

log = get_logger(__name__)


def populate(
    num_records: int,
    truncate: bool = False,
    seed: Optional[int] = None,
    gateway: Optional[RowStoreGateway] = None,
) -> int:
    """
    Insert `num_records` synthetic records, optionally truncating first.

    Parameters
    ----------
    num_records : int
        Number of records to generate and insert.
    truncate : bool
        Empty the table before inserting.
    seed : int | None
        RNG seed; defaults to `RNG_SEED` from settings.
    gateway : RowStoreGateway | None
        Gateway to use; defaults to one over the shared pool.

    Returns
    -------
    int
        Number of rows inserted.
    """
    if num_records < 0:
        raise ValueError(f"num_records must be >= 0, got {num_records}")

    settings = get_settings()
    gateway = gateway or RowStoreGateway.from_settings(settings)
    generator = RecordGenerator(seed if seed is not None else settings.rng_seed)

    if truncate:
        gateway.truncate()

    with profile_block("populate") as stats:
        inserted = gateway.populate(num_records, generator)

    rate = inserted / stats.duration_seconds if stats.duration_seconds > 0 else 0.0
    log.info(
        f"Populated {inserted} records in {stats.duration_seconds:.2f}s",
        extra={
            "table": gateway.table,
            "records": inserted,
            "truncated": truncate,
            "duration_seconds": round(stats.duration_seconds, 2),
            "records_per_sec": round(rate, 2),
        },
    )
    return inserted


__all__ = ["populate"]
