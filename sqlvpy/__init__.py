"""
sqlvpy - SQL vs. Python filtering benchmark for PostgreSQL.

Populates a table with synthetic records and compares equivalent ways of
selecting rows whose `rstate` and `rtype` both lie in a candidate set:

- Raw parameterized SQL with a hand-built placeholder list
- SQL generated by a query builder (SQLAlchemy Core)
- In-process filtering after fetching the whole table

Every filtering variant must agree on the number of matching rows; the
harness checks that on each run and reports timings.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from sqlvpy.config import Settings, get_settings
from sqlvpy.domain import Record, RecordGenerator, filter_records
from sqlvpy.infrastructure import RowStoreGateway
from sqlvpy.orchestrator import CrossCheckError, RunConfig, available_variants, run_benchmark
from sqlvpy.populate import populate
from sqlvpy.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Record",
    "RecordGenerator",
    "filter_records",
    # Storage
    "RowStoreGateway",
    "populate",
    # Benchmark harness
    "CrossCheckError",
    "RunConfig",
    "available_variants",
    "run_benchmark",
    # Logging
    "configure_logging",
    "get_logger",
]
