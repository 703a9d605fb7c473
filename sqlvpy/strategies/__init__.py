"""
Query variants package for sqlvpy.

Re-exports the variant interfaces and the concrete variant classes so
downstream code can import from `sqlvpy.strategies` directly.
"""

from sqlvpy.strategies.abstract import AbstractQueryVariant, QueryVariant, VariantResult
from sqlvpy.strategies.full_scan import FullScanVariant
from sqlvpy.strategies.in_process import InProcessVariant
from sqlvpy.strategies.query_builder import QueryBuilderVariant
from sqlvpy.strategies.raw_sql import RawSqlVariant

__all__ = [
    # Abstracts
    "AbstractQueryVariant",
    "QueryVariant",
    "VariantResult",
    # Concrete variants
    "FullScanVariant",
    "InProcessVariant",
    "QueryBuilderVariant",
    "RawSqlVariant",
]
