"""
Domain package for sqlvpy.

Exports the record model, the synthetic record generator and the in-process
dual-predicate filter. Keep this package free of database I/O.
"""

from sqlvpy.domain.filtering import filter_records, matches
from sqlvpy.domain.generator import RecordGenerator
from sqlvpy.domain.models import RECORD_COLUMNS, STATE_DOMAIN, Record

__all__ = [
    "RECORD_COLUMNS",
    "STATE_DOMAIN",
    "Record",
    "RecordGenerator",
    "filter_records",
    "matches",
]
