"""
In-process dual-predicate filtering.

Mirrors ``WHERE rstate IN (...) AND rtype IN (...)`` on already fetched rows,
so the client-side variant can be benchmarked against the server-side ones.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Sequence, Set

from sqlvpy.domain.models import Record


def _matching_indices(values: Iterable[int], candidates: AbstractSet[int]) -> Set[int]:
    return {index for index, value in enumerate(values) if value in candidates}


def filter_records(records: Sequence[Record], candidates: Iterable[int]) -> List[Record]:
    """
    Return the records whose `rstate` and `rtype` are both in `candidates`.

    Each column is matched in its own pass, producing a set of row indices;
    the two index sets are intersected and the surviving rows gathered in
    input order. The result is always a new list, empty when nothing matches
    or when `candidates` is empty.
    """
    wanted = frozenset(candidates)
    if not wanted or not records:
        return []

    matched_rstate = _matching_indices((r.rstate for r in records), wanted)
    matched_rtype = _matching_indices((r.rtype for r in records), wanted)
    return [records[index] for index in sorted(matched_rstate & matched_rtype)]


def matches(record: Record, candidates: AbstractSet[int]) -> bool:
    """Single-record form of the predicate applied by `filter_records`."""
    return record.rstate in candidates and record.rtype in candidates


__all__ = ["filter_records", "matches"]
