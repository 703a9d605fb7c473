"""
Full-scan baseline: read every row, no predicate.

Gives a reference cost for moving the whole table to the client, which is
what the in-process variants pay before filtering.
"""

from __future__ import annotations

from typing import AbstractSet, List

from sqlvpy.domain.models import Record
from sqlvpy.strategies.abstract import AbstractQueryVariant


class FullScanVariant(AbstractQueryVariant):
    """SELECT of all columns, optionally ORDER BY counter."""

    description: str = "SELECT all rows"
    filters: bool = False

    def __init__(self, gateway, ordered: bool = False) -> None:
        super().__init__(gateway, ordered)
        self.name = "select_all_ordered" if ordered else "select_all"

    def _fetch(self, candidates: AbstractSet[int]) -> List[Record]:
        del candidates
        if self.ordered:
            return self.gateway.select_all_ordered()
        return self.gateway.select_all()


__all__ = ["FullScanVariant"]
