"""
In-process variant: fetch the whole table, then filter in Python.

WARNING: loads every row into memory before filtering. This is the point of
the comparison, but keep record counts reasonable.
"""

from __future__ import annotations

from typing import AbstractSet, List

from sqlvpy.domain.filtering import filter_records
from sqlvpy.domain.models import Record
from sqlvpy.strategies.abstract import AbstractQueryVariant


class InProcessVariant(AbstractQueryVariant):
    description: str = "Fetch all, filter in Python"

    def __init__(self, gateway, ordered: bool = False) -> None:
        super().__init__(gateway, ordered)
        self.name = "in_process_ordered" if ordered else "in_process"

    def _fetch(self, candidates: AbstractSet[int]) -> List[Record]:
        if self.ordered:
            fetched = self.gateway.select_all_ordered()
        else:
            fetched = self.gateway.select_all()
        return filter_records(fetched, candidates)


__all__ = ["InProcessVariant"]
