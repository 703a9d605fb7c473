"""
Raw SQL variant: ``WHERE rstate IN (%s, ...) AND rtype IN (%s, ...)``.

The placeholder list is built by hand from the candidate count and the
statement is prepared server side.
"""

from __future__ import annotations

from typing import AbstractSet, List

from sqlvpy.domain.models import Record
from sqlvpy.strategies.abstract import AbstractQueryVariant


class RawSqlVariant(AbstractQueryVariant):
    description: str = "Hand-built placeholder SQL"

    def __init__(self, gateway, ordered: bool = False) -> None:
        super().__init__(gateway, ordered)
        self.name = "raw_sql_ordered" if ordered else "raw_sql"

    def _fetch(self, candidates: AbstractSet[int]) -> List[Record]:
        return self.gateway.select_where(sorted(candidates), ordered=self.ordered)


__all__ = ["RawSqlVariant"]
