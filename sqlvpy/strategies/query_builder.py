"""
Query-builder variant: the same predicate, with SQL generated by SQLAlchemy
Core instead of string assembly.
"""

from __future__ import annotations

from typing import AbstractSet, List

from sqlvpy.domain.models import Record
from sqlvpy.strategies.abstract import AbstractQueryVariant


class QueryBuilderVariant(AbstractQueryVariant):
    description: str = "SQLAlchemy Core generated SQL"

    def __init__(self, gateway, ordered: bool = False) -> None:
        super().__init__(gateway, ordered)
        self.name = "query_builder_ordered" if ordered else "query_builder"

    def _fetch(self, candidates: AbstractSet[int]) -> List[Record]:
        return self.gateway.select_where_builder(sorted(candidates), ordered=self.ordered)


__all__ = ["QueryBuilderVariant"]
