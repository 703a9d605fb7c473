"""
Query variant interfaces and result contracts for sqlvpy.

Every variant answers the same question (which rows satisfy the configured
predicate) in its own way and returns a VariantResult, so the harness can
time variants uniformly and cross-check their row counts.
"""

from __future__ import annotations

import abc
from typing import AbstractSet, List, Optional, Protocol, TypedDict, runtime_checkable

from sqlvpy.domain.models import Record
from sqlvpy.infrastructure.gateway import RowStoreGateway


class VariantResult(TypedDict, total=False):
    """
    Outcome of one variant execution.

    `records` carries the fetched rows back to the caller; the harness keeps
    only their count in the persisted payload.
    """

    rows: int
    records: List[Record]
    notes: Optional[str]


@runtime_checkable
class QueryVariant(Protocol):
    """
    Common interface all query variants implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the approach.
    filters : bool
        True when the variant applies the dual predicate; only those take
        part in the row-count cross-check.
    """

    name: str
    description: str
    filters: bool

    def execute(self, candidates: AbstractSet[int]) -> VariantResult:
        ...


class AbstractQueryVariant(abc.ABC):
    """
    Base class for gateway-backed variants.

    Subclasses set `name`, `description` and `filters` and implement `_fetch`.
    """

    name: str
    description: str
    filters: bool = True

    def __init__(self, gateway: RowStoreGateway, ordered: bool = False) -> None:
        self.gateway = gateway
        self.ordered = ordered

    @abc.abstractmethod
    def _fetch(self, candidates: AbstractSet[int]) -> List[Record]:  # pragma: no cover - interface only
        raise NotImplementedError

    def execute(self, candidates: AbstractSet[int]) -> VariantResult:
        records = self._fetch(candidates)
        return VariantResult(
            rows=len(records),
            records=records,
            notes=f"{self.description} ordered={self.ordered}",
        )


__all__ = [
    "AbstractQueryVariant",
    "QueryVariant",
    "VariantResult",
]
