"""
Synthetic record generation.

One `random.Random` per generator, seeded once, so a fixed seed reproduces
the same sequence of records (identifiers included).
"""

from __future__ import annotations

import random
import string
import uuid
from typing import Iterator, Optional

from sqlvpy.domain.models import NAME_LENGTH, STATE_DOMAIN, Record

CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits


class RecordGenerator:
    """
    Produce random `Record` instances ready for insertion.

    Parameters
    ----------
    seed : int | None
        Seed for the underlying RNG. ``None`` seeds from system entropy once,
        at construction time.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def rand_int(self) -> int:
        return self._rng.choice(STATE_DOMAIN)

    def rand_name(self) -> str:
        return "".join(self._rng.choices(CHARSET, k=NAME_LENGTH))

    def rand_id(self) -> str:
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

    def make_record(self) -> Record:
        return Record(
            id=self.rand_id(),
            name=self.rand_name(),
            rstate=self.rand_int(),
            rtype=self.rand_int(),
        )

    def records(self, count: int) -> Iterator[Record]:
        """Yield `count` freshly generated records."""
        for _ in range(count):
            yield self.make_record()


__all__ = ["CHARSET", "RecordGenerator"]
