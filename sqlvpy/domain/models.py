"""
Domain models for sqlvpy.

Defines the record schema aligned with `db/init.sql`. Rows scanned from the
store are built through this model, so a row that does not fit the schema
fails loudly at scan time.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

#: Domain shared by `rtype` and `rstate`.
STATE_DOMAIN = (0, 1, 2, 3, 4, 5, 6, 7)

NAME_LENGTH = 191

#: Range of the SMALLINT `rtype` and `rstate` columns; candidates must fit in it.
SMALLINT_MIN = -32_768
SMALLINT_MAX = 32_767

#: Columns selected by every read query, in model field order.
RECORD_COLUMNS = ("id", "name", "rtype", "rstate", "created_at", "updated_at")


class Record(BaseModel):
    """
    Representation of a single row in the `testdata` table.
    """

    id: str = Field(..., description="Opaque unique identifier (UUID4 text).")
    name: str = Field(..., description="Fixed-length random name.")
    rtype: int = Field(..., description="Small integer drawn from STATE_DOMAIN.")
    rstate: int = Field(..., description="Small integer drawn from STATE_DOMAIN.")
    created_at: Optional[datetime] = Field(None, description="Set by the store on insert.")
    updated_at: Optional[datetime] = Field(None, description="Set by the store on insert.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }


__all__ = [
    "NAME_LENGTH",
    "RECORD_COLUMNS",
    "Record",
    "SMALLINT_MAX",
    "SMALLINT_MIN",
    "STATE_DOMAIN",
]
