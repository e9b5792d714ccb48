from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, Field, RootModel


class FieldMap(RootModel[Dict[str, str]]):
    """A field mapping keyed by raw field ids or field names."""


class DecodeReport(BaseModel):
    payload: str
    checksum: str
    crc_valid: bool = True
    fields: Dict[str, str] = Field(default_factory=dict)
