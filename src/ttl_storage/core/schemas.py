"""
Pydantic models for the record wire shape (HTTP bodies and snapshot file).
Why: one contract for both; field names match existing snapshot files.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, TypeAdapter

from .record import Record
from .ttl_policy import MIN_TTL_MS


class RecordSchema(BaseModel):
    """Serialized Record: {"value", "ttl", "savedTime"}."""

    # Unknown fields in older snapshot files are ignored
    model_config = ConfigDict(extra="ignore")

    value: StrictStr
    ttl: StrictInt = Field(..., gt=MIN_TTL_MS)
    savedTime: StrictInt = Field(..., ge=0)

    @classmethod
    def from_record(cls, record: Record) -> "RecordSchema":
        return cls(value=record.value, ttl=record.ttl_ms, savedTime=record.saved_at_ms)

    def to_record(self) -> Record:
        return Record(value=self.value, ttl_ms=self.ttl, saved_at_ms=self.savedTime)


class LoadResult(BaseModel):
    status: str = "loaded"
    records: int


SnapshotDocument = TypeAdapter(Dict[str, RecordSchema])


def records_to_wire(records: Dict[str, Record]) -> Dict[str, Dict[str, object]]:
    return {key: RecordSchema.from_record(rec).model_dump() for key, rec in records.items()}
