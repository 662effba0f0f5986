"""Human-readable rendering of a read result."""

from typing import NamedTuple

from .record import Record


class Reading(NamedTuple):
    """A live value and its remaining lifetime in whole seconds."""

    value: str
    remaining_seconds: int


def remaining_seconds(record: Record, current_ms: int) -> int:
    # integer-second truncation; callers only pass live records
    return record.remaining_ms(current_ms) // 1000


def read(record: Record, current_ms: int) -> Reading:
    return Reading(record.value, remaining_seconds(record, current_ms))


def format_reading(reading: Reading) -> str:
    return (
        f"Значение: {reading.value}\n"
        f" Оставшееся время хранения: {reading.remaining_seconds}с"
    )


def format_record(record: Record, current_ms: int) -> str:
    return format_reading(read(record, current_ms))
