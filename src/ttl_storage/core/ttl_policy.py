"""
TTL validation and defaulting.

Accepts whatever the caller handed in (an int, a numeric string from a query
parameter, or nothing) and returns the effective TTL in milliseconds.
"""

from typing import Optional, Union

from .errors import InvalidTTLError
from .logging import get_logger

DEFAULT_TTL_MS = 10_000
MIN_TTL_MS = 100  # exclusive lower bound

_LOG = get_logger(__name__)

TTLInput = Optional[Union[int, str]]


def _coerce(ttl: Union[int, str]) -> int:
    # bool is an int subclass; True must not pass as a TTL of 1
    if isinstance(ttl, bool):
        raise InvalidTTLError()
    if isinstance(ttl, int):
        return ttl
    if isinstance(ttl, str):
        try:
            return int(ttl.strip())
        except ValueError:
            raise InvalidTTLError() from None
    raise InvalidTTLError()


def resolve_ttl(ttl: TTLInput, default: int = DEFAULT_TTL_MS) -> int:
    """Return the effective TTL or raise InvalidTTLError.

    Args:
        ttl: Caller TTL in milliseconds; None (or an empty string) selects the default
        default: TTL applied when none is given

    Returns:
        TTL in milliseconds, always > 100
    """
    if ttl is None or (isinstance(ttl, str) and not ttl.strip()):
        return default

    value = _coerce(ttl)
    if value <= MIN_TTL_MS:
        _LOG.debug(f"Rejected ttl={ttl!r}")
        raise InvalidTTLError()
    return value
