"""
Lookup Result Disambiguation

Backends report a miss as ``(NOT_FOUND, status)`` where ``NOT_FOUND`` is
``False``, the same raw value a deliberately stored ``False`` comes back as.
Only the status code tells them apart:

    raw is NOT_FOUND and status != SUCCESS  ->  miss
    raw is NOT_FOUND and status == SUCCESS  ->  hit, value False
    anything else                           ->  hit, value raw

The same rule is applied once to a whole get_multi() response.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from nscache.core.interfaces.cache import NOT_FOUND, ResultCode


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a single or batched lookup."""

    hit: bool
    value: Any = None

    @property
    def miss(self) -> bool:
        return not self.hit


MISS = LookupResult(hit=False)


def disambiguate(raw: Any, status: ResultCode | int) -> LookupResult:
    """
    Classify a raw backend response as a hit or a miss.

    Identity (``is``) is used against the sentinel so that stored values equal
    to False (0, 0.0) are never mistaken for it.

    Args:
        raw: Value returned by the backend
        status: Status code reported with it

    Returns:
        LookupResult carrying the stored value on a hit
    """
    if raw is NOT_FOUND and status != ResultCode.SUCCESS:
        return MISS
    return LookupResult(hit=True, value=raw)


def reassemble(
    keys: Sequence[str],
    storage_keys: Sequence[str],
    result: LookupResult,
) -> dict[str, Any]:
    """
    Map each logical key to its value from a batch lookup.

    Keys missing from the batch response, and every key of a batch miss,
    map to None.
    """
    if result.miss or not isinstance(result.value, dict):
        return {key: None for key in keys}

    found = result.value
    return {key: found.get(storage_key) for key, storage_key in zip(keys, storage_keys)}
