"""Noise row removal."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .records import Record


def contains_noise(record: Record, markers: Sequence[str], *, case_insensitive: bool = False) -> bool:
    """True if any string value of the record contains one of the markers.

    Non-string values are never inspected.
    """
    if case_insensitive:
        markers = [m.lower() for m in markers]
    for value in record.values():
        if not isinstance(value, str):
            continue
        haystack = value.lower() if case_insensitive else value
        if any(m in haystack for m in markers):
            return True
    return False


def filter_noise(
    records: Iterable[Record],
    markers: Sequence[str],
    *,
    case_insensitive: bool = False,
) -> List[Record]:
    """Drop noise records, keeping the survivors in their original order."""
    return [
        r for r in records
        if not contains_noise(r, markers, case_insensitive=case_insensitive)
    ]
