"""
Trading card inventory normalization.

Vendor exports carry their own column names; every surviving row is mapped
onto the fixed card schema in rules.CARD_COLUMNS. Normalization is total:
missing columns fall back to defaults, never to errors.
"""

from __future__ import annotations

from typing import Iterable

from .records import Dataset, Record
from .rules import (
    CARD_COLUMNS,
    CARD_DEFAULT_QUANTITY,
    CARD_NUMBER_SOURCE,
    CARD_QUANTITY_SOURCE,
    CARD_SORT_COLUMNS,
    CARD_SOURCE_COLUMNS,
)
from .sorting import SortKey, SortSpec, sort_dataset

CARD_SORT_SPEC = SortSpec.of(*(SortKey(column=c) for c in CARD_SORT_COLUMNS))


def _text(record: Record, column: str) -> str:
    value = record.get(column)
    return "" if value is None else str(value)


def short_number(number: str) -> str:
    """Collector number without the set prefix: "LOB-001-EN" -> "001-EN"."""
    _, sep, rest = number.partition("-")
    return rest if sep else ""


def normalize_card(record: Record) -> Record:
    number = _text(record, CARD_NUMBER_SOURCE)
    card: Record = {
        "numbershort": short_number(number),
        "number": number,
        "qty": _text(record, CARD_QUANTITY_SOURCE) or CARD_DEFAULT_QUANTITY,
        "notes": "",
    }
    for target, source in CARD_SOURCE_COLUMNS.items():
        card[target] = _text(record, source)
    return {column: card[column] for column in CARD_COLUMNS}


def normalize_cards(records: Iterable[Record]) -> Dataset:
    return Dataset(columns=list(CARD_COLUMNS), records=[normalize_card(r) for r in records])


def sort_cards(dataset: Dataset) -> Dataset:
    """Order cards by set, rarity, condition and product name, plain string order."""
    return sort_dataset(dataset, CARD_SORT_SPEC, collate=False)
