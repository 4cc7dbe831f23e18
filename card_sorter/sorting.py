"""
Multi-key sorting.

Sort keys are applied in order: compare by the first key, fall through to the
next one on a tie. Each key carries its own direction.

Per-key comparison:
- two strings   -> collated string comparison (case-insensitive under "C")
- two numbers   -> numeric comparison
- two booleans  -> false < true
- anything else -> compare the text form of both values (missing -> "undefined")

SortSpec is immutable: add/remove/update return a new spec.
"""

from __future__ import annotations

import enum
import functools
import locale
from typing import Callable, Iterable, List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import SortSpecError
from .records import CellValue, Dataset, Record, ValueKind, cell_to_text, value_kind


class SortDirection(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class SortKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, text: str) -> "SortKey":
        """Parse `column` or `column:asc|desc`.

        Only a trailing `:asc`/`:desc` is treated as a direction, so column
        names may themselves contain colons.
        """
        column, sep, suffix = text.rpartition(":")
        if sep and suffix.strip().lower() in (d.value for d in SortDirection):
            direction = SortDirection(suffix.strip().lower())
        else:
            column, direction = text, SortDirection.ASC
        if not column:
            raise SortSpecError(f"Sort key has no column: {text!r}")
        return cls(column=column, direction=direction)

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    keys: Tuple[SortKey, ...] = ()

    @classmethod
    def of(cls, *keys: SortKey) -> "SortSpec":
        return cls(keys=tuple(keys))

    @classmethod
    def parse(cls, texts: Iterable[str]) -> "SortSpec":
        return cls(keys=tuple(SortKey.parse(t) for t in texts))

    @property
    def columns(self) -> List[str]:
        return [k.column for k in self.keys]

    def add(self, key: SortKey) -> "SortSpec":
        """Append a key, dropping any earlier key on the same column."""
        kept = tuple(k for k in self.keys if k.column != key.column)
        return SortSpec(keys=kept + (key,))

    def remove(self, index: int) -> "SortSpec":
        self._check_index(index)
        return SortSpec(keys=self.keys[:index] + self.keys[index + 1:])

    def update(self, index: int, key: SortKey) -> "SortSpec":
        self._check_index(index)
        return SortSpec(keys=self.keys[:index] + (key,) + self.keys[index + 1:])

    def limited_to(self, max_keys: int) -> "SortSpec":
        if len(self.keys) > max_keys:
            raise SortSpecError(
                f"At most {max_keys} sort keys are allowed, got {len(self.keys)}"
            )
        return self

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.keys):
            raise SortSpecError(
                f"Sort key index {index} out of range for {len(self.keys)} keys"
            )


TextCompare = Callable[[str, str], int]

_UNCOLLATED_LOCALES = ("C", "POSIX", "C.UTF-8", "C.utf8")


def _plain_compare(a: str, b: str) -> int:
    return (a > b) - (a < b)


def _casefold_compare(a: str, b: str) -> int:
    # letters first by case-insensitive order, then lower case before upper case
    key_a, key_b = (a.casefold(), a.swapcase()), (b.casefold(), b.swapcase())
    return (key_a > key_b) - (key_a < key_b)


def text_comparator(collate: bool = True) -> TextCompare:
    """Pick the string comparison for a sort.

    Collated comparison uses the process LC_COLLATE locale. Python leaves
    LC_COLLATE at "C" unless it is configured, and "C" orders by code point,
    so that case falls back to a case-insensitive order.
    """
    if not collate:
        return _plain_compare
    if locale.setlocale(locale.LC_COLLATE) in _UNCOLLATED_LOCALES:
        return _casefold_compare
    return locale.strcoll


def _compare_cells(a: CellValue, b: CellValue, compare_text: TextCompare) -> int:
    kind_a, kind_b = value_kind(a), value_kind(b)
    if kind_a is kind_b:
        if kind_a is ValueKind.STRING:
            return compare_text(a, b)
        if kind_a is ValueKind.NUMBER:
            return (a > b) - (a < b)
        if kind_a is ValueKind.BOOLEAN:
            return int(a) - int(b)
    return compare_text(cell_to_text(a), cell_to_text(b))


def _compare_rows(a: Record, b: Record, keys: Sequence[SortKey], compare_text: TextCompare) -> int:
    for key in keys:
        result = _compare_cells(a.get(key.column), b.get(key.column), compare_text)
        if key.descending:
            result = -result
        if result:
            return result
    return 0


def compare_values(a: CellValue, b: CellValue, *, collate: bool = True) -> int:
    """Three-way comparison of two cells (negative, zero or positive)."""
    return _compare_cells(a, b, text_comparator(collate))


def compare_records(a: Record, b: Record, keys: Sequence[SortKey], *, collate: bool = True) -> int:
    return _compare_rows(a, b, keys, text_comparator(collate))


def sort_records(records: Iterable[Record], spec: SortSpec, *, collate: bool = True) -> List[Record]:
    cmp = functools.partial(_compare_rows, keys=spec.keys, compare_text=text_comparator(collate))
    return sorted(records, key=functools.cmp_to_key(cmp))


def sort_dataset(dataset: Dataset, spec: SortSpec, *, collate: bool = True) -> Dataset:
    """Return a new dataset ordered by the spec; the input is left untouched."""
    return dataset.replace_records(sort_records(dataset.records, spec, collate=collate))
