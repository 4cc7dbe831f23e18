"""
Records, cell values and datasets.

A cell holds one of four kinds of value:
- String  -> str
- Number  -> int or float
- Boolean -> bool
- Missing -> None (column absent from the source row)

bool is a subclass of int in Python, so classification always checks for
booleans before numbers.
"""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from .rules import MISSING_TEXT

CellValue = Union[str, int, float, bool, None]
Record = Dict[str, CellValue]

_NUMBER_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*-?\d+\s*$")
_TRUE_VALUES = ("true", "TRUE")
_FALSE_VALUES = ("false", "FALSE")
MAX_SAFE_NUMBER = 2 ** 53


class ValueKind(enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    MISSING = "missing"


def value_kind(value: CellValue) -> ValueKind:
    if value is None:
        return ValueKind.MISSING
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    return ValueKind.STRING


def coerce_value(raw: str) -> CellValue:
    """
    Infer a typed value from raw CSV text.

    "true"/"TRUE"/"false"/"FALSE" become booleans, numeric-looking text
    becomes int (no fraction or exponent) or float, as long as it lies
    strictly inside +/-2**53. Anything else, including the empty string and
    numbers too large to hold exactly, stays as-is.
    """
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    if not _NUMBER_RE.match(raw):
        return raw
    # float() saturates to inf instead of raising on very long digit runs
    number = float(raw)
    if not (math.isfinite(number) and -MAX_SAFE_NUMBER < number < MAX_SAFE_NUMBER):
        return raw
    if _INTEGER_RE.match(raw):
        return int(number)
    return number


def cell_to_text(value: CellValue) -> str:
    """Render a cell as text the way it is compared in the mixed-type fallback."""
    kind = value_kind(value)
    if kind is ValueKind.MISSING:
        return MISSING_TEXT
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return _number_to_text(value)
    return value


def cell_to_csv(value: CellValue) -> str:
    """Render a cell for export. Missing cells export as empty fields."""
    if value is None:
        return ""
    return cell_to_text(value)


def _number_to_text(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class Dataset:
    """Ordered records sharing one column list."""

    columns: List[str]
    records: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def replace_records(self, records: List[Record]) -> "Dataset":
        return Dataset(columns=list(self.columns), records=list(records))

    def rows(self) -> List[List[CellValue]]:
        return [[record.get(c) for c in self.columns] for record in self.records]


@dataclass(frozen=True)
class IngestWarning:
    """One row-level finding from ingestion."""

    row: Optional[int]
    issue: str
    action: str
    column: Optional[str] = None
    value: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[Union[int, str]]]:
        return {
            "row": self.row,
            "column": self.column,
            "issue": self.issue,
            "value": self.value,
            "action": self.action,
        }


@dataclass
class ParsedDataset:
    """A dataset plus what ingestion and filtering had to say about it."""

    dataset: Dataset
    warnings: List[IngestWarning] = field(default_factory=list)
    filtered_out: int = 0
    encoding: Optional[str] = None
    delimiter: str = ","
