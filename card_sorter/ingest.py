"""
Upload ingestion.

Responsibilities:
- encoding detection + decoding
- delimiter detection
- header handling (duplicate names)
- row width enforcement (pad short rows, truncate long rows)
- optional trimming, empty line skipping and dynamic typing
"""

from __future__ import annotations

import csv
import io
import logging
from typing import List, Tuple

from charset_normalizer import from_bytes

from .errors import ParseError
from .records import CellValue, Dataset, IngestWarning, ParsedDataset, Record, coerce_value
from .rules import SNIFF_DELIMITERS, SNIFF_SAMPLE_SIZE

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"


def decode_upload(raw: bytes) -> Tuple[str, str, List[IngestWarning]]:
    """
    Decode uploaded bytes to text.

    Rules:
    - A UTF-8 BOM wins outright and is stripped.
    - Strict UTF-8 is tried next.
    - Otherwise the best guess from charset-normalizer is used.
    - If that fails too, decode with replacement characters and report it.

    Returns (text, encoding used, warnings).
    """
    warnings: List[IngestWarning] = []

    if raw.startswith(_UTF8_BOM):
        return raw.decode("utf-8-sig"), "utf-8-sig", warnings

    try:
        return raw.decode("utf-8"), "utf-8", warnings
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    detected = match.encoding if match is not None else None
    if detected is not None:
        try:
            return raw.decode(detected), detected, warnings
        except (UnicodeDecodeError, LookupError):
            logger.debug("detected encoding %s failed to decode upload", detected)

    warnings.append(IngestWarning(
        row=None,
        issue="undecodable_bytes",
        value=detected,
        action="decoded_utf8_with_replacement",
    ))
    return raw.decode("utf-8", errors="replace"), "utf-8", warnings


def sniff_delimiter(text: str) -> str:
    sample = text[:SNIFF_SAMPLE_SIZE]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(SNIFF_DELIMITERS))
    except csv.Error:
        return ","
    return dialect.delimiter


def dedupe_header(header: List[str]) -> Tuple[List[str], List[IngestWarning]]:
    """Give repeated column names a `_<n>` suffix so every record key is unique."""
    seen = set(header)
    counts: dict = {}
    columns: List[str] = []
    warnings: List[IngestWarning] = []
    for name in header:
        if name not in counts:
            counts[name] = 0
            columns.append(name)
            continue
        counts[name] += 1
        renamed = f"{name}_{counts[name]}"
        while renamed in seen:
            counts[name] += 1
            renamed = f"{name}_{counts[name]}"
        seen.add(renamed)
        columns.append(renamed)
        warnings.append(IngestWarning(
            row=1,
            column=name,
            issue="duplicate_header",
            value=name,
            action=f"renamed_to_{renamed}",
        ))
    return columns, warnings


def _is_blank(row: List[str]) -> bool:
    return all(not cell.strip() for cell in row)


def read_csv(
    raw: bytes,
    *,
    trim_values: bool = False,
    skip_empty_lines: bool = False,
    dynamic_typing: bool = False,
) -> ParsedDataset:
    """
    Parse uploaded CSV bytes into a dataset.

    The first non-blank row is the header. A header-only file yields an
    empty dataset; a file with no header at all is a ParseError.
    """
    text, encoding, warnings = decode_upload(raw)
    if not text.strip():
        raise ParseError("Unable to parse CSV file: no header row found")

    delimiter = sniff_delimiter(text)
    logger.debug("ingesting upload: encoding=%s delimiter=%r", encoding, delimiter)

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        rows = list(reader)
    except csv.Error as err:
        raise ParseError(f"Unable to parse CSV file at line {reader.line_num}: {err}") from err

    header_index = next((i for i, row in enumerate(rows) if not _is_blank(row)), None)
    if header_index is None:
        raise ParseError("Unable to parse CSV file: no header row found")
    header = rows[header_index]
    if trim_values:
        header = [name.strip() for name in header]
    columns, header_warnings = dedupe_header(header)
    warnings.extend(header_warnings)
    width = len(columns)

    records: List[Record] = []
    for i, row in enumerate(rows[header_index + 1:], start=header_index + 2):
        if skip_empty_lines and _is_blank(row):
            continue
        if not row:
            # csv yields [] for an empty line; keep it as one empty field
            row = [""]

        values: List[CellValue] = list(row)
        if trim_values:
            values = [v.strip() for v in row]
        if dynamic_typing:
            values = [coerce_value(v) for v in values]

        if len(values) < width:
            warnings.append(IngestWarning(
                row=i,
                issue="row_too_short",
                value=str(len(values)),
                action=f"padded_to_{width}",
            ))
            values = values + [None] * (width - len(values))
        elif len(values) > width:
            warnings.append(IngestWarning(
                row=i,
                issue="row_too_long",
                value=str(len(values)),
                action=f"truncated_to_{width}",
            ))
            values = values[:width]

        records.append(dict(zip(columns, values)))

    return ParsedDataset(
        dataset=Dataset(columns=columns, records=records),
        warnings=warnings,
        encoding=encoding,
        delimiter=delimiter,
    )
