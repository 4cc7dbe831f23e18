"""
Pipeline entry points.

Pipeline shape:
- ingest bytes -> dataset
- drop noise rows
- (cards only) normalize onto the card schema
- sort
- serialize back to CSV

Two variants share this shape and differ only in their profile.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from .cards import normalize_cards, sort_cards
from .export import serialize_dataset
from .filtering import filter_noise
from .ingest import read_csv
from .records import Dataset, ParsedDataset
from .rules import (
    CARD_EXPORT_FILENAME,
    CARD_NOISE_MARKERS,
    GENERIC_EXPORT_FILENAME,
    GENERIC_NOISE_MARKERS,
)
from .sorting import SortSpec, sort_dataset


class Variant(str, enum.Enum):
    GENERIC = "generic"
    CARDS = "cards"


@dataclass(frozen=True)
class VariantProfile:
    trim_values: bool
    skip_empty_lines: bool
    dynamic_typing: bool
    noise_markers: Tuple[str, ...]
    case_insensitive_noise: bool
    normalize: bool
    export_filename: str


PROFILES = {
    Variant.GENERIC: VariantProfile(
        trim_values=False,
        skip_empty_lines=False,
        dynamic_typing=True,
        noise_markers=GENERIC_NOISE_MARKERS,
        case_insensitive_noise=False,
        normalize=False,
        export_filename=GENERIC_EXPORT_FILENAME,
    ),
    Variant.CARDS: VariantProfile(
        trim_values=True,
        skip_empty_lines=True,
        dynamic_typing=False,
        noise_markers=CARD_NOISE_MARKERS,
        case_insensitive_noise=True,
        normalize=True,
        export_filename=CARD_EXPORT_FILENAME,
    ),
}


def parse_and_filter(
    raw: bytes,
    variant: Variant = Variant.GENERIC,
    *,
    dynamic_typing: Optional[bool] = None,
) -> ParsedDataset:
    """
    Ingest, filter and (for cards) normalize an upload.

    Raises:
        ParseError: the upload is not parseable CSV.
    """
    profile = PROFILES[variant]
    if dynamic_typing is None:
        dynamic_typing = profile.dynamic_typing

    parsed = read_csv(
        raw,
        trim_values=profile.trim_values,
        skip_empty_lines=profile.skip_empty_lines,
        dynamic_typing=dynamic_typing,
    )
    records = filter_noise(
        parsed.dataset.records,
        profile.noise_markers,
        case_insensitive=profile.case_insensitive_noise,
    )
    parsed.filtered_out = len(parsed.dataset.records) - len(records)

    if profile.normalize:
        parsed.dataset = normalize_cards(records)
    else:
        parsed.dataset = parsed.dataset.replace_records(records)
    return parsed


def sort(dataset: Dataset, spec: Optional[SortSpec] = None, variant: Variant = Variant.GENERIC) -> Dataset:
    """Sort a dataset. The cards variant always uses its fixed order."""
    if variant is Variant.CARDS:
        return sort_cards(dataset)
    return sort_dataset(dataset, spec or SortSpec())


def serialize(dataset: Dataset) -> bytes:
    return serialize_dataset(dataset)


def export_filename(variant: Variant) -> str:
    return PROFILES[variant].export_filename
