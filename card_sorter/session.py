"""
Sort session state.

A session owns the current dataset and sort spec for one user interaction.
Uploading replaces the dataset wholesale (last write wins), setting a spec
replaces the spec wholesale. Nothing is shared between sessions.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import pipeline
from .cards import CARD_SORT_SPEC
from .errors import ParseError, ProcessingError, SorterError, SortSpecError
from .pipeline import Variant
from .records import Dataset, ParsedDataset
from .rules import DEFAULT_MAX_SORT_KEYS
from .sorting import SortSpec

logger = logging.getLogger(__name__)


class SortSession:
    def __init__(self, variant: Variant = Variant.GENERIC, *, max_sort_keys: int = DEFAULT_MAX_SORT_KEYS):
        self.variant = variant
        self.max_sort_keys = max_sort_keys
        self.spec = CARD_SORT_SPEC if variant is Variant.CARDS else SortSpec()
        self.parsed: Optional[ParsedDataset] = None
        self.sorted: Optional[Dataset] = None
        self.error: Optional[str] = None

    @property
    def dataset(self) -> Optional[Dataset]:
        return self.parsed.dataset if self.parsed is not None else None

    @property
    def filename(self) -> str:
        return pipeline.export_filename(self.variant)

    def load(self, raw: bytes, *, dynamic_typing: Optional[bool] = None) -> ParsedDataset:
        """
        Replace the session dataset with a freshly parsed upload.

        On failure no dataset is kept and `error` holds the message to show.

        Raises:
            ParseError: message is the parser's own.
            ProcessingError: anything else, with a generic message.
        """
        self.parsed = None
        self.sorted = None
        self.error = None
        try:
            parsed = pipeline.parse_and_filter(raw, self.variant, dynamic_typing=dynamic_typing)
        except ParseError as err:
            logger.info("rejected %s upload: %s", self.variant.value, err)
            self.error = str(err)
            raise
        except Exception as err:
            logger.exception("failed to process %s upload", self.variant.value)
            self.error = ProcessingError.GENERIC_MESSAGE
            raise ProcessingError() from err

        self.parsed = parsed
        logger.info(
            "loaded %s upload: %d rows, %d columns, %d filtered out, %d warnings",
            self.variant.value,
            len(parsed.dataset),
            len(parsed.dataset.columns),
            parsed.filtered_out,
            len(parsed.warnings),
        )
        return parsed

    def set_spec(self, spec: SortSpec) -> SortSpec:
        if self.variant is Variant.CARDS:
            raise SortSpecError("Card inventory uses a fixed sort order")
        self.spec = spec.limited_to(self.max_sort_keys)
        return self.spec

    def sort(self) -> Dataset:
        if self.dataset is None:
            raise SorterError("No file loaded")
        try:
            self.sorted = pipeline.sort(self.dataset, self.spec, self.variant)
        except Exception as err:
            logger.exception("failed to sort %s dataset", self.variant.value)
            self.error = ProcessingError.GENERIC_MESSAGE
            raise ProcessingError() from err
        logger.info("sorted %d rows by %s", len(self.sorted), self.spec.columns)
        return self.sorted

    def exportable(self) -> Optional[Dataset]:
        """The dataset a download would contain, or None when there is nothing to offer.

        Cards fall back to the unsorted normalized rows; the generic variant
        only offers a download after sorting.
        """
        candidate = self.sorted
        if candidate is None and self.variant is Variant.CARDS:
            candidate = self.dataset
        if candidate is None or candidate.is_empty:
            return None
        return candidate

    @property
    def downloadable(self) -> bool:
        return self.exportable() is not None

    def export(self) -> Optional[bytes]:
        dataset = self.exportable()
        if dataset is None:
            return None
        content = pipeline.serialize(dataset)
        logger.info("exported %d rows as %s", len(dataset), self.filename)
        return content
