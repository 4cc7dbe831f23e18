"""CSV export of a dataset."""

from __future__ import annotations

import csv
import io

from .records import Dataset, cell_to_csv
from .rules import OUTPUT_DELIMITER, OUTPUT_ENCODING


def dataset_to_csv(dataset: Dataset) -> str:
    outp = io.StringIO(newline="")
    writer = csv.writer(outp, delimiter=OUTPUT_DELIMITER)
    writer.writerow(dataset.columns)
    for row in dataset.rows():
        writer.writerow([cell_to_csv(value) for value in row])
    return outp.getvalue()


def serialize_dataset(dataset: Dataset) -> bytes:
    """Header row plus one row per record, in the dataset's column order."""
    return dataset_to_csv(dataset).encode(OUTPUT_ENCODING)
