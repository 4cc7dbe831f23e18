"""
Deterministic cleaning and sorting rules.

This file exists to make the fixed parts of both pipelines explicit.
"""

SNIFF_DELIMITERS = [",", ";", "\t", "|"]
SNIFF_SAMPLE_SIZE = 4096
OUTPUT_DELIMITER = ","
OUTPUT_ENCODING = "utf-8"
CSV_MEDIA_TYPE = "text/csv"

# Vendor inventory exports end with a boilerplate footer row.
PULL_SHEET_MARKER = "Orders Contained in Pull Sheet"
GENERIC_NOISE_MARKERS = (PULL_SHEET_MARKER,)
CARD_NOISE_MARKERS = (PULL_SHEET_MARKER, "pull sheet")

# Raw vendor column -> normalized card column
CARD_SOURCE_COLUMNS = {
    "product name": "Product Name",
    "condition": "Condition",
    "rarity": "Rarity",
    "set": "Set",
}
CARD_NUMBER_SOURCE = "Number"
CARD_QUANTITY_SOURCE = "Quantity"
CARD_DEFAULT_QUANTITY = "1"

CARD_COLUMNS = (
    "numbershort",
    "number",
    "product name",
    "condition",
    "qty",
    "rarity",
    "set",
    "notes",
)
CARD_SORT_COLUMNS = ("set", "rarity", "condition", "product name")

GENERIC_EXPORT_FILENAME = "sorted-data.csv"
CARD_EXPORT_FILENAME = "sorted_cards.csv"

DEFAULT_MAX_SORT_KEYS = 3

# String form of a missing cell when compared as text.
MISSING_TEXT = "undefined"
