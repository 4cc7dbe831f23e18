"""Clean, sort and export trading card inventory CSVs."""

__version__ = "0.1.0"
