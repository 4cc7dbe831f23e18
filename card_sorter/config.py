"""
Runtime configuration.

All environment variable parsing happens here; the rest of the package
consumes a typed config object.
"""

from __future__ import annotations

import locale
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError
from .rules import DEFAULT_MAX_SORT_KEYS

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class SorterConfig:
    """
    Validated runtime configuration.

    - log_level: stdlib logging level name.
    - max_sort_keys: how many sort keys a generic request may carry.
    - collation_locale: locale applied to LC_COLLATE at startup, or None to
      keep the process default.
    """

    log_level: str = "INFO"
    max_sort_keys: int = DEFAULT_MAX_SORT_KEYS
    collation_locale: Optional[str] = None

    @classmethod
    def from_env(cls) -> "SorterConfig":
        log_level = os.getenv("SORTER_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigError(
                f"Invalid SORTER_LOG_LEVEL value: expected one of {', '.join(_LOG_LEVELS)}, "
                f"got '{log_level}'."
            )
        max_sort_keys = _parse_max_sort_keys(
            os.getenv("SORTER_MAX_SORT_KEYS", str(DEFAULT_MAX_SORT_KEYS))
        )
        collation_locale = os.getenv("SORTER_COLLATION_LOCALE") or None
        return cls(
            log_level=log_level,
            max_sort_keys=max_sort_keys,
            collation_locale=collation_locale,
        )


def _parse_max_sort_keys(raw_value: str) -> int:
    try:
        value = int(raw_value)
    except ValueError as error:
        raise ConfigError(
            f"Invalid SORTER_MAX_SORT_KEYS value: expected integer, got '{raw_value}'."
        ) from error
    if value < 1:
        raise ConfigError(
            f"Invalid SORTER_MAX_SORT_KEYS value: must be at least 1, got {value}."
        )
    return value


def apply_collation_locale(config: SorterConfig) -> None:
    """Switch LC_COLLATE to the configured locale, if any."""
    if config.collation_locale is None:
        return
    try:
        locale.setlocale(locale.LC_COLLATE, config.collation_locale)
    except locale.Error as error:
        raise ConfigError(
            f"Invalid SORTER_COLLATION_LOCALE value: '{config.collation_locale}' "
            "is not available on this system."
        ) from error
