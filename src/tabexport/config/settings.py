"""Library configuration and environment-aware settings.

This module defines a `Settings` class (pydantic `BaseSettings`) holding the
defaults every writer falls back to when a call leaves an option unset:
delimiters, encodings, quoting, sheet placement, object container behaviour and
logging destinations.
"""

from __future__ import annotations

import pickle
from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Top-level pydantic Settings container for tabexport configuration.

    Values may be overridden via environment variables using the `TABEXPORT_`
    prefix, e.g. `TABEXPORT_DEFAULT_DELIMITER=";"`.
    """

    # Delimited text defaults
    default_delimiter: str = ","
    # None means the platform's preferred encoding
    default_encoding: str | None = None
    missing_value_placeholder: str = ""
    quote_style: str = "necessary"
    float_precision: int | None = None
    line_terminator: str = "\n"

    # Spreadsheet defaults
    default_sheet_name: str = "Sheet1"
    row_label_header: str = "rowname"

    # Object container defaults
    pickle_protocol: int = pickle.HIGHEST_PROTOCOL
    compress_single_objects: bool = True

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"

    model_config = ConfigDict(env_prefix="TABEXPORT_")


settings = Settings()
