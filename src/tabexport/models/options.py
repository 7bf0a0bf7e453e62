"""Export targets and the per-call option record."""

from __future__ import annotations

import dataclasses
import enum
import pathlib

from tabexport.models.workbook import StyleRange


class ExportFormat(str, enum.Enum):
    DELIMITED = "delimited"
    SPREADSHEET = "spreadsheet"
    OBJECT = "object"


class NameMode(str, enum.Enum):
    """Whether an object container keeps the names of the values it holds."""

    SINGLE = "single"
    NAMED = "named"


QUOTE_STYLES = ("necessary", "always", "non_numeric", "never")

_SUFFIX_FORMATS = {
    ".csv": ExportFormat.DELIMITED,
    ".tsv": ExportFormat.DELIMITED,
    ".txt": ExportFormat.DELIMITED,
    ".xlsx": ExportFormat.SPREADSHEET,
    ".xlsm": ExportFormat.SPREADSHEET,
    ".pkl": ExportFormat.OBJECT,
    ".pickle": ExportFormat.OBJECT,
    ".rds": ExportFormat.OBJECT,
    ".rdata": ExportFormat.OBJECT,
}


@dataclasses.dataclass
class ExportOptions:
    """Recognized options for a single export call.

    `None` means "use the configured default" (see `tabexport.config.settings`).
    Options that do not apply to the target format are ignored.
    """

    # Delimited text
    delimiter: str | None = None
    include_header: bool = True
    include_row_labels: bool | None = None
    missing_value_placeholder: str | None = None
    encoding: str | None = None
    byte_order_mark: bool = False
    quote_style: str | None = None
    float_precision: int | None = None
    # Spreadsheet
    sheet_name: str | None = None
    start_row: int = 0
    start_column: int = 0
    styles: list[StyleRange] = dataclasses.field(default_factory=list)
    # Object container
    name_mode: NameMode = NameMode.SINGLE
    compress: bool | None = None

    def __post_init__(self) -> None:
        if self.quote_style is not None and self.quote_style not in QUOTE_STYLES:
            raise ValueError(f"Unknown quote style {self.quote_style!r}; expected one of {QUOTE_STYLES}")
        self.name_mode = NameMode(self.name_mode)


def infer_format(path: str | pathlib.Path) -> ExportFormat:
    """Guess the export format from the file suffix."""
    suffix = pathlib.Path(path).suffix.lower()
    try:
        return _SUFFIX_FORMATS[suffix]
    except KeyError:
        raise ValueError(f"Cannot infer export format from suffix {suffix!r} of {path}") from None


@dataclasses.dataclass
class ExportTarget:
    """A destination path, a format selector and the call's options."""

    path: pathlib.Path
    format: ExportFormat | None = None
    options: ExportOptions = dataclasses.field(default_factory=ExportOptions)

    def __post_init__(self) -> None:
        self.path = pathlib.Path(self.path)
        if self.format is None:
            self.format = infer_format(self.path)
            if self.path.suffix.lower() == ".tsv" and self.options.delimiter is None:
                self.options = dataclasses.replace(self.options, delimiter="\t")
        else:
            self.format = ExportFormat(self.format)
