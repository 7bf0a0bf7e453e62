"""Delimited text export (CSV/TSV) and the matching reader.

Three writer flavours are provided:

- `write_delimited`: general form; row labels are written by default and the
  output uses the platform's preferred encoding unless told otherwise.
- `write_csv`: the faster variant without row labels, always UTF-8.
- `write_excel_csv`: `write_csv` plus a UTF-8 byte-order marker so spreadsheet
  applications detect the encoding.

Rows are rendered by `polars.DataFrame.write_csv`; the header line is built here
so that the row-label header is always the quoted empty field `""`. The whole
document is encoded in memory before the destination is opened, so encoding
failures never leave a file behind.
"""

from __future__ import annotations

import codecs
import io
import locale
import pathlib
import typing

import polars as pl
from loguru import logger

from tabexport.config import settings
from tabexport.errors import EncodingError, PathError
from tabexport.models.options import QUOTE_STYLES
from tabexport.models.table import Table, TableLike, as_table
from tabexport.utils.validation import ensure_parent_exists

QUOTE_CHAR = '"'


def _quote_header_field(name: str, delimiter: str, quote_style: str) -> str:
    """Quote a column name according to the quoting policy."""
    needs_quotes = (
        name == ""
        or delimiter in name
        or QUOTE_CHAR in name
        or "\n" in name
        or "\r" in name
    )
    if quote_style in ("always", "non_numeric") or (quote_style == "necessary" and needs_quotes):
        return QUOTE_CHAR + name.replace(QUOTE_CHAR, QUOTE_CHAR * 2) + QUOTE_CHAR
    return name


def _resolve_encoding(encoding: str | None) -> str:
    return encoding or settings.default_encoding or locale.getpreferredencoding(False)


def render_delimited(
    table: TableLike,
    *,
    delimiter: str | None = None,
    include_header: bool = True,
    include_row_labels: bool = True,
    missing_value_placeholder: str | None = None,
    quote_style: str | None = None,
    float_precision: int | None = None,
    line_terminator: str | None = None,
) -> str:
    """Render a table as delimited text without touching the filesystem.

    Args:
        table (TableLike): Table, Polars DataFrame or column mapping.
        delimiter (str | None): Single-character field separator.
        include_header (bool): Write the column names as the first line.
        include_row_labels (bool): Write row labels as a leading column; rows
            without labels are numbered from 1.
        missing_value_placeholder (str | None): Text written for missing values.
        quote_style (str | None): One of `necessary`, `always`, `non_numeric`, `never`.
        float_precision (int | None): Fixed number of decimals for floats.
        line_terminator (str | None): Line ending, `\\n` by default.

    Returns:
        str: The rendered document.

    """
    tbl = as_table(table)
    delimiter = delimiter if delimiter is not None else settings.default_delimiter
    placeholder = (
        missing_value_placeholder if missing_value_placeholder is not None else settings.missing_value_placeholder
    )
    quote_style = quote_style or settings.quote_style
    float_precision = float_precision if float_precision is not None else settings.float_precision
    line_terminator = line_terminator or settings.line_terminator

    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
    if quote_style not in QUOTE_STYLES:
        raise ValueError(f"Unknown quote style {quote_style!r}; expected one of {QUOTE_STYLES}")

    frame = tbl.with_row_labels_column(settings.row_label_header) if include_row_labels else tbl.frame

    parts: list[str] = []
    if include_header and frame.width:
        fields = [_quote_header_field(name, delimiter, quote_style) for name in tbl.columns]
        if include_row_labels:
            fields.insert(0, QUOTE_CHAR * 2)
        parts.append(delimiter.join(fields) + line_terminator)

    if frame.width and frame.height:
        parts.append(
            frame.write_csv(
                None,
                include_header=False,
                separator=delimiter,
                line_terminator=line_terminator,
                quote_char=QUOTE_CHAR,
                null_value=placeholder,
                quote_style=quote_style,
                float_precision=float_precision,
            )
        )
    return "".join(parts)


def encode_document(text: str, encoding: str | None = None, *, byte_order_mark: bool = False) -> bytes:
    """Encode rendered text, optionally prefixed with a UTF-8 byte-order marker.

    Raises:
        EncodingError: When the codec is unknown, a character cannot be
            represented, or a BOM is requested for a non UTF-8 codec.

    """
    enc = _resolve_encoding(encoding)
    try:
        codec_name = codecs.lookup(enc).name
    except LookupError as exc:
        raise EncodingError(f"Unknown encoding: {enc!r}") from exc

    try:
        data = text.encode(enc)
    except UnicodeEncodeError as exc:
        bad = exc.object[exc.start : exc.end]
        raise EncodingError(f"Cannot represent {bad!r} in encoding {enc!r}") from exc

    if byte_order_mark:
        if codec_name == "utf-8":
            data = codecs.BOM_UTF8 + data
        elif codec_name != "utf-8-sig":
            raise EncodingError(f"A byte-order marker is only written for UTF-8, not {enc!r}")
    return data


def write_delimited(
    table: TableLike,
    path: str | pathlib.Path,
    *,
    delimiter: str | None = None,
    include_header: bool = True,
    include_row_labels: bool = True,
    missing_value_placeholder: str | None = None,
    quote_style: str | None = None,
    encoding: str | None = None,
    byte_order_mark: bool = False,
    float_precision: int | None = None,
    line_terminator: str | None = None,
) -> pathlib.Path:
    """Write a table to a delimited text file.

    Args:
        table (TableLike): Table, Polars DataFrame or column mapping.
        path (str | pathlib.Path): Destination; its parent directory must exist.
        encoding (str | None): Output codec; the platform's preferred encoding
            when neither this nor `settings.default_encoding` is set.
        byte_order_mark (bool): Prefix the file with a UTF-8 BOM.

    The remaining arguments are forwarded to `render_delimited`.

    Returns:
        pathlib.Path: Path object pointing to the file written.

    Raises:
        PathError: When the destination cannot be created or written.
        EncodingError: When a value cannot be represented in the encoding.

    """
    p = ensure_parent_exists(path)
    tbl = as_table(table)
    text = render_delimited(
        tbl,
        delimiter=delimiter,
        include_header=include_header,
        include_row_labels=include_row_labels,
        missing_value_placeholder=missing_value_placeholder,
        quote_style=quote_style,
        float_precision=float_precision,
        line_terminator=line_terminator,
    )
    try:
        data = encode_document(text, encoding, byte_order_mark=byte_order_mark)
    except EncodingError as exc:
        logger.warning(f"Not writing {p}: {exc}")
        raise

    logger.debug(f"Writing {len(data)} bytes of delimited text to {p}")
    try:
        with p.open("wb") as fh:
            fh.write(data)
    except OSError as exc:
        logger.warning(f"Failed to write {p}: {exc}")
        raise PathError(f"Cannot write {p}: {exc}") from exc

    logger.info(f"Wrote {tbl.height} rows x {tbl.width} columns to {p}")
    return p


def write_csv(table: TableLike, path: str | pathlib.Path, **kwargs: typing.Any) -> pathlib.Path:
    """Write comma-separated UTF-8 text without row labels."""
    kwargs.setdefault("include_row_labels", False)
    kwargs.setdefault("encoding", "utf-8")
    return write_delimited(table, path, **kwargs)


def write_excel_csv(table: TableLike, path: str | pathlib.Path, **kwargs: typing.Any) -> pathlib.Path:
    """Write like `write_csv`, prefixed with a UTF-8 byte-order marker."""
    kwargs["byte_order_mark"] = True
    return write_csv(table, path, **kwargs)


def read_delimited(
    path: str | pathlib.Path,
    *,
    delimiter: str | None = None,
    has_header: bool = True,
    row_labels: bool = False,
    missing_value_placeholder: str | None = None,
    encoding: str = "utf-8",
) -> Table:
    """Read a delimited text file back into a Table.

    Args:
        path (str | pathlib.Path): File to read.
        delimiter (str | None): Field separator; `settings.default_delimiter` when None.
        has_header (bool): Whether the first line holds column names.
        row_labels (bool): Treat the first column as row labels.
        missing_value_placeholder (str | None): Text to read back as a missing value.
        encoding (str): Codec of the file. A leading UTF-8 BOM is always stripped.

    Returns:
        Table: The parsed table.

    """
    p = pathlib.Path(path)
    if not p.is_file():
        raise PathError(f"No such file: {p}")
    delimiter = delimiter if delimiter is not None else settings.default_delimiter
    placeholder = (
        missing_value_placeholder if missing_value_placeholder is not None else settings.missing_value_placeholder
    )

    try:
        text = p.read_bytes().decode(encoding)
    except UnicodeDecodeError as exc:
        raise EncodingError(f"{p} is not valid {encoding}") from exc
    except LookupError as exc:
        raise EncodingError(f"Unknown encoding: {encoding!r}") from exc
    text = text.removeprefix("\ufeff")
    if not text.strip():
        return Table(pl.DataFrame())

    frame = pl.read_csv(
        io.BytesIO(text.encode("utf-8")),
        separator=delimiter,
        has_header=has_header,
        quote_char=QUOTE_CHAR,
        null_values=[placeholder] if placeholder else None,
    )
    if not row_labels:
        return Table(frame)

    labels = ["" if label is None else str(label) for label in frame.to_series(0).to_list()]
    return Table(frame.drop(frame.columns[0]), labels)
