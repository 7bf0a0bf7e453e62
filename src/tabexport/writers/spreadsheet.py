"""Spreadsheet export helpers for writing styled multi-sheet workbooks.

Each sheet's table is placed with `polars.DataFrame.write_excel` into a shared
`xlsxwriter.Workbook`; decoration (titles, paragraphs, hyperlinks, column widths
and cell styles) is then written onto the same worksheet. Everything that can be
validated (sheet names, style targets, decoration placement) is checked before
the file is opened.
"""

from __future__ import annotations

import datetime
import pathlib
import typing

import polars as pl
import polars.selectors as cs
import xlsxwriter
from loguru import logger
from xlsxwriter.exceptions import FileCreateError
from xlsxwriter.utility import xl_cell_to_rowcol, xl_range
from xlsxwriter.worksheet import Worksheet

from tabexport.config import settings
from tabexport.errors import PathError, StyleTargetError
from tabexport.models.table import TableLike
from tabexport.models.workbook import CellStyle, SheetSpec, Workbook
from tabexport.utils.validation import CellBounds, check_unique_sheet_names, ensure_parent_exists, parse_cell_range

EXCEL_SUFFIXES = (".xlsx", ".xlsm")
DATE_FORMAT = "yyyy-mm-dd"
DATETIME_FORMAT = "yyyy-mm-dd hh:mm:ss"


def _contains(outer: CellBounds, inner: CellBounds) -> bool:
    return outer[0] <= inner[0] and outer[1] <= inner[1] and inner[2] <= outer[2] and inner[3] <= outer[3]


def _overlaps(a: CellBounds, b: CellBounds) -> bool:
    return not (a[2] < b[0] or b[2] < a[0] or a[3] < b[1] or b[3] < a[1])


def _block_bounds(cell, merge_to) -> CellBounds:
    first = parse_cell_range(cell)
    if merge_to is None:
        return first
    last = parse_cell_range(merge_to)
    return first[0], first[1], last[2], last[3]


def _validate_sheet(sheet: SheetSpec) -> None:
    """Check that styles target the table and decoration stays clear of it."""
    extent = sheet.extent
    for style_range in sheet.styles:
        bounds = style_range.bounds
        if extent is None or not _contains(extent, bounds):
            table_range = xl_range(*extent) if extent is not None else "nothing"
            raise StyleTargetError(
                f"Style range {xl_range(*bounds)} on sheet {sheet.name!r} is outside the table ({table_range})"
            )

    placed: list[tuple[str, CellBounds]] = []
    for block in sheet.text_blocks:
        kind = "Merged text" if block.merge_to is not None else "Text"
        placed.append((kind, _block_bounds(block.cell, block.merge_to)))
    for link in sheet.hyperlinks:
        placed.append(("Hyperlink", _block_bounds(link.cell, None)))

    for kind, bounds in placed:
        if extent is not None and _overlaps(extent, bounds):
            raise StyleTargetError(
                f"{kind} at {xl_range(*bounds)} on sheet {sheet.name!r} overlaps the table ({xl_range(*extent)})"
            )

    merged = [bounds for kind, bounds in placed if kind == "Merged text"]
    for i, first in enumerate(merged):
        for second in merged[i + 1 :]:
            if _overlaps(first, second):
                raise StyleTargetError(
                    f"Merged text ranges {xl_range(*first)} and {xl_range(*second)} on sheet {sheet.name!r} overlap"
                )


def _column_index(key: int | str) -> int:
    if isinstance(key, int):
        return key
    return xl_cell_to_rowcol(f"{key.upper()}1")[1]


class _FormatCache:
    """Create each distinct xlsxwriter format once per workbook."""

    def __init__(self, wb: xlsxwriter.Workbook) -> None:
        self._wb = wb
        self._formats: dict[tuple, typing.Any] = {}

    def get(self, props: dict[str, typing.Any]):
        key = tuple(sorted(props.items()))
        if key not in self._formats:
            self._formats[key] = self._wb.add_format(props)
        return self._formats[key]


def _place_table(wb: xlsxwriter.Workbook, sheet: SheetSpec, frame: pl.DataFrame, header: list[str]) -> Worksheet:
    """Write the sheet's table at its offset and return the worksheet."""
    position = (sheet.start_row, sheet.start_column)
    if frame.width == 0:
        return wb.add_worksheet(sheet.name)
    if frame.height == 0:
        ws = wb.add_worksheet(sheet.name)
        if sheet.include_header:
            ws.write_row(*position, header)
        return ws

    dtype_formats: dict[typing.Any, str] = {pl.Date: "YYYY-MM-DD", pl.Datetime: "YYYY-MM-DD HH:MM:SS"}
    column_formats = {~cs.temporal(): "General"}
    frame.write_excel(
        workbook=wb,
        worksheet=sheet.name,
        position=position,
        include_header=sheet.include_header,
        autofit=sheet.autofit,
        dtype_formats=dtype_formats,
        column_formats=column_formats,
    )
    return wb.get_worksheet_by_name(sheet.name)


def _apply_styles(ws: Worksheet, sheet: SheetSpec, frame: pl.DataFrame, header: list[str], formats: _FormatCache) -> None:
    """Re-write every styled cell with the merged format of the ranges covering it."""
    cell_styles: dict[tuple[int, int], CellStyle] = {}
    for style_range in sheet.styles:
        first_row, first_col, last_row, last_col = style_range.bounds
        for row in range(first_row, last_row + 1):
            for col in range(first_col, last_col + 1):
                current = cell_styles.get((row, col), CellStyle())
                cell_styles[(row, col)] = current.merge(style_range.style)

    header_rows = 1 if sheet.include_header else 0
    for (row, col), style in sorted(cell_styles.items()):
        j = col - sheet.start_column
        i = row - sheet.start_row - header_rows
        value = header[j] if i < 0 else frame.item(i, j)
        props = style.to_format()
        if "num_format" not in props:
            if isinstance(value, datetime.datetime):
                props["num_format"] = DATETIME_FORMAT
            elif isinstance(value, datetime.date):
                props["num_format"] = DATE_FORMAT
        ws.write(row, col, value, formats.get(props))


def _decorate(ws: Worksheet, sheet: SheetSpec, formats: _FormatCache) -> None:
    for key, width in sheet.column_widths.items():
        col = _column_index(key)
        ws.set_column(col, col, width)

    for block in sheet.text_blocks:
        fmt = formats.get(block.style.to_format()) if block.style is not None else None
        first_row, first_col, _, _ = parse_cell_range(block.cell)
        if block.merge_to is not None:
            _, _, last_row, last_col = parse_cell_range(block.merge_to)
            if (last_row, last_col) != (first_row, first_col):
                ws.merge_range(first_row, first_col, last_row, last_col, block.text, fmt)
                continue
        ws.write_string(first_row, first_col, block.text, fmt)

    for link in sheet.hyperlinks:
        row, col, _, _ = parse_cell_range(link.cell)
        ws.write_url(row, col, link.url, string=link.text, tip=link.tip)


def write_workbook(workbook: Workbook, path: str | pathlib.Path) -> pathlib.Path:
    """Write every sheet of `workbook` to a single xlsx file.

    Args:
        workbook (Workbook): Sheets to write, in order.
        path (str | pathlib.Path): Destination; a missing Excel suffix becomes `.xlsx`.
            An existing file is overwritten.

    Returns:
        pathlib.Path: Path object pointing to the file written.

    Raises:
        SheetNameCollisionError: When two sheets share a name.
        SheetNameError: When a sheet name is not allowed by the format.
        StyleTargetError: When a style range reaches outside its sheet's table, or
            decoration overlaps the table or another merged range.
        PathError: When the destination cannot be created or written.

    """
    p = pathlib.Path(path)
    if p.suffix.lower() not in EXCEL_SUFFIXES:
        p = p.with_suffix(".xlsx")
    p = ensure_parent_exists(p)

    check_unique_sheet_names(workbook.sheet_names)
    for sheet in workbook.sheets:
        _validate_sheet(sheet)

    logger.debug(f"Writing workbook {p} with sheets {workbook.sheet_names}")
    try:
        with xlsxwriter.Workbook(str(p)) as wb:
            formats = _FormatCache(wb)
            for sheet in workbook.sheets:
                table = sheet.data
                header = list(table.columns)
                if sheet.include_row_labels:
                    frame = table.with_row_labels_column(settings.row_label_header)
                    header.insert(0, frame.columns[0])
                else:
                    frame = table.frame
                ws = _place_table(wb, sheet, frame, header)
                _decorate(ws, sheet, formats)
                _apply_styles(ws, sheet, frame, header, formats)
    except (FileCreateError, OSError) as exc:
        logger.warning(f"Failed to write workbook {p}: {exc}")
        raise PathError(f"Cannot write {p}: {exc}") from exc

    logger.info(f"Wrote workbook {p} with {len(workbook.sheets)} sheet(s)")
    return p


def write_sheets(
    tables: typing.Mapping[str, TableLike],
    path: str | pathlib.Path,
    **sheet_kwargs: typing.Any,
) -> pathlib.Path:
    """Write a mapping of sheet name to table, one sheet each, with shared placement options."""
    workbook = Workbook([SheetSpec(name, table, **sheet_kwargs) for name, table in tables.items()])
    return write_workbook(workbook, path)
