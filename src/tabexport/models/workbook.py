"""Spreadsheet workbook models: sheets, placed tables and cell decoration.

A `Workbook` is an ordered list of `SheetSpec` objects. Each sheet places one
`Table` at a top-left offset and may carry styling (`StyleRange`), decorative
text (`TextBlock` for titles, subtitles and paragraphs), hyperlinks and column
widths. Cell references use A1 notation or zero-based tuples.
"""

from __future__ import annotations

import dataclasses
import typing

from tabexport.models.table import Table, TableLike, as_table
from tabexport.utils.validation import CellBounds, CellRef, parse_cell_range

# Excel border style indices as used by xlsxwriter
BORDER_STYLES: dict[str, int] = {
    "thin": 1,
    "medium": 2,
    "dashed": 3,
    "dotted": 4,
    "thick": 5,
    "double": 6,
    "hair": 7,
}
BORDER_SIDES = ("top", "bottom", "left", "right")


@dataclasses.dataclass(frozen=True)
class CellStyle:
    """Visual attributes applied to a cell. Unset attributes are `None`."""

    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    font_color: str | None = None
    font_size: float | None = None
    font_name: str | None = None
    bg_color: str | None = None
    align: str | None = None
    valign: str | None = None
    text_wrap: bool | None = None
    num_format: str | None = None
    border: str | None = None
    border_sides: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.border is not None and self.border not in BORDER_STYLES:
            raise ValueError(f"Unknown border style {self.border!r}; expected one of {sorted(BORDER_STYLES)}")
        unknown = set(self.border_sides) - set(BORDER_SIDES)
        if unknown:
            raise ValueError(f"Unknown border sides: {sorted(unknown)}")

    def merge(self, other: CellStyle) -> CellStyle:
        """Return a style where every attribute set on `other` overrides this one."""
        changes = {
            field.name: getattr(other, field.name)
            for field in dataclasses.fields(other)
            if getattr(other, field.name) not in (None, ())
        }
        return dataclasses.replace(self, **changes)

    def to_format(self) -> dict[str, typing.Any]:
        """Translate the style into an xlsxwriter format property dict."""
        props: dict[str, typing.Any] = {}
        for name in ("bold", "italic", "text_wrap"):
            value = getattr(self, name)
            if value is not None:
                props[name] = value
        if self.underline is not None:
            props["underline"] = 1 if self.underline else 0
        for name in ("font_color", "font_size", "font_name", "bg_color", "align", "valign", "num_format"):
            value = getattr(self, name)
            if value is not None:
                props[name] = value
        if self.border is not None:
            index = BORDER_STYLES[self.border]
            if self.border_sides:
                for side in self.border_sides:
                    props[side] = index
            else:
                props["border"] = index
        return props


@dataclasses.dataclass(frozen=True)
class StyleRange:
    """A style applied to every cell of a rectangular range."""

    cells: CellRef
    style: CellStyle

    @property
    def bounds(self) -> CellBounds:
        return parse_cell_range(self.cells)


@dataclasses.dataclass(frozen=True)
class TextBlock:
    """Free text written outside the table: a title, subtitle or paragraph.

    With `merge_to` the text spans the merged range from `cell` to `merge_to`.
    """

    cell: CellRef
    text: str
    style: CellStyle | None = None
    merge_to: CellRef | None = None


@dataclasses.dataclass(frozen=True)
class Hyperlink:
    cell: CellRef
    url: str
    text: str | None = None
    tip: str | None = None


def title(cell: CellRef, text: str, **style: typing.Any) -> TextBlock:
    """Build a large bold title block."""
    return TextBlock(cell, text, CellStyle(**{"bold": True, "font_size": 16, **style}))


def subtitle(cell: CellRef, text: str, **style: typing.Any) -> TextBlock:
    """Build an italic subtitle block."""
    return TextBlock(cell, text, CellStyle(**{"italic": True, "font_size": 12, **style}))


def paragraph(cell: CellRef, merge_to: CellRef, text: str, **style: typing.Any) -> TextBlock:
    """Build a wrapped paragraph spanning a merged range."""
    return TextBlock(cell, text, CellStyle(**{"text_wrap": True, "valign": "top", **style}), merge_to=merge_to)


@dataclasses.dataclass
class SheetSpec:
    """One worksheet: a table placed at an offset, plus decoration.

    Attributes:
        name: Worksheet name, unique within the workbook.
        table: The data to place; DataFrames and column mappings are coerced.
        start_row, start_column: Zero-based offset of the table's top-left cell.
        include_header: Write column names as the first row of the table.
        include_row_labels: Write row labels as the first column of the table.
        styles: Style ranges, applied in order; they must fall inside the table.
        text_blocks: Titles, subtitles and paragraphs placed anywhere on the sheet.
        hyperlinks: Links placed anywhere on the sheet.
        column_widths: Width per zero-based column index or column letter.
        autofit: Size table columns to their content.

    """

    name: str
    table: TableLike
    start_row: int = 0
    start_column: int = 0
    include_header: bool = True
    include_row_labels: bool = False
    styles: list[StyleRange] = dataclasses.field(default_factory=list)
    text_blocks: list[TextBlock] = dataclasses.field(default_factory=list)
    hyperlinks: list[Hyperlink] = dataclasses.field(default_factory=list)
    column_widths: dict[int | str, float] = dataclasses.field(default_factory=dict)
    autofit: bool = True

    def __post_init__(self) -> None:
        self.table = as_table(self.table)
        if self.start_row < 0 or self.start_column < 0:
            raise ValueError("start_row and start_column must be non-negative")

    @property
    def data(self) -> Table:
        return typing.cast(Table, self.table)

    @property
    def extent(self) -> CellBounds | None:
        """Zero-based inclusive bounds of the written table, or None when nothing is written."""
        rows = self.data.height + (1 if self.include_header else 0)
        cols = self.data.width + (1 if self.include_row_labels else 0)
        if rows == 0 or cols == 0:
            return None
        return (
            self.start_row,
            self.start_column,
            self.start_row + rows - 1,
            self.start_column + cols - 1,
        )


@dataclasses.dataclass
class Workbook:
    """An ordered collection of sheets written to a single file."""

    sheets: list[SheetSpec] = dataclasses.field(default_factory=list)

    def add_sheet(self, name: str, table: TableLike, **kwargs: typing.Any) -> SheetSpec:
        sheet = SheetSpec(name, table, **kwargs)
        self.sheets.append(sheet)
        return sheet

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]
