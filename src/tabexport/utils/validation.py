"""Small validation helpers shared by the writers.

The goal is to centralize the checks every writer performs before touching the
filesystem (destination paths, sheet names, cell ranges) so failures surface as
the typed errors from `tabexport.errors` rather than deep library exceptions.
"""

from __future__ import annotations

import pathlib
import re
import typing

from xlsxwriter.utility import xl_cell_to_rowcol

from tabexport.errors import PathError, SheetNameCollisionError, SheetNameError

CellBounds = tuple[int, int, int, int]
CellRef = typing.Union[str, tuple[int, int], tuple[int, int, int, int]]

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
MAX_SHEET_NAME_LENGTH = 31


def ensure_parent_exists(path: str | pathlib.Path) -> pathlib.Path:
    """Return `path` as a Path after checking it can be created.

    Args:
        path (str | pathlib.Path): Destination file path.

    Returns:
        pathlib.Path: The destination as a Path object.

    Raises:
        PathError: When the parent directory is missing or the path is a directory.

    """
    p = pathlib.Path(path)
    if p.is_dir():
        raise PathError(f"Cannot write into a directory: {p}")
    parent = p.parent
    if not parent.exists():
        raise PathError(f"Parent directory does not exist: {parent}")
    if not parent.is_dir():
        raise PathError(f"Parent path is not a directory: {parent}")
    return p


def parse_cell_range(cells: CellRef) -> CellBounds:
    """Convert A1 notation or a tuple into zero-based inclusive bounds.

    Accepts `"B2"`, `"B2:D5"`, `(row, col)` or `(first_row, first_col,
    last_row, last_col)`. Absolute markers (`$`) are ignored.

    Returns:
        tuple[int, int, int, int]: `(first_row, first_col, last_row, last_col)`.

    """
    if isinstance(cells, str):
        parts = cells.replace("$", "").split(":")
        if len(parts) not in (1, 2) or not all(parts):
            raise ValueError(f"Invalid cell range: {cells!r}")
        first_row, first_col = xl_cell_to_rowcol(parts[0])
        last_row, last_col = xl_cell_to_rowcol(parts[-1])
    elif len(cells) == 2:
        first_row, first_col = cells  # type: ignore[misc]
        last_row, last_col = first_row, first_col
    elif len(cells) == 4:
        first_row, first_col, last_row, last_col = cells  # type: ignore[misc]
    else:
        raise ValueError(f"Invalid cell range: {cells!r}")

    if min(first_row, first_col) < 0 or last_row < first_row or last_col < first_col:
        raise ValueError(f"Invalid cell range: {cells!r}")
    return first_row, first_col, last_row, last_col


def validate_sheet_name(name: str) -> str:
    """Check a worksheet name against the rules of the xlsx format."""
    if not name:
        raise SheetNameError("Sheet name must not be empty")
    if len(name) > MAX_SHEET_NAME_LENGTH:
        raise SheetNameError(f"Sheet name longer than {MAX_SHEET_NAME_LENGTH} characters: {name!r}")
    if _INVALID_SHEET_CHARS.search(name):
        raise SheetNameError(f"Sheet name contains invalid characters: {name!r}")
    if name.startswith("'") or name.endswith("'"):
        raise SheetNameError(f"Sheet name cannot start or end with an apostrophe: {name!r}")
    if name.lower() == "history":
        raise SheetNameError("Sheet name 'History' is reserved")
    return name


def check_unique_sheet_names(names: typing.Iterable[str]) -> list[str]:
    """Validate every name and reject duplicates (case-insensitive).

    Returns:
        list[str]: The names in their original order.

    Raises:
        SheetNameCollisionError: When two names compare equal ignoring case.

    """
    seen: dict[str, str] = {}
    out = []
    for name in names:
        validate_sheet_name(name)
        key = name.lower()
        if key in seen:
            raise SheetNameCollisionError(f"Duplicate sheet name {name!r} (collides with {seen[key]!r})")
        seen[key] = name
        out.append(name)
    return out
