"""Export dispatcher routing values to the delimited, spreadsheet or object writers.

This module exposes `ExportDispatcher`, a small stateless front end that maps an
`ExportTarget` (path, format and options) onto the matching writer, and an
`export` convenience function designed for one-line scripted use.
"""

from __future__ import annotations

import pathlib
import typing

from loguru import logger

from tabexport.config import settings
from tabexport.models.options import ExportFormat, ExportOptions, ExportTarget
from tabexport.models.table import TableLike
from tabexport.models.workbook import SheetSpec, Workbook
from tabexport.writers import delimited, objects, spreadsheet


class ExportDispatcher:
    """Route export requests to the writer for the requested format.

    The dispatcher keeps no state between calls; every method runs a single
    synchronous write and returns the path written. Options left as `None` on
    the `ExportOptions` record fall back to `tabexport.config.settings`.
    """

    def export_delimited(
        self, table: TableLike, path: str | pathlib.Path, options: ExportOptions | None = None
    ) -> pathlib.Path:
        """Write `table` as delimited text."""
        options = options or ExportOptions()
        return delimited.write_delimited(
            table,
            path,
            delimiter=options.delimiter,
            include_header=options.include_header,
            include_row_labels=True if options.include_row_labels is None else options.include_row_labels,
            missing_value_placeholder=options.missing_value_placeholder,
            quote_style=options.quote_style,
            encoding=options.encoding,
            byte_order_mark=options.byte_order_mark,
            float_precision=options.float_precision,
        )

    def export_spreadsheet(
        self,
        workbook: Workbook | TableLike,
        path: str | pathlib.Path,
        options: ExportOptions | None = None,
    ) -> pathlib.Path:
        """Write a workbook, or a single table as a one-sheet workbook."""
        options = options or ExportOptions()
        if not isinstance(workbook, Workbook):
            sheet = SheetSpec(
                options.sheet_name or settings.default_sheet_name,
                workbook,
                start_row=options.start_row,
                start_column=options.start_column,
                include_header=options.include_header,
                include_row_labels=bool(options.include_row_labels),
                styles=list(options.styles),
            )
            workbook = Workbook([sheet])
        return spreadsheet.write_workbook(workbook, path)

    def export_object(
        self, value: typing.Any, path: str | pathlib.Path, options: ExportOptions | None = None
    ) -> pathlib.Path:
        """Write `value` (or a name-to-value mapping in named mode) to an object container."""
        options = options or ExportOptions()
        kwargs: dict[str, typing.Any] = {}
        if options.compress is not None:
            kwargs["compress"] = options.compress
        return objects.export_object(value, path, options.name_mode, **kwargs)

    def export(self, value: typing.Any, target: ExportTarget) -> pathlib.Path:
        """Export `value` to `target`, choosing the writer from `target.format`."""
        logger.debug(f"Dispatching {type(value).__name__} to {target.format.value} writer for {target.path}")
        if target.format is ExportFormat.DELIMITED:
            return self.export_delimited(value, target.path, target.options)
        if target.format is ExportFormat.SPREADSHEET:
            return self.export_spreadsheet(value, target.path, target.options)
        if target.format is ExportFormat.OBJECT:
            return self.export_object(value, target.path, target.options)
        raise ValueError(f"Unsupported export format: {target.format!r}")


def export(
    value: typing.Any,
    path: str | pathlib.Path,
    export_format: ExportFormat | str | None = None,
    **options: typing.Any,
) -> pathlib.Path:
    """Export `value` to `path`; the format is inferred from the suffix when omitted.

    Keyword arguments are `ExportOptions` fields, e.g. ``delimiter="\\t"`` or
    ``name_mode="named"``.
    """
    fmt = ExportFormat(export_format) if export_format is not None else None
    target = ExportTarget(pathlib.Path(path), fmt, ExportOptions(**options))
    return ExportDispatcher().export(value, target)


__all__ = ["ExportDispatcher", "export"]
