"""Data models for tables, workbooks and export targets.

Expose the dataclasses used to describe what is exported and where.
"""

from .options import ExportFormat, ExportOptions, ExportTarget, NameMode, infer_format
from .table import Table, as_table
from .workbook import CellStyle, Hyperlink, SheetSpec, StyleRange, TextBlock, Workbook, paragraph, subtitle, title

__all__ = [
    "CellStyle",
    "ExportFormat",
    "ExportOptions",
    "ExportTarget",
    "Hyperlink",
    "NameMode",
    "SheetSpec",
    "StyleRange",
    "Table",
    "TextBlock",
    "Workbook",
    "as_table",
    "infer_format",
    "paragraph",
    "subtitle",
    "title",
]
