"""Export tables and Python objects to delimited text, spreadsheets and object containers."""

from tabexport.dispatcher import ExportDispatcher, export
from tabexport.errors import (
    EncodingError,
    ExportError,
    PathError,
    SerializationError,
    SheetNameCollisionError,
    SheetNameError,
    StyleTargetError,
)
from tabexport.models import (
    CellStyle,
    ExportFormat,
    ExportOptions,
    ExportTarget,
    Hyperlink,
    NameMode,
    SheetSpec,
    StyleRange,
    Table,
    TextBlock,
    Workbook,
)
from tabexport.writers import (
    load_object,
    load_objects,
    read_delimited,
    save_object,
    save_objects,
    write_csv,
    write_delimited,
    write_excel_csv,
    write_sheets,
    write_workbook,
)

__all__ = [
    "CellStyle",
    "EncodingError",
    "ExportDispatcher",
    "ExportError",
    "ExportFormat",
    "ExportOptions",
    "ExportTarget",
    "Hyperlink",
    "NameMode",
    "PathError",
    "SerializationError",
    "SheetNameCollisionError",
    "SheetNameError",
    "SheetSpec",
    "StyleRange",
    "StyleTargetError",
    "Table",
    "TextBlock",
    "Workbook",
    "export",
    "load_object",
    "load_objects",
    "read_delimited",
    "save_object",
    "save_objects",
    "write_csv",
    "write_delimited",
    "write_excel_csv",
    "write_sheets",
    "write_workbook",
]
