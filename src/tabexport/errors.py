"""Exception hierarchy raised by the export writers.

All errors derive from `ExportError` so callers can catch every export failure
with a single clause. Low-level causes (OSError, UnicodeEncodeError, pickling
errors) are chained on the raised exception.
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every error raised by tabexport."""


class PathError(ExportError):
    """The destination is not writable or its parent directory is missing."""


class EncodingError(ExportError):
    """A value cannot be represented in the requested character encoding."""


class SheetNameError(ExportError):
    """A worksheet name is not accepted by the spreadsheet format."""


class SheetNameCollisionError(SheetNameError):
    """Two worksheets in one workbook share a name."""


class StyleTargetError(ExportError):
    """A style range reaches outside the placed table."""


class SerializationError(ExportError):
    """A value cannot be stored in (or restored from) an object container."""
