"""Writers for delimited text, spreadsheet workbooks and object containers.

This package exposes the file-level export helpers and their matching readers.
"""

from .delimited import read_delimited as read_delimited
from .delimited import write_csv as write_csv
from .delimited import write_delimited as write_delimited
from .delimited import write_excel_csv as write_excel_csv
from .objects import export_object as export_object
from .objects import load_object as load_object
from .objects import load_objects as load_objects
from .objects import save_object as save_object
from .objects import save_objects as save_objects
from .spreadsheet import write_sheets as write_sheets
from .spreadsheet import write_workbook as write_workbook
