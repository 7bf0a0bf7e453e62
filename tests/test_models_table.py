import polars as pl
import pytest

from tabexport.models.table import Table, as_table
from tabexport.models.workbook import CellStyle, SheetSpec


def test_from_dict_with_row_labels():
    t = Table.from_dict({"a": [1, 2], "b": ["x", "y"]}, row_labels=["r1", "r2"])
    assert (t.height, t.width) == (2, 2)
    assert t.columns == ["a", "b"]
    assert t.has_row_labels


def test_unequal_columns_rejected():
    with pytest.raises(ValueError):
        Table.from_dict({"a": [1, 2], "b": [1]})


def test_row_label_count_must_match():
    with pytest.raises(ValueError):
        Table(pl.DataFrame({"a": [1, 2]}), row_labels=["only-one"])


def test_row_labels_column_avoids_name_clash():
    t = Table.from_dict({"rowname": [5]}, row_labels=["first"])
    frame = t.with_row_labels_column("rowname")
    assert frame.columns == ["rowname_", "rowname"]
    assert frame.row(0) == ("first", 5)


def test_as_table_accepts_frames_and_mappings():
    frame = pl.DataFrame({"a": [1]})
    assert as_table(frame).frame is frame
    assert as_table({"a": [1]}).columns == ["a"]
    with pytest.raises(TypeError):
        as_table([1, 2, 3])


def test_sheet_extent_counts_header_and_labels():
    sheet = SheetSpec("s", Table.from_dict({"a": [1, 2], "b": [3, 4]}), start_row=1, start_column=2)
    assert sheet.extent == (1, 2, 3, 3)

    sheet = SheetSpec("s", {"a": [1, 2]}, include_header=False, include_row_labels=True)
    assert sheet.extent == (0, 0, 1, 1)


def test_cell_style_merge_and_format():
    base = CellStyle(bold=True, font_size=11, border="thin", border_sides=("top",))
    merged = base.merge(CellStyle(font_size=14, underline=True))
    assert merged.to_format() == {"bold": True, "underline": 1, "font_size": 14, "top": 1}


def test_cell_style_rejects_unknown_border():
    with pytest.raises(ValueError):
        CellStyle(border="wavy")
