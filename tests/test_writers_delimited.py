import codecs
import pathlib

import polars as pl
import pytest
from polars.testing import assert_frame_equal

from tabexport.errors import EncodingError, PathError
from tabexport.models.table import Table
from tabexport.writers.delimited import (
    read_delimited,
    render_delimited,
    write_csv,
    write_delimited,
    write_excel_csv,
)


@pytest.fixture
def snacks() -> Table:
    return Table.from_dict(
        {
            "var1": [10, 25, 8],
            "var2": ["beer", "wine", "cheese"],
            "var3": [True, True, False],
        },
        row_labels=["billy", "bob", "thornton"],
    )


def test_row_labelled_table_writes_four_lines(tmp_path: pathlib.Path, snacks: Table):
    p = write_delimited(snacks, tmp_path / "snacks.csv", encoding="utf-8")
    lines = p.read_text(encoding="utf-8").splitlines()
    assert lines == [
        '"",var1,var2,var3',
        "billy,10,beer,true",
        "bob,25,wine,true",
        "thornton,8,cheese,false",
    ]


def test_write_csv_skips_row_labels(tmp_path: pathlib.Path, snacks: Table):
    p = write_csv(snacks, tmp_path / "snacks.csv")
    lines = p.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "var1,var2,var3"
    assert lines[1] == "10,beer,true"


def test_excel_csv_starts_with_bom(tmp_path: pathlib.Path, snacks: Table):
    p = write_excel_csv(snacks, tmp_path / "snacks.csv")
    data = p.read_bytes()
    assert data.startswith(codecs.BOM_UTF8)
    assert data[len(codecs.BOM_UTF8) :].startswith(b"var1,")


def test_roundtrip_with_row_labels_and_missing_values(tmp_path: pathlib.Path):
    table = Table.from_dict(
        {"count": [1, 2, 3], "name": ["a", "b, c", 'say "hi"'], "score": [1.5, None, 2.25]},
        row_labels=["r1", "r2", "r3"],
    )
    p = write_delimited(table, tmp_path / "t.csv", missing_value_placeholder="NA", encoding="utf-8")
    back = read_delimited(p, row_labels=True, missing_value_placeholder="NA")

    assert back.row_labels == ["r1", "r2", "r3"]
    assert_frame_equal(back.frame, table.frame)


def test_quoting_policy_necessary_and_always():
    table = Table.from_dict({"text": ["plain", "with,comma"]})
    necessary = render_delimited(table, include_row_labels=False).splitlines()
    assert necessary == ["text", "plain", '"with,comma"']

    always = render_delimited(table, include_row_labels=False, quote_style="always").splitlines()
    assert always == ['"text"', '"plain"', '"with,comma"']


def test_tab_delimiter():
    table = Table.from_dict({"a": [1], "b": ["x"]})
    assert render_delimited(table, delimiter="\t", include_row_labels=False) == "a\tb\n1\tx\n"


def test_unlabelled_rows_are_numbered():
    table = Table.from_dict({"a": ["x", "y"]})
    assert render_delimited(table).splitlines() == ['"",a', "1,x", "2,y"]


def test_empty_table_header_only(tmp_path: pathlib.Path):
    table = Table(pl.DataFrame({"a": [], "b": []}, schema={"a": pl.Int64, "b": pl.Utf8}))
    p = write_delimited(table, tmp_path / "empty.csv", include_row_labels=False, encoding="utf-8")
    assert p.read_text(encoding="utf-8") == "a,b\n"


def test_empty_table_without_header_is_empty_file(tmp_path: pathlib.Path):
    table = Table(pl.DataFrame({"a": []}, schema={"a": pl.Int64}))
    p = write_delimited(table, tmp_path / "empty.csv", include_header=False, include_row_labels=False)
    assert p.exists()
    assert p.read_bytes() == b""


def test_same_input_gives_identical_bytes(tmp_path: pathlib.Path, snacks: Table):
    p = tmp_path / "again.csv"
    first = write_delimited(snacks, p, encoding="utf-8").read_bytes()
    second = write_delimited(snacks, p, encoding="utf-8").read_bytes()
    assert first == second


def test_float_precision():
    table = Table.from_dict({"x": [1.0, 2.5]})
    assert render_delimited(table, include_row_labels=False, float_precision=2).splitlines() == ["x", "1.00", "2.50"]


def test_missing_parent_directory_raises(tmp_path: pathlib.Path, snacks: Table):
    with pytest.raises(PathError):
        write_delimited(snacks, tmp_path / "missing" / "out.csv")


def test_directory_target_raises(tmp_path: pathlib.Path, snacks: Table):
    with pytest.raises(PathError):
        write_delimited(snacks, tmp_path)


def test_unrepresentable_value_raises_and_writes_nothing(tmp_path: pathlib.Path):
    table = Table.from_dict({"word": ["café"]})
    p = tmp_path / "ascii.csv"
    with pytest.raises(EncodingError):
        write_delimited(table, p, encoding="ascii")
    assert not p.exists()


def test_unknown_encoding_raises(tmp_path: pathlib.Path, snacks: Table):
    with pytest.raises(EncodingError):
        write_delimited(snacks, tmp_path / "x.csv", encoding="no-such-codec")


def test_bom_for_non_utf8_encoding_raises(tmp_path: pathlib.Path, snacks: Table):
    with pytest.raises(EncodingError):
        write_delimited(snacks, tmp_path / "x.csv", encoding="latin-1", byte_order_mark=True)


def test_latin1_output(tmp_path: pathlib.Path):
    table = Table.from_dict({"word": ["café"]})
    p = write_delimited(table, tmp_path / "latin.csv", encoding="latin-1", include_row_labels=False)
    assert p.read_bytes() == "word\ncafé\n".encode("latin-1")
    assert read_delimited(p, encoding="latin-1").frame["word"].to_list() == ["café"]


def test_multi_character_delimiter_rejected(snacks: Table):
    with pytest.raises(ValueError):
        render_delimited(snacks, delimiter="::")


def test_read_missing_file_raises(tmp_path: pathlib.Path):
    with pytest.raises(PathError):
        read_delimited(tmp_path / "nope.csv")
