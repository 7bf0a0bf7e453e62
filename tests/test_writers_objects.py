import pathlib
import pickle
import threading

import polars as pl
import pytest
from polars.testing import assert_frame_equal

from tabexport.errors import PathError, SerializationError
from tabexport.models.options import NameMode
from tabexport.writers.objects import GZIP_MAGIC, export_object, load_object, load_objects, save_object, save_objects


def test_single_object_roundtrip_any_binding(tmp_path: pathlib.Path):
    original = {"frame": pl.DataFrame({"a": [1, 2]}), "meta": ("x", 1.5, None)}
    p = save_object(original, tmp_path / "thing.rds")

    whatever_name = load_object(p)
    assert whatever_name["meta"] == ("x", 1.5, None)
    assert_frame_equal(whatever_name["frame"], original["frame"])


def test_single_object_compressed_by_default(tmp_path: pathlib.Path):
    p = save_object([1, 2, 3], tmp_path / "c.rds")
    assert p.read_bytes().startswith(GZIP_MAGIC)

    p = save_object([1, 2, 3], tmp_path / "u.rds", compress=False)
    assert not p.read_bytes().startswith(GZIP_MAGIC)
    assert load_object(p) == [1, 2, 3]


def test_compressed_output_is_reproducible(tmp_path: pathlib.Path):
    p = tmp_path / "same.rds"
    first = save_object({"k": [1, 2]}, p).read_bytes()
    second = save_object({"k": [1, 2]}, p).read_bytes()
    assert first == second


def test_named_objects_restore_into_namespace(tmp_path: pathlib.Path):
    p = save_objects({"var1": [10, 25, 8], "label": "beer"}, tmp_path / "objs.RData")
    namespace: dict = {"unrelated": True}

    restored = load_objects(p, namespace)

    assert restored == {"var1": [10, 25, 8], "label": "beer"}
    assert namespace == {"unrelated": True, "var1": [10, 25, 8], "label": "beer"}


def test_mode_mismatch_raises(tmp_path: pathlib.Path):
    single = save_object(1, tmp_path / "one.rds")
    named = save_objects({"x": 1}, tmp_path / "many.rdata")
    with pytest.raises(SerializationError):
        load_objects(single)
    with pytest.raises(SerializationError):
        load_object(named)


def test_unpicklable_value_raises_and_writes_nothing(tmp_path: pathlib.Path):
    p = tmp_path / "lock.rds"
    with pytest.raises(SerializationError):
        save_object({"lock": threading.Lock()}, p)
    assert not p.exists()


def test_foreign_pickle_is_rejected(tmp_path: pathlib.Path):
    p = tmp_path / "plain.pkl"
    p.write_bytes(pickle.dumps([1, 2, 3]))
    with pytest.raises(SerializationError):
        load_object(p)


def test_invalid_names_rejected(tmp_path: pathlib.Path):
    with pytest.raises(ValueError):
        save_objects({"not a name": 1}, tmp_path / "x.rdata")


def test_export_object_dispatches_on_mode(tmp_path: pathlib.Path):
    p = export_object({"a": 1}, tmp_path / "named.pkl", NameMode.NAMED)
    assert load_objects(p) == {"a": 1}

    p = export_object({"a": 1}, tmp_path / "single.pkl", "single")
    assert load_object(p) == {"a": 1}

    with pytest.raises(TypeError):
        export_object([1], tmp_path / "bad.pkl", NameMode.NAMED)


def test_missing_parent_and_missing_file(tmp_path: pathlib.Path):
    with pytest.raises(PathError):
        save_object(1, tmp_path / "nope" / "x.rds")
    with pytest.raises(PathError):
        load_object(tmp_path / "absent.rds")


def test_too_deeply_nested_value_raises_and_writes_nothing(tmp_path: pathlib.Path):
    value: list = []
    for _ in range(200_000):
        value = [value]
    p = tmp_path / "deep.rds"
    with pytest.raises(SerializationError):
        save_object(value, p)
    assert not p.exists()


@pytest.mark.parametrize(
    "payload",
    [b"\x80\xff", GZIP_MAGIC + b"\x08\x00garbage", b""],
)
def test_corrupt_container_raises(tmp_path: pathlib.Path, payload: bytes):
    p = tmp_path / "corrupt.rds"
    p.write_bytes(payload)
    with pytest.raises(SerializationError):
        load_object(p)
