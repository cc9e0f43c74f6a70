# tests/test_schema.py
"""
Tests for reconciling the variables of many files into one schema.
"""
from pathlib import Path

import numpy as np
import pytest

from h5datastore import InconsistentVariableWarning, SchemaError
from h5datastore._internal.schema import resolve_schema
from h5datastore.lowlevel import H5MetadataProvider

from conftest import make_data


def test_single_file_baseline(fake_store):
    fake_store.add("f1.h5", "Data1", make_data(0, (1000, 3)))
    fake_store.add("f1.h5", "Data2", make_data(0, (1000,), dtype=np.int16))

    schema, warnings = resolve_schema(["f1.h5"], fake_store)

    assert warnings == []
    assert list(schema) == ["Data1", "Data2"]
    assert schema["Data1"].bytes_per_row == 24
    assert schema["Data1"].rows == 1000
    assert schema["Data1"].path == "/Data1"
    assert schema["Data2"].bytes_per_row == 2
    assert schema["Data2"].type_name == "int16"


def test_variable_missing_from_second_file_is_dropped(fake_store):
    fake_store.add("file1.h5", "A", make_data(0, (10, 2)))
    fake_store.add("file1.h5", "B", make_data(0, (10,)))
    fake_store.add("file2.h5", "A", make_data(1, (10, 2)))

    schema, warnings = resolve_schema(["file1.h5", "file2.h5"], fake_store)

    assert list(schema) == ["A"]
    assert len(warnings) == 1
    assert warnings[0].path == "file2.h5"
    assert warnings[0].names == ("B",)
    assert "B" in str(warnings[0]) and "file2.h5" in str(warnings[0])


def test_one_warning_per_offending_file(fake_store):
    for name in ("A", "B", "C"):
        fake_store.add("f1.h5", name, make_data(0, (10,)))
    fake_store.add("f2.h5", "A", make_data(1, (10,)))
    fake_store.add("f3.h5", "A", make_data(2, (10,)))
    fake_store.add("f3.h5", "C", make_data(2, (10,)))
    for name in ("A", "B", "C"):
        fake_store.add("f4.h5", name, make_data(3, (10,)))

    schema, warnings = resolve_schema(["f1.h5", "f2.h5", "f3.h5", "f4.h5"], fake_store)

    assert list(schema) == ["A"]
    # Removal happens after the scan, so f3 is still blamed for B
    assert [(w.path, w.names) for w in warnings] == [
        ("f2.h5", ("B", "C")),
        ("f3.h5", ("B",)),
    ]


def test_extra_variables_in_later_files_are_ignored(fake_store):
    fake_store.add("f1.h5", "A", make_data(0, (10,)))
    fake_store.add("f2.h5", "A", make_data(1, (10,)))
    fake_store.add("f2.h5", "Extra", make_data(1, (10,)))

    schema, warnings = resolve_schema(["f1.h5", "f2.h5"], fake_store)
    assert list(schema) == ["A"]
    assert warnings == []


def test_shapes_are_taken_from_first_file(fake_store):
    fake_store.add("f1.h5", "A", make_data(0, (10, 2)))
    fake_store.add("f2.h5", "A", make_data(1, (99, 2)))

    schema, _ = resolve_schema(["f1.h5", "f2.h5"], fake_store)
    assert schema["A"].rows == 10


def test_no_files_fails(fake_store):
    with pytest.raises(SchemaError, match="No files"):
        resolve_schema([], fake_store)


def test_unreadable_file_fails(fake_store):
    fake_store.add("f1.h5", "A", make_data(0, (10,)))
    with pytest.raises(SchemaError, match="missing.h5") as excinfo:
        resolve_schema(["f1.h5", "missing.h5"], fake_store)
    assert excinfo.value.path == "missing.h5"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_h5_metadata_provider(h5_folder: Path):
    variables = {v.name: v for v in H5MetadataProvider().describe(str(h5_folder / "a.h5"))}

    assert set(variables) == {"Data1", "Data2", "meta/gain"}
    data1 = variables["Data1"]
    assert data1.path == "/Data1"
    assert data1.shape == (200, 3)
    assert data1.element_size == 8
    assert data1.type_name == "float64"
    assert data1.attrs == {"units": "volts"}
    assert variables["meta/gain"].path == "/meta/gain"


def test_h5_resolution_with_missing_variable(h5_inconsistent_folder: Path):
    paths = [str(h5_inconsistent_folder / "file1.h5"), str(h5_inconsistent_folder / "file2.h5")]
    schema, warnings = resolve_schema(paths, H5MetadataProvider())

    assert list(schema) == ["A"]
    assert len(warnings) == 1
    assert isinstance(warnings[0], InconsistentVariableWarning)
    assert warnings[0].path == paths[1]
    assert warnings[0].names == ("B",)


def test_corrupt_h5_file_fails(tmp_path: Path):
    bogus = tmp_path / "bogus.h5"
    bogus.write_bytes(b"this is not an HDF5 file")
    with pytest.raises(SchemaError, match="bogus.h5"):
        resolve_schema([str(bogus)], H5MetadataProvider())
