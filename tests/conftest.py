# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.
"""
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import h5py
import numpy as np
import pytest

from h5datastore.abc import ArrayByteReader, ArrayMetadataProvider
from h5datastore.dataclasses import FileEntry, VariableInfo


class FakeArrayStore(ArrayMetadataProvider, ArrayByteReader):
    """
    In-memory stand-in for the HDF5 backend.

    Holds full arrays per (file, variable) and records every read, so tests
    can use exact file sizes that real HDF5 files never have.
    """
    def __init__(self):
        self.arrays: Dict[str, Dict[str, np.ndarray]] = {}
        self.calls: List[Tuple[str, str, int, int, Tuple[int, ...], int]] = []
        self.fail_on: set[Tuple[str, str]] = set()

    def add(self, path: str, name: str, data: np.ndarray) -> None:
        self.arrays.setdefault(path, {})[name] = data

    def describe(self, path: str) -> List[VariableInfo]:
        if path not in self.arrays:
            raise OSError(f"Unable to open file '{path}'")
        return [
            VariableInfo(name=name, path="/" + name, shape=arr.shape, dtype=arr.dtype)
            for name, arr in self.arrays[path].items()
        ]

    def read_rows(self, path, locator, start_row, row_count, shape_tail, stride=1):
        self.calls.append((path, locator, start_row, row_count, tuple(shape_tail), stride))
        name = locator.lstrip("/")
        if (path, name) in self.fail_on:
            raise OSError(f"Read error in '{path}'")
        arr = self.arrays[path][name]
        return arr[start_row - 1:start_row - 1 + row_count:stride].copy()


def make_data(file_index: int, shape: Sequence[int], dtype=np.float64) -> np.ndarray:
    """Deterministic test data that differs between files."""
    size = int(np.prod(shape))
    return (np.arange(size, dtype=dtype) + 100_000 * file_index).reshape(shape)


@pytest.fixture
def fake_store() -> FakeArrayStore:
    return FakeArrayStore()


@pytest.fixture
def two_file_store(fake_store: FakeArrayStore) -> Tuple[FakeArrayStore, List[FileEntry]]:
    """
    Two 24000-byte files, each holding `Data1` with shape (1000, 3) float64,
    so a 12000-byte split covers exactly 500 rows.
    """
    files = []
    for i in range(2):
        path = f"/data/file{i + 1}.h5"
        fake_store.add(path, "Data1", make_data(i, (1000, 3)))
        files.append(FileEntry(path=path, size=24000))
    return fake_store, files


@pytest.fixture(scope="session")
def h5_folder(tmp_path_factory) -> Path:
    """
    A folder with three HDF5 files sharing `Data1` (rows x 3 float64) and
    `Data2` (rows int32), plus a nested group, one in a subfolder.
    """
    root = tmp_path_factory.mktemp("h5_folder")
    (root / "sub").mkdir()
    paths = [root / "a.h5", root / "b.h5", root / "sub" / "c.h5"]
    for i, path in enumerate(paths):
        with h5py.File(path, "w") as f:
            d1 = f.create_dataset("Data1", data=make_data(i, (200, 3)))
            d1.attrs["units"] = "volts"
            f.create_dataset("Data2", data=make_data(i, (200,), dtype=np.int32))
            grp = f.create_group("meta")
            grp.create_dataset("gain", data=np.full((4, 2), i, dtype=np.float32))
    (root / "notes.txt").write_text("not a dataset")
    return root


@pytest.fixture(scope="session")
def h5_inconsistent_folder(tmp_path_factory) -> Path:
    """file1.h5 holds {A, B}; file2.h5 holds only {A}."""
    root = tmp_path_factory.mktemp("h5_inconsistent")
    with h5py.File(root / "file1.h5", "w") as f:
        f.create_dataset("A", data=make_data(0, (50, 2)))
        f.create_dataset("B", data=make_data(0, (50,)))
    with h5py.File(root / "file2.h5", "w") as f:
        f.create_dataset("A", data=make_data(1, (50, 2)))
    return root
