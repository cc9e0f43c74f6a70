# h5datastore/lowlevel.py
"""
The h5py backend of the library.

This module isolates the HDF5 boundary from the rest of the library. Files are
opened inside each call and closed before it returns; no handle is kept.
"""

from typing import Any, List, Sequence

import h5py
import numpy as np

from .abc import ArrayByteReader, ArrayMetadataProvider
from .dataclasses import VariableInfo
from .log import get_logger

logger = get_logger(__name__)


def _attrs_to_dict(attrs: h5py.AttributeManager) -> dict[str, Any]:
    """Copies HDF5 attributes into a plain dict, decoding byte strings."""
    result: dict[str, Any] = {}
    for key, value in attrs.items():
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        result[key] = value
    return result


class H5MetadataProvider(ArrayMetadataProvider):
    """
    Lists every dataset of an HDF5 file, including those nested in groups.

    A dataset's name is its path without the leading slash, so `/Data1` is
    named `Data1` and `/raw/Data1` is named `raw/Data1`.
    """

    def describe(self, path: str) -> List[VariableInfo]:
        variables: List[VariableInfo] = []

        def visit(name: str, obj: Any) -> None:
            if not isinstance(obj, h5py.Dataset):
                return
            variables.append(
                VariableInfo(
                    name=name,
                    path="/" + name,
                    shape=tuple(int(n) for n in obj.shape) if obj.shape is not None else (),
                    dtype=obj.dtype,
                    maxshape=obj.maxshape,
                    chunks=obj.chunks,
                    fillvalue=obj.fillvalue,
                    attrs=_attrs_to_dict(obj.attrs),
                )
            )

        with h5py.File(path, "r") as f:
            f.visititems(visit)

        logger.debug("file_described", path=path, variables=len(variables))
        return variables


class H5ByteReader(ArrayByteReader):
    """Reads strided row ranges of HDF5 datasets."""

    def read_rows(
        self,
        path: str,
        locator: str,
        start_row: int,
        row_count: int,
        shape_tail: Sequence[int],
        stride: int = 1,
    ) -> np.ndarray:
        if start_row < 1:
            raise ValueError(f"start_row is 1-based, got {start_row}.")
        if row_count < 0:
            raise ValueError(f"row_count cannot be negative, got {row_count}.")
        if stride < 1:
            raise ValueError(f"stride must be a positive integer, got {stride}.")

        first = start_row - 1
        selection = (slice(first, first + row_count, stride),) + tuple(
            slice(0, int(n)) for n in shape_tail
        )

        with h5py.File(path, "r") as f:
            dset = f[locator]
            if not isinstance(dset, h5py.Dataset):
                raise TypeError(f"'{locator}' in '{path}' is not a dataset.")
            return dset[selection]
