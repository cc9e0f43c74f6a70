# h5datastore/dataclasses.py
"""
Dataclasses for structured data within the h5datastore library.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

import numpy as np


@dataclass(frozen=True, slots=True)
class VariableInfo:
    """Metadata of one array variable, as reported by a single file."""
    name: str
    path: str
    shape: Tuple[int, ...]
    dtype: np.dtype
    maxshape: Optional[Tuple[Optional[int], ...]] = None
    chunks: Optional[Tuple[int, ...]] = None
    fillvalue: Any = None
    attrs: Mapping[str, Any] = field(default_factory=dict)

    @property
    def element_size(self) -> int:
        return self.dtype.itemsize

    @property
    def type_name(self) -> str:
        return self.dtype.name


@dataclass(frozen=True, slots=True)
class DatasetFileInfo:
    """All variables found in a single file."""
    path: str
    variables: Tuple[VariableInfo, ...]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variables)


@dataclass(frozen=True, slots=True)
class VariableSchema:
    """
    A variable of the unified schema.

    The first dimension of `shape` is the row axis. `bytes_per_row` converts
    byte ranges of a file into row ranges of this variable.
    """
    name: str
    path: str
    shape: Tuple[int, ...]
    dtype: np.dtype
    element_size: int
    bytes_per_row: int
    maxshape: Optional[Tuple[Optional[int], ...]] = None
    chunks: Optional[Tuple[int, ...]] = None
    attrs: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_info(cls, info: VariableInfo) -> "VariableSchema":
        """Builds the schema entry of a variable and derives its bytes per row."""
        shape = tuple(int(n) for n in info.shape)
        if not shape:
            bytes_per_row = 0
        else:
            bytes_per_row = math.prod(shape[1:]) * info.element_size
        return cls(
            name=info.name,
            path=info.path,
            shape=shape,
            dtype=info.dtype,
            element_size=info.element_size,
            bytes_per_row=bytes_per_row,
            maxshape=info.maxshape,
            chunks=info.chunks,
            attrs=dict(info.attrs),
        )

    @property
    def rows(self) -> int:
        """Number of rows, i.e. the size of the first dimension."""
        return self.shape[0] if self.shape else 0

    @property
    def shape_tail(self) -> Tuple[int, ...]:
        return self.shape[1:]

    @property
    def type_name(self) -> str:
        return self.dtype.name


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A file of the dataset and its size in bytes."""
    path: str
    size: int


@dataclass(frozen=True, slots=True)
class Split:
    """A contiguous byte range within one file."""
    index: int
    file_index: int
    path: str
    offset: int
    length: int
    is_last_in_file: bool


@dataclass(frozen=True, slots=True)
class ReadWindow:
    """
    The 1-based row range of one variable that corresponds to a split.

    `stride` only changes how many rows are materialized within the window;
    `start_row`, `row_count` and `reaches_end` ignore it.
    """
    start_row: int
    row_count: int
    stride: int
    reaches_end: bool

    @property
    def stop_row(self) -> int:
        """Last row of the window (inclusive). Equals start_row - 1 when empty."""
        return self.start_row + self.row_count - 1

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    @property
    def materialized_rows(self) -> int:
        """Number of rows actually produced when reading with `stride`."""
        return -(-self.row_count // self.stride)


@dataclass(frozen=True, slots=True)
class WindowInfo:
    """Describes what a single `read()` returned."""
    split: Split
    variables: Tuple[VariableSchema, ...]
    windows: Mapping[str, ReadWindow]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variables)
