# h5datastore/abc.py
"""Abstract Base Classes for the h5datastore library."""

import abc
from typing import List, Sequence, Tuple

import numpy as np

from .dataclasses import VariableInfo, WindowInfo
from .types import DataBlock


class DatastoreBase(abc.ABC):
    """Abstract base class for sequential, chunked datastores."""

    @abc.abstractmethod
    def has_data(self) -> bool:
        """Returns True while more data is available to `read()`."""
        raise NotImplementedError

    @abc.abstractmethod
    def read(self) -> Tuple[DataBlock, WindowInfo]:
        """Reads the next block of data."""
        raise NotImplementedError

    @abc.abstractmethod
    def reset(self) -> None:
        """Rewinds the datastore to its first block."""
        raise NotImplementedError

    @abc.abstractmethod
    def progress(self) -> float:
        """Fraction of the data read so far, between 0.0 and 1.0."""
        raise NotImplementedError

    def close(self) -> None:
        """Releases resources. Files are not held open between reads."""

    def __enter__(self) -> "DatastoreBase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class ArrayMetadataProvider(abc.ABC):
    """Reports the variables stored in a single file."""

    @abc.abstractmethod
    def describe(self, path: str) -> List[VariableInfo]:
        """
        Lists every variable of the file at `path`.

        Raises:
            Any error of the underlying format library if the file cannot be
            opened or parsed.
        """
        raise NotImplementedError


class ArrayByteReader(abc.ABC):
    """Reads a row range of one variable from a single file."""

    @abc.abstractmethod
    def read_rows(
        self,
        path: str,
        locator: str,
        start_row: int,
        row_count: int,
        shape_tail: Sequence[int],
        stride: int = 1,
    ) -> np.ndarray:
        """
        Reads `row_count` rows starting at the 1-based `start_row`, taking
        every `stride`-th row. Non-row dimensions are read in full, as given
        by `shape_tail`.
        """
        raise NotImplementedError
