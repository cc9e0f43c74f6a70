# h5datastore/datastore.py
"""The sequential, chunked reader over a set of HDF5 files."""

import os
import warnings
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .abc import ArrayByteReader, ArrayMetadataProvider, DatastoreBase
from .dataclasses import FileEntry, ReadWindow, Split, VariableSchema, WindowInfo
from .exceptions import ExhaustedError, InconsistentVariableWarning, UnknownVariableError
from .log import get_logger
from .lowlevel import H5ByteReader, H5MetadataProvider
from .types import DEFAULT_SPLIT_SIZE, PREVIEW_ROWS, DataBlock, ReaderState
from ._internal import windows
from ._internal.validation import validate_positive_int
from ._internal.schema import UnifiedSchema, resolve_schema
from ._internal.splits import SplitPlanner

logger = get_logger(__name__)


def _to_entry(item: Union[FileEntry, str, os.PathLike]) -> FileEntry:
    if isinstance(item, FileEntry):
        return item
    path = os.fspath(item)
    return FileEntry(path=path, size=os.stat(path).st_size)


class H5Datastore(DatastoreBase):
    """
    Reads a set of HDF5 files with a shared schema, one split at a time.

    Each file is divided into byte splits of at most `max_split_bytes`. Every
    `read()` converts the current split into a row window per selected
    variable and returns those rows, so memory use stays bounded by the split
    size whatever the size of the dataset.

    Usually created via `h5datastore.open()`.

    Usage:
        ds = h5datastore.open("/data/run_42", variables=["Data1", "Data2"])
        while ds.has_data():
            data, info = ds.read()
            process(data["Data1"], data["Data2"])
    """
    def __init__(
        self,
        files: Sequence[Union[FileEntry, str, os.PathLike]],
        *,
        max_split_bytes: int = DEFAULT_SPLIT_SIZE,
        decimation: int = 1,
        metadata_provider: Optional[ArrayMetadataProvider] = None,
        byte_reader: Optional[ArrayByteReader] = None,
    ):
        """
        Initializes the datastore and resolves the unified schema.

        Args:
            files: The files of the dataset, as `FileEntry` objects or paths.
            max_split_bytes: Upper bound of the byte range handled per read.
            decimation: Read every n-th row. Fixed for the datastore's lifetime.
            metadata_provider: Lists a file's variables. Defaults to h5py.
            byte_reader: Reads row ranges of a variable. Defaults to h5py.

        Raises:
            SchemaError: If there are no files or one cannot be parsed.
            ValueError: If `decimation` or `max_split_bytes` is not positive.
            TypeError: If `decimation` or `max_split_bytes` is not an integer.
        """
        self._decimation = validate_positive_int(decimation, "decimation")
        max_split_bytes = validate_positive_int(max_split_bytes, "max_split_bytes")
        self._metadata_provider = metadata_provider or H5MetadataProvider()
        self._byte_reader = byte_reader or H5ByteReader()

        entries = [_to_entry(f) for f in files]
        self._schema, self._warnings = resolve_schema(
            [e.path for e in entries], self._metadata_provider
        )
        for w in self._warnings:
            logger.warning("variables_dropped", path=w.path, names=list(w.names))
            warnings.warn(w, stacklevel=2)

        self._planner = SplitPlanner(entries, max_split_bytes)
        logger.info(
            "schema_resolved",
            files=self._planner.num_files,
            splits=self._planner.num_splits,
            variables=len(self._schema),
        )

        self._selected: Tuple[str, ...] = self._schema.names
        self._completed_files: set[int] = set()
        self.reset()

    # --- Schema ---

    @property
    def schema(self) -> UnifiedSchema:
        return self._schema

    @property
    def variable_names(self) -> List[str]:
        """The variables available to read, derived from the schema."""
        return list(self._schema.names)

    @property
    def selected_variable_names(self) -> List[str]:
        """The variables returned by `read()`. Change with `select_variables()`."""
        return list(self._selected)

    @property
    def warnings(self) -> Tuple[InconsistentVariableWarning, ...]:
        """Warnings raised while reconciling the files' variables."""
        return tuple(self._warnings)

    def select_variables(self, names: Union[str, Sequence[str]]) -> None:
        """
        Chooses which variables subsequent reads return, in the given order.

        The read position is kept. On error the previous selection stays. An
        empty selection is allowed; reads then return empty blocks.

        Raises:
            UnknownVariableError: If any name is not in the schema. All
                invalid names are reported.
            ValueError: If `names` contains duplicates.
        """
        if isinstance(names, str):
            names = [names]
        names = list(names)
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate variable names in selection: {names}")

        invalid = [name for name in names if name not in self._schema]
        if invalid:
            raise UnknownVariableError(invalid)

        self._selected = tuple(names)

    # --- Settings ---

    @property
    def decimation(self) -> int:
        return self._decimation

    @property
    def max_split_bytes(self) -> int:
        return self._planner.max_split_bytes

    @property
    def files(self) -> Tuple[FileEntry, ...]:
        return self._planner.files

    @property
    def position(self) -> int:
        """Index of the next split to read, counted over all files."""
        return self._planner.position

    @property
    def state(self) -> ReaderState:
        return ReaderState.READY if self._planner.has_next() else ReaderState.EXHAUSTED

    # --- Reading ---

    def has_data(self) -> bool:
        return self._planner.has_next()

    def _selected_variables(self) -> Tuple[VariableSchema, ...]:
        return tuple(self._schema[name] for name in self._selected)

    def _read_window(self, split: Split, variable: VariableSchema, window: ReadWindow) -> np.ndarray:
        if window.is_empty:
            return np.empty((0,) + variable.shape_tail, dtype=variable.dtype)
        return self._byte_reader.read_rows(
            split.path,
            variable.path,
            window.start_row,
            window.row_count,
            variable.shape_tail,
            window.stride,
        )

    def read(self) -> Tuple[DataBlock, WindowInfo]:
        """
        Reads the rows of every selected variable covered by the current split.

        The position only moves on once every variable was read, so a failed
        read can be retried. When the last split of a file is read and every
        window reaches the end of its variable, the file counts as completed
        for `progress()`.

        Returns:
            A dict of arrays keyed by variable name, and a `WindowInfo`
            describing the split and the row windows that were read.

        Raises:
            ExhaustedError: If there is no data left.
            DegenerateVariableError: If a selected variable has no row size.
        """
        if not self.has_data():
            raise ExhaustedError("No more data to read. Call reset() to start over.")

        split = self._planner.peek()
        variables = self._selected_variables()
        read_windows = {
            v.name: windows.compute_window(split, v, self._decimation) for v in variables
        }

        data: DataBlock = {}
        for v in variables:
            data[v.name] = self._read_window(split, v, read_windows[v.name])

        self._planner.advance()
        if split.is_last_in_file and all(w.reaches_end for w in read_windows.values()):
            self._completed_files.add(split.file_index)

        logger.debug(
            "split_read",
            split=split.index,
            path=split.path,
            offset=split.offset,
            length=split.length,
        )
        return data, WindowInfo(split=split, variables=variables, windows=read_windows)

    def reset(self) -> None:
        """Rewinds to the first split of the first file."""
        self._planner.reset()
        self._completed_files.clear()
        logger.debug("datastore_reset")

    def progress(self) -> float:
        """
        Fraction of files completed, between 0.0 and 1.0.

        A file completes when its last split is read and every selected
        variable has reached its last row. Returns 1.0 once there is no data
        left, and less than 1.0 before that.
        """
        if not self.has_data():
            return 1.0
        return len(self._completed_files) / self._planner.num_files

    def preview(self, rows: int = PREVIEW_ROWS) -> DataBlock:
        """Returns the first rows of every selected variable without moving the position."""
        if rows < 1:
            raise ValueError(f"rows must be a positive integer, got {rows}.")
        first = self._planner.splits[0]
        data: DataBlock = {}
        for v in self._selected_variables():
            count = min(rows, v.rows)
            if count == 0:
                data[v.name] = np.empty((0,) + v.shape_tail, dtype=v.dtype)
                continue
            data[v.name] = self._byte_reader.read_rows(
                first.path, v.path, 1, count, v.shape_tail, self._decimation
            )
        return data

    def readall(self) -> DataBlock:
        """
        Reads every split and concatenates each variable along the row axis.

        Starts from the first split and leaves the datastore reset.
        """
        self.reset()
        parts: dict[str, List[np.ndarray]] = {name: [] for name in self._selected}
        try:
            while self.has_data():
                block, _ = self.read()
                for name, arr in block.items():
                    parts[name].append(arr)
        finally:
            self.reset()
        return {
            name: np.concatenate(arrays, axis=0) if arrays else
            np.empty((0,) + self._schema[name].shape_tail, dtype=self._schema[name].dtype)
            for name, arrays in parts.items()
        }

    def __iter__(self) -> Iterator[Tuple[DataBlock, WindowInfo]]:
        """Yields the remaining blocks until the datastore is exhausted."""
        while self.has_data():
            yield self.read()

    def __len__(self) -> int:
        """The number of splits, i.e. of reads in a full pass."""
        return self._planner.num_splits

    def __repr__(self) -> str:
        return (
            f"H5Datastore(files={self._planner.num_files}, "
            f"variables={list(self._selected)}, decimation={self._decimation})"
        )
