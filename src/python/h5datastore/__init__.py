# h5datastore/__init__.py
"""
Out-of-core, chunked reading of HDF5 file collections with a shared schema.
"""
import os
from typing import Iterable, Optional, Sequence, Union

from .datastore import H5Datastore
from .dataclasses import (
    DatasetFileInfo,
    FileEntry,
    ReadWindow,
    Split,
    VariableInfo,
    VariableSchema,
    WindowInfo,
)
from .exceptions import (
    DegenerateVariableError,
    ExhaustedError,
    H5DatastoreError,
    InconsistentVariableWarning,
    SchemaError,
    UnknownVariableError,
)
from .log import configure_logging
from .types import DEFAULT_EXTENSIONS, DEFAULT_SPLIT_SIZE, DataBlock, ReaderState
from ._internal.splits import find_files

__version__ = "0.1.0"

PathLike = Union[str, os.PathLike]


def open(
    location: Optional[Union[PathLike, Iterable[PathLike]]] = None,
    *,
    variables: Optional[Union[str, Sequence[str]]] = None,
    max_split_bytes: int = DEFAULT_SPLIT_SIZE,
    decimation: int = 1,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    include_subfolders: bool = True,
) -> H5Datastore:
    """
    Opens a collection of HDF5 files as a single chunked datastore.
    This function is the primary entry point for the library.

    Args:
        location: A folder to search, a single file, or a sequence of either.
                  Defaults to the current working directory.
        variables (optional): The variables to read. Defaults to every
            variable present in all files.
        max_split_bytes: Largest byte range of a file handled by one read.
        decimation: Read every n-th row (1 = all rows).
        extensions: File suffixes to pick up when searching folders.
        include_subfolders: Search folders recursively.

    Returns:
        An `H5Datastore` positioned at the first split.

    Raises:
        SchemaError: If no files are found or one cannot be parsed.
        UnknownVariableError: If `variables` names a missing variable.
        FileNotFoundError: If `location` does not exist.
        ValueError: If an argument is invalid.
    """
    if location is None:
        location = os.getcwd()
    if isinstance(extensions, str):
        extensions = (extensions,)
    if not extensions:
        raise ValueError("At least one file extension must be given.")

    files = find_files(location, extensions=extensions, include_subfolders=include_subfolders)
    if not files:
        raise SchemaError(
            f"No files with extensions {tuple(extensions)} found in {location!r}."
        )

    ds = H5Datastore(files, max_split_bytes=max_split_bytes, decimation=decimation)
    if variables is not None:
        ds.select_variables(variables)
    return ds


from .convenience import describe_files, load_variable  # noqa: E402

# Define what gets imported with 'from h5datastore import *'
__all__ = [
    'open',
    'H5Datastore',
    'find_files',
    'load_variable',
    'describe_files',
    'configure_logging',
    'DataBlock',
    'ReaderState',
    'VariableInfo',
    'DatasetFileInfo',
    'VariableSchema',
    'FileEntry',
    'Split',
    'ReadWindow',
    'WindowInfo',
    'H5DatastoreError',
    'SchemaError',
    'UnknownVariableError',
    'DegenerateVariableError',
    'ExhaustedError',
    'InconsistentVariableWarning',
    'DEFAULT_SPLIT_SIZE',
    'DEFAULT_EXTENSIONS',
    '__version__',
]
