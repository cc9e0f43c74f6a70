# h5datastore/convenience.py
"""
High-level convenience functions for common one-off operations.
"""
from typing import Any, List, Sequence

import numpy as np

from . import open as h5_open
from .abc import ArrayMetadataProvider
from .dataclasses import DatasetFileInfo
from .lowlevel import H5MetadataProvider
from .types import DEFAULT_EXTENSIONS
from ._internal.schema import describe_all
from ._internal.splits import find_files


def load_variable(location: Any, name: str, **open_kwargs: Any) -> np.ndarray:
    """
    Loads a whole variable, concatenated over every file of the dataset.

    The result must fit in memory; use `h5datastore.open()` to read large
    datasets block by block.

    Args:
        location: A folder, a file, or a sequence of either.
        name: The variable to load.
        **open_kwargs: Further arguments for `h5datastore.open()`, such as
                       `decimation` or `max_split_bytes`.

    Raises:
        UnknownVariableError: If the variable is not in every file.
    """
    ds = h5_open(location, variables=[name], **open_kwargs)
    return ds.readall()[name]


def describe_files(
    location: Any,
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    include_subfolders: bool = True,
    provider: ArrayMetadataProvider | None = None,
) -> List[DatasetFileInfo]:
    """
    Lists the variables of every file, without reconciling them.

    Useful to find out why a variable was dropped from the unified schema.

    Raises:
        SchemaError: If a file cannot be parsed.
    """
    files = find_files(location, extensions=extensions, include_subfolders=include_subfolders)
    return describe_all([f.path for f in files], provider or H5MetadataProvider())
