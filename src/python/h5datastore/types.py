# h5datastore/types.py

"""
Core enumerations, constants and type aliases for the h5datastore library.
"""
from enum import IntEnum
from typing import TypeAlias

import numpy as np

# A block of rows per variable name, as returned by `H5Datastore.read()`.
DataBlock: TypeAlias = dict[str, np.ndarray]

# Largest byte range of a file handled by a single read.
DEFAULT_SPLIT_SIZE = 8_000_000_000

DEFAULT_EXTENSIONS: tuple[str, ...] = (".h5",)

# Rows per variable returned by `H5Datastore.preview()`.
PREVIEW_ROWS = 8


class ReaderState(IntEnum):
    """States of the sequential reader."""
    READY = 0
    EXHAUSTED = 1
