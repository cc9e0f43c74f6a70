# h5datastore/_internal/windows.py

"""
Conversion of a split's byte range into the row window of a variable.
"""

from ..dataclasses import ReadWindow, Split, VariableSchema
from ..exceptions import DegenerateVariableError


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def compute_window(split: Split, variable: VariableSchema, decimation: int = 1) -> ReadWindow:
    """
    Computes the 1-based rows of `variable` that the split's bytes cover.

    A row belongs to the split that contains its first byte, so the windows of
    consecutive splits of a file never overlap and leave no gaps.

    An offset that falls inside a row rounds up to the next row start:
    `start_row = ceil(offset / bytes_per_row) + 1`. The row it cuts through is
    read by the previous split. For splits whose offset is a multiple of the
    row size this is simply `start_row = offset // bytes_per_row + 1` and
    `row_count = ceil(length / bytes_per_row)`, clamped to the variable.

    `decimation` is passed through as the window's stride. The window bounds
    and `reaches_end` are computed as if it were 1, so a decimated read
    materializes fewer rows than `row_count`.

    Args:
        split: The split being read.
        variable: The variable to read from it.
        decimation: Read every n-th row of the window.

    Returns:
        The window. A split that starts past the last row yields an empty
        window at `variable.rows + 1` that reaches the end.

    Raises:
        DegenerateVariableError: If the variable has zero bytes per row.
        ValueError: If `decimation` is not a positive integer.
    """
    bytes_per_row = variable.bytes_per_row
    if bytes_per_row <= 0:
        raise DegenerateVariableError(variable.name)
    if decimation < 1:
        raise ValueError(f"decimation must be a positive integer, got {decimation}.")

    first_row_index = _ceil_div(split.offset, bytes_per_row)
    end_row_index = _ceil_div(split.offset + split.length, bytes_per_row)

    start_row = first_row_index + 1
    rows_requested = end_row_index - first_row_index
    rows = variable.rows

    if start_row > rows:
        return ReadWindow(start_row=rows + 1, row_count=0, stride=decimation, reaches_end=True)

    rows_remaining = rows - start_row + 1
    if rows_requested >= rows_remaining:
        return ReadWindow(
            start_row=start_row, row_count=rows_remaining, stride=decimation, reaches_end=True
        )
    return ReadWindow(
        start_row=start_row, row_count=rows_requested, stride=decimation, reaches_end=False
    )
