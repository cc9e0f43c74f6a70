# h5datastore/_internal/validation.py

"""
Internal argument checks shared by the public entry points.
"""

import numpy as np


def validate_positive_int(value: object, name: str) -> int:
    """
    Ensures `value` is a positive integer and returns it as a Python int.

    NumPy integer scalars are accepted; booleans are not.

    Raises:
        TypeError: If `value` is not an integer.
        ValueError: If `value` is zero or negative.
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an integer, not {type(value).__name__}")
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value}.")
    return int(value)
