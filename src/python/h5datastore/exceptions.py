# h5datastore/exceptions.py
"""Custom exception and warning types for the h5datastore library."""

from typing import Optional, Sequence


class H5DatastoreError(Exception):
    """Base exception for all errors raised by this library."""
    pass


class SchemaError(H5DatastoreError):
    """
    Error raised when a unified schema cannot be established.

    This happens when no files were found, or when the variable metadata of
    one of the files cannot be read.

    Attributes:
        path (str | None): The offending file, or None if there were no files.
    """
    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class UnknownVariableError(H5DatastoreError, KeyError):
    """
    Error raised when selecting variable names absent from the schema.

    Attributes:
        names (tuple[str, ...]): Every invalid name of the rejected selection.
    """
    def __init__(self, names: Sequence[str]):
        self.names = tuple(names)
        message = f"Invalid variable names selected: {', '.join(self.names)}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class DegenerateVariableError(H5DatastoreError, ValueError):
    """
    Error raised when a variable has zero bytes per row, so that byte
    ranges cannot be converted into row ranges.

    Attributes:
        name (str): The name of the degenerate variable.
    """
    def __init__(self, name: str):
        super().__init__(
            f"Variable '{name}' has zero bytes per row and cannot be read in splits."
        )
        self.name = name


class ExhaustedError(H5DatastoreError):
    """Raised when reading past the last split. Call `reset()` to start over."""
    pass


class InconsistentVariableWarning(UserWarning):
    """
    Issued when variables of the first file are missing from another file.

    The variables are dropped from the unified schema; reading continues with
    the remaining ones.

    Attributes:
        path (str): The file in which the variables were not found.
        names (tuple[str, ...]): The missing variable names.
    """
    def __init__(self, path: str, names: Sequence[str]):
        self.path = path
        self.names = tuple(names)
        super().__init__(
            f"The following variables: {', '.join(self.names)} "
            f"were not found in file '{path}'."
        )
