# h5datastore/_internal/splits.py

"""
File enumeration and the planning of byte splits over a set of files.
"""

import os
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from ..dataclasses import FileEntry, Split
from ..exceptions import ExhaustedError
from ..log import get_logger
from ..types import DEFAULT_EXTENSIONS
from .validation import validate_positive_int

logger = get_logger(__name__)

PathLike = Union[str, os.PathLike]


def _matches(path: Path, extensions: Sequence[str]) -> bool:
    suffix = path.suffix.lower()
    return any(suffix == ext.lower() for ext in extensions)


def find_files(
    location: Union[PathLike, Iterable[PathLike]],
    *,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    include_subfolders: bool = True,
) -> List[FileEntry]:
    """
    Lists the files of a dataset with their sizes.

    Args:
        location: A directory, a single file, or a sequence of either.
                  Files given explicitly are kept whatever their extension.
        extensions: Suffixes of the files to pick up from directories,
                    compared case-insensitively.
        include_subfolders: Search directories recursively.

    Returns:
        One `FileEntry` per file, in argument order, each directory's files
        sorted by path. Duplicates are dropped.

    Raises:
        FileNotFoundError: If a location does not exist.
    """
    if isinstance(location, (str, os.PathLike)):
        locations: List[PathLike] = [location]
    else:
        locations = list(location)

    normalized = tuple(ext if ext.startswith(".") else f".{ext}" for ext in extensions)

    found: List[str] = []
    for loc in locations:
        root = Path(loc)
        if root.is_dir():
            pattern = "**/*" if include_subfolders else "*"
            found.extend(
                str(p) for p in sorted(root.glob(pattern))
                if p.is_file() and _matches(p, normalized)
            )
        elif root.is_file():
            found.append(str(root))
        else:
            raise FileNotFoundError(f"No such file or directory: '{loc}'")

    unique = list(dict.fromkeys(found))
    logger.debug("files_found", count=len(unique))
    return [FileEntry(path=p, size=os.stat(p).st_size) for p in unique]


def plan_splits(files: Sequence[FileEntry], max_split_bytes: int) -> Tuple[Split, ...]:
    """
    Divides every file into consecutive splits of at most `max_split_bytes`.

    The last split of a file may be shorter. An empty file yields a single
    zero-length split so it still takes part in iteration.
    """
    splits: List[Split] = []
    for file_index, entry in enumerate(files):
        if entry.size <= 0:
            offsets = [0]
        else:
            offsets = list(range(0, entry.size, max_split_bytes))
        for i, offset in enumerate(offsets):
            splits.append(Split(
                index=len(splits),
                file_index=file_index,
                path=entry.path,
                offset=offset,
                length=min(max_split_bytes, max(entry.size - offset, 0)),
                is_last_in_file=(i == len(offsets) - 1),
            ))
    return tuple(splits)


class SplitPlanner:
    """
    An ordered cursor over the splits of a set of files.

    Splits are ordered by file, then by offset within the file. They cover
    each file exactly once.
    """
    def __init__(self, files: Sequence[FileEntry], max_split_bytes: int):
        max_split_bytes = validate_positive_int(max_split_bytes, "max_split_bytes")

        self._files = tuple(files)
        self._max_split_bytes = max_split_bytes
        self._splits = plan_splits(self._files, max_split_bytes)
        self._position = 0

    @property
    def files(self) -> Tuple[FileEntry, ...]:
        return self._files

    @property
    def splits(self) -> Tuple[Split, ...]:
        return self._splits

    @property
    def max_split_bytes(self) -> int:
        return self._max_split_bytes

    @property
    def num_files(self) -> int:
        return len(self._files)

    @property
    def num_splits(self) -> int:
        return len(self._splits)

    @property
    def position(self) -> int:
        """Index of the next split to be handed out."""
        return self._position

    def has_next(self) -> bool:
        return self._position < len(self._splits)

    def peek(self) -> Split:
        """Returns the current split without advancing."""
        if not self.has_next():
            raise ExhaustedError("No more splits to read. Call reset() to start over.")
        return self._splits[self._position]

    def advance(self) -> None:
        """Moves past the current split."""
        if not self.has_next():
            raise ExhaustedError("No more splits to read. Call reset() to start over.")
        self._position += 1

    def next(self) -> Split:
        split = self.peek()
        self._position += 1
        return split

    def reset(self) -> None:
        self._position = 0

    def progress(self) -> float:
        """
        Fraction of files whose last split has been handed out.

        Progress moves per file, not per split: a file with many splits counts
        as zero until all of them were consumed.
        """
        if not self._files:
            return 1.0
        if self._position == 0:
            return 0.0
        last = self._splits[self._position - 1]
        consumed = last.file_index + 1 if last.is_last_in_file else last.file_index
        return consumed / len(self._files)

    def __len__(self) -> int:
        return len(self._splits)
