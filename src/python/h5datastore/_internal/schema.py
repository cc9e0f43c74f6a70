# h5datastore/_internal/schema.py

"""
Internal logic for reconciling the variables of many files into one schema.
"""

from collections.abc import Mapping
from typing import Iterator, List, Sequence, Tuple

from ..abc import ArrayMetadataProvider
from ..dataclasses import DatasetFileInfo, VariableSchema
from ..exceptions import InconsistentVariableWarning, SchemaError


class UnifiedSchema(Mapping):
    """
    A read-only, ordered mapping of variable name to `VariableSchema`.

    The order is the dataset order of the first file.
    """
    def __init__(self, variables: Sequence[VariableSchema]):
        self._variables: dict[str, VariableSchema] = {v.name: v for v in variables}

    def __getitem__(self, name: str) -> VariableSchema:
        return self._variables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"UnifiedSchema({list(self._variables)})"

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._variables)


def describe_all(
    paths: Sequence[str],
    provider: ArrayMetadataProvider,
) -> List[DatasetFileInfo]:
    """
    Collects the variable metadata of every file.

    Raises:
        SchemaError: If a file cannot be opened or parsed. The original error
            is chained as the cause.
    """
    infos: List[DatasetFileInfo] = []
    for path in paths:
        try:
            variables = provider.describe(path)
        except Exception as e:
            raise SchemaError(
                f"Failed to read variable metadata from '{path}': {e}", path=path
            ) from e
        infos.append(DatasetFileInfo(path=path, variables=tuple(variables)))
    return infos


def reconcile(
    infos: Sequence[DatasetFileInfo],
) -> Tuple[UnifiedSchema, List[InconsistentVariableWarning]]:
    """
    Builds the unified schema from per-file metadata.

    The first file is the baseline. A baseline variable that is missing from
    any later file is dropped, and each such file yields one warning naming
    all of its missing variables. Variables are dropped only after every file
    has been scanned.

    Only the presence of a variable is compared. Shapes and types are taken
    from the first file and assumed identical elsewhere.
    """
    if not infos:
        raise SchemaError("No files found; cannot establish a variable schema.")

    baseline = [VariableSchema.from_info(v) for v in infos[0].variables]
    baseline_names = [v.name for v in baseline]

    warnings: List[InconsistentVariableWarning] = []
    to_remove: set[str] = set()
    for info in infos[1:]:
        present = set(info.names)
        missing = [name for name in baseline_names if name not in present]
        if missing:
            warnings.append(InconsistentVariableWarning(info.path, missing))
            to_remove.update(missing)

    schema = UnifiedSchema([v for v in baseline if v.name not in to_remove])
    return schema, warnings


def resolve_schema(
    paths: Sequence[str],
    provider: ArrayMetadataProvider,
) -> Tuple[UnifiedSchema, List[InconsistentVariableWarning]]:
    """
    Scans all files and returns their unified schema with the warnings for
    every dropped variable. Nothing is emitted; the caller decides what to do
    with the warnings.

    Raises:
        SchemaError: If `paths` is empty or a file cannot be read.
    """
    if not paths:
        raise SchemaError("No files found; cannot establish a variable schema.")
    return reconcile(describe_all(paths, provider))
