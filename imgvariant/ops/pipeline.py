"""
Transformation descriptors passed to transformers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Union


@dataclass(frozen=True)
class Operation:
    """
    A single named transformation and its arguments, e.g.
    ``Operation("resize_to_limit", [100, 100])``.
    """

    name: str
    arguments: Any = None


TransformationsLike = Union[Mapping[str, Any], Iterable[Any]]


def _to_operation(item: Any) -> List[Operation]:
    if isinstance(item, Operation):
        return [item]
    if isinstance(item, Mapping):
        return [Operation(str(name), arguments) for name, arguments in item.items()]
    if isinstance(item, (tuple, list)) and len(item) == 2 and isinstance(item[0], str):
        return [Operation(item[0], item[1])]
    raise TypeError(f"Unsupported transformation descriptor: {item!r}")


def normalize_transformations(transformations: TransformationsLike) -> List[Operation]:
    """
    Turn the shapes callers pass transformations in into an ordered list of
    :class:`Operation`.

    Accepted shapes:
        - a mapping ``{"resize_to_limit": [100, 100], "rotate": 90}``
        - a sequence of ``Operation``, ``(name, arguments)`` pairs or mappings
    """
    if isinstance(transformations, Mapping):
        return _to_operation(transformations)
    if isinstance(transformations, (str, bytes)):
        raise TypeError(f"Unsupported transformations: {transformations!r}")
    operations: List[Operation] = []
    for item in transformations:
        operations.extend(_to_operation(item))
    return operations
