"""Read-only document tree and tolerant path lookup.

Parsed workflows are deep-frozen (mappings become ``MappingProxyType``, lists
become tuples) so predicates cannot mutate the tree they share. Lookups never
raise on missing structure; they return ``MISSING`` plus enough context to say
where traversal stopped.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final

ConfigDocument = Mapping[str, Any]
PathLike = str | Sequence[str]


class _Missing:
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Final = _Missing()


def freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def type_name(value: Any) -> str:
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if is_mapping(value):
        return "mapping"
    if is_sequence(value):
        return "sequence"
    return type(value).__name__


def split_path(path: PathLike) -> tuple[str, ...]:
    if isinstance(path, str):
        parts = tuple(path.split(".")) if path else ()
    else:
        parts = tuple(str(part) for part in path)
    if any(part == "" for part in parts):
        raise ValueError(f"Invalid path {path!r}: empty segment")
    return parts


def format_path(parts: Sequence[str]) -> str:
    return ".".join(parts) if parts else "<root>"


@dataclass(frozen=True)
class Lookup:
    path: tuple[str, ...]
    value: Any
    # Number of leading segments that resolved before traversal stopped.
    depth: int
    parent_type: str | None = None

    @property
    def found(self) -> bool:
        return self.value is not MISSING

    @property
    def location(self) -> str:
        return format_path(self.path)

    def describe_missing(self) -> str:
        if self.found:
            return f"{self.location} is present"
        parent = format_path(self.path[: self.depth])
        segment = self.path[self.depth]
        if self.parent_type in {"mapping", "sequence"}:
            return f'{self.location} not found: "{parent}" has no entry "{segment}"'
        return (
            f'{self.location} not found: "{parent}" is {self.parent_type}, '
            f'not a mapping'
        )


def _step_into(node: Any, segment: str) -> Any:
    if is_mapping(node):
        return node[segment] if segment in node else MISSING
    if is_sequence(node) and segment.isdigit():
        index = int(segment)
        return node[index] if index < len(node) else MISSING
    return MISSING


def lookup(document: Any, path: PathLike) -> Lookup:
    parts = split_path(path)
    node = document
    for depth, segment in enumerate(parts):
        child = _step_into(node, segment)
        if child is MISSING:
            return Lookup(parts, MISSING, depth, parent_type=type_name(node))
        node = child
    return Lookup(parts, node, len(parts))


def resolve(document: Any, path: PathLike) -> Any:
    """Return the value at ``path`` or ``MISSING`` when any segment is absent."""
    return lookup(document, path).value


def find_index(sequence: Sequence[Any], predicate: Callable[[Any], bool]) -> int | None:
    for index, item in enumerate(sequence):
        if predicate(item):
            return index
    return None
