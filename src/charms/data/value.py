# src/charms/data/value.py
from __future__ import annotations

"""Typed application state values.

Every charm attached to a transaction input/output carries one of these.
The set of cases is closed: Empty, Bool, U64, I64, Bytes, Text, List, Map.

Each case is its own frozen dataclass so equality and hashing are structural
and accessing the wrong variant is an explicit `None` from the accessor,
never a silent attribute read.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

U64_MAX = (1 << 64) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1


def _require_int(v: Any, *, field: str) -> int:
    # bool is an int subclass; disallow it explicitly
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError(f"{field} must be int (got {type(v).__name__})")
    return v


class Value:
    """Base class of the closed value sum type."""

    __slots__ = ()

    type_name = ""

    def is_empty(self) -> bool:
        return False

    def as_bool(self) -> Optional[bool]:
        return None

    def as_u64(self) -> Optional[int]:
        return None

    def as_i64(self) -> Optional[int]:
        return None

    def as_bytes(self) -> Optional[bytes]:
        return None

    def as_text(self) -> Optional[str]:
        return None

    def as_list(self) -> Optional[Tuple["Value", ...]]:
        return None

    def as_map(self) -> Optional[Mapping[str, "Value"]]:
        return None


@dataclass(frozen=True)
class Empty(Value):
    type_name = "empty"

    def is_empty(self) -> bool:
        return True


@dataclass(frozen=True)
class Bool(Value):
    value: bool
    type_name = "bool"

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise ValueError(f"Bool value must be bool (got {type(self.value).__name__})")

    def as_bool(self) -> Optional[bool]:
        return self.value


@dataclass(frozen=True)
class U64(Value):
    value: int
    type_name = "u64"

    def __post_init__(self) -> None:
        v = _require_int(self.value, field="U64 value")
        if v < 0 or v > U64_MAX:
            raise ValueError(f"U64 value out of range: {v}")

    def as_u64(self) -> Optional[int]:
        return self.value


@dataclass(frozen=True)
class I64(Value):
    value: int
    type_name = "i64"

    def __post_init__(self) -> None:
        v = _require_int(self.value, field="I64 value")
        if v < I64_MIN or v > I64_MAX:
            raise ValueError(f"I64 value out of range: {v}")

    def as_i64(self) -> Optional[int]:
        return self.value


@dataclass(frozen=True)
class Bytes(Value):
    value: bytes
    type_name = "bytes"

    def __post_init__(self) -> None:
        if isinstance(self.value, bytearray):
            object.__setattr__(self, "value", bytes(self.value))
        if not isinstance(self.value, bytes):
            raise ValueError(f"Bytes value must be bytes (got {type(self.value).__name__})")

    def as_bytes(self) -> Optional[bytes]:
        return self.value

    def hex(self) -> str:
        return self.value.hex()


@dataclass(frozen=True)
class Text(Value):
    value: str
    type_name = "string"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValueError(f"Text value must be str (got {type(self.value).__name__})")

    def as_text(self) -> Optional[str]:
        return self.value


@dataclass(frozen=True)
class List(Value):
    items: Tuple[Value, ...] = ()
    type_name = "list"

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for it in items:
            if not isinstance(it, Value):
                raise ValueError(f"List items must be Value (got {type(it).__name__})")
        object.__setattr__(self, "items", items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def as_list(self) -> Optional[Tuple[Value, ...]]:
        return self.items


@dataclass(frozen=True)
class Map(Value):
    """String-keyed map. Entries are kept sorted by key; keys are unique."""

    entries: Tuple[Tuple[str, Value], ...] = ()
    type_name = "map"

    def __post_init__(self) -> None:
        seen: set[str] = set()
        out: list[Tuple[str, Value]] = []
        for k, v in self.entries:
            if not isinstance(k, str):
                raise ValueError(f"Map keys must be str (got {type(k).__name__})")
            if k in seen:
                raise ValueError(f"duplicate Map key: {k!r}")
            if not isinstance(v, Value):
                raise ValueError(f"Map values must be Value (got {type(v).__name__})")
            seen.add(k)
            out.append((k, v))
        out.sort(key=lambda kv: kv[0])
        object.__setattr__(self, "entries", tuple(out))

    @classmethod
    def of(cls, mapping: Union[Mapping[str, Value], Iterable[Tuple[str, Value]]]) -> "Map":
        if isinstance(mapping, Mapping):
            return cls(tuple(mapping.items()))
        return cls(tuple(mapping))

    def get(self, key: str) -> Optional[Value]:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(k for k, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def as_map(self) -> Optional[Mapping[str, Value]]:
        return dict(self.entries)


EMPTY = Empty()


__all__ = [
    "Bool",
    "Bytes",
    "EMPTY",
    "Empty",
    "I64",
    "I64_MAX",
    "I64_MIN",
    "List",
    "Map",
    "Text",
    "U64",
    "U64_MAX",
    "Value",
]
