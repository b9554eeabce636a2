"""Result type for explicit error handling.

Fallible operations return ``Ok(value)`` or ``Err(error)`` instead of raising.
Callers narrow with ``isinstance`` or pattern matching:

    match read_latest_entry(path):
        case Ok(entry):
            console.info(f"latest: {entry.tag}")
        case Err(error):
            console.error(describe(error))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result holding ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed result holding ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Union[Ok[T], Err[E]]
