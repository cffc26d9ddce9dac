"""One page of remote results plus the token for the page after it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")

# Cursors are produced by the remote side and handed back verbatim; nothing in
# the client may look inside one.
Cursor = Any


@dataclass(frozen=True)
class Slice(Generic[T]):
    """Immutable page of ``elements`` in server order.

    ``next_cursor`` is ``None`` when no further pages exist.
    """

    elements: Tuple[T, ...] = field(default_factory=tuple)
    next_cursor: Optional[Cursor] = None

    def __post_init__(self) -> None:
        if not isinstance(self.elements, tuple):
            object.__setattr__(self, "elements", tuple(self.elements))

    @classmethod
    def of(cls, elements: Iterable[T], next_cursor: Optional[Cursor] = None) -> "Slice[T]":
        return cls(tuple(elements), next_cursor)

    @property
    def is_last(self) -> bool:
        return self.next_cursor is None

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[T]:
        return iter(self.elements)
