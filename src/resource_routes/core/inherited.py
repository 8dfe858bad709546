# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Inheritable values for resource tree nodes.

Two flavours of inheritance coexist in the tree and must not be confused:

``InheritedOptions``
    Scalar options (auth, controller, bind, validators) resolved by
    override. ``get(key)`` returns the value set on the nearest node in the
    ancestor chain, so a child write shadows every ancestor for that subtree
    while siblings keep seeing the parent value. Writing ``None`` is still a
    shadowing write.

``InheritedList``
    Ordered values (tags, pre hooks) resolved by concatenation. ``all()``
    returns ancestor items first, own items appended.

Both keep an explicit ``parent`` pointer fixed at construction time.

Example::

    parent = InheritedOptions()
    parent.set("auth", "session")
    child = InheritedOptions(parent)
    child.get("auth")          # "session"
    child.set("auth", None)
    child.get("auth")          # None
    parent.get("auth")         # "session"
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

__all__ = ["InheritedList", "InheritedOptions", "OPTION_KEYS"]

T = TypeVar("T")

OPTION_KEYS = (
    "auth",
    "controller",
    "bind",
    "validate_params",
    "validate_query",
    "validate_response",
    "validate_payload",
)


class InheritedOptions:
    """Option record delegating unknown keys to its parent record."""

    __slots__ = ("parent", "_own")

    def __init__(self, parent: InheritedOptions | None = None) -> None:
        self.parent = parent
        self._own: dict[str, Any] = {}

    def _check_key(self, key: str) -> None:
        if key not in OPTION_KEYS:
            raise KeyError(f"Unknown resource option: {key!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value of ``key`` from the nearest record that set it."""
        self._check_key(key)
        current: InheritedOptions | None = self
        while current is not None:
            if key in current._own:
                return current._own[key]
            current = current.parent
        return default

    def set(self, key: str, value: Any) -> None:
        """Set ``key`` on this record only."""
        self._check_key(key)
        self._own[key] = value

    def unset(self, key: str) -> None:
        """Drop the local value so lookups fall through to the parent again."""
        self._check_key(key)
        self._own.pop(key, None)

    def has_own(self, key: str) -> bool:
        return key in self._own

    def __contains__(self, key: object) -> bool:
        current: InheritedOptions | None = self
        while current is not None:
            if key in current._own:
                return True
            current = current.parent
        return False

    def __repr__(self) -> str:
        return f"InheritedOptions({self._own!r})"


class InheritedList(Generic[T]):
    """Ordered list whose effective content is ``parent.all() + own items``."""

    __slots__ = ("parent", "_items")

    def __init__(self, parent: InheritedList[T] | None = None, items: Iterable[T] = ()) -> None:
        self.parent = parent
        self._items: list[T] = list(items)

    def add(self, *items: T) -> InheritedList[T]:
        """Append items to this node's own list. Returns self for chaining."""
        self._items.extend(items)
        return self

    def replace(self, items: Iterable[T] | None) -> None:
        """Replace own items; ancestor items are unaffected."""
        self._items = list(items or ())

    def own(self) -> list[T]:
        return list(self._items)

    def all(self) -> list[T]:
        """Return ancestor items first, then own items."""
        inherited = self.parent.all() if self.parent is not None else []
        return inherited + self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __contains__(self, item: object) -> bool:
        return item in self.all()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InheritedList):
            return self.all() == other.all()
        if isinstance(other, (list, tuple)):
            return self.all() == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"InheritedList({self.all()!r})"
