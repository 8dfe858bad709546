# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Node - common unit of the resource tree.

Every element of the tree (routes and resources alike) is a ``Node``:

- ``name``: the logical name, joined into the canonical route name
- ``path``: URL segment contributed by the node, or ``ROOT`` when the node
  sits exactly at its parent's path (an empty segment is stored as ``ROOT``)
- ``options``: ``InheritedOptions`` chained to the parent's options
- ``tags`` / ``pre``: ``InheritedList`` chained to the parent's lists

Inheritance is wired once, from the ``parent`` passed to the constructor.

Joining rules
-------------
``join_name(base)`` returns ``name`` when ``base`` is empty, else
``base.name``. ``join_path(base)`` appends ``/segment`` unless the node path
is ``ROOT``; a base of exactly ``/`` yields ``/segment``. Subclasses
(groups, collection items) override both.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .inherited import InheritedList, InheritedOptions

if TYPE_CHECKING:  # pragma: no cover
    from .route import Route

__all__ = ["ROOT", "Node", "Validations", "join_segment"]


class _RootPath:
    """Sentinel marking a node that contributes no URL segment."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ROOT"


ROOT = _RootPath()

PreHook = Any


def join_segment(base_path: str, segment: str) -> str:
    """Append ``segment`` to ``base_path`` without doubling the root slash."""
    if base_path == "/":
        return f"/{segment}"
    return f"{base_path}/{segment}"


class Validations:
    """Proxy exposing a node's four validator options as attributes."""

    __slots__ = ("_options",)

    SLOTS = ("params", "query", "response", "payload")

    def __init__(self, options: InheritedOptions) -> None:
        object.__setattr__(self, "_options", options)

    def __getattr__(self, slot: str) -> Any:
        if slot not in self.SLOTS:
            raise AttributeError(slot)
        return self._options.get(f"validate_{slot}")

    def __setattr__(self, slot: str, value: Any) -> None:
        if slot not in self.SLOTS:
            raise AttributeError(f"Unknown validation slot: {slot!r}")
        self._options.set(f"validate_{slot}", value)

    def __delattr__(self, slot: str) -> None:
        if slot not in self.SLOTS:
            raise AttributeError(slot)
        self._options.unset(f"validate_{slot}")

    def to_dict(self) -> dict[str, Any]:
        return {slot: getattr(self, slot) for slot in self.SLOTS}


class Node:
    """Base class for routes and resources."""

    __slots__ = ("name", "path", "parent", "options", "_tags", "_pre")

    def __init__(self, name: str, path: Any = ROOT, parent: Node | None = None) -> None:
        if not name:
            raise ValueError("Resource node requires a name")
        self.name = name
        self.path = ROOT if path == "" else path
        self.parent = parent
        self.options = InheritedOptions(parent.options if parent is not None else None)
        self._tags: InheritedList[str] = InheritedList(
            parent._tags if parent is not None else None
        )
        self._pre: InheritedList[PreHook] = InheritedList(
            parent._pre if parent is not None else None
        )

    # ------------------------------------------------------------------
    # Inheritable options
    # ------------------------------------------------------------------
    @property
    def auth(self) -> Any:
        return self.options.get("auth")

    @auth.setter
    def auth(self, value: Any) -> None:
        self.options.set("auth", value)

    @property
    def controller(self) -> Any:
        return self.options.get("controller")

    @controller.setter
    def controller(self, value: Any) -> None:
        self.options.set("controller", value)

    @property
    def bind(self) -> Any:
        return self.options.get("bind")

    @bind.setter
    def bind(self, value: Any) -> None:
        self.options.set("bind", value)

    @property
    def validate(self) -> Validations:
        return Validations(self.options)

    # ------------------------------------------------------------------
    # Inherited lists
    # ------------------------------------------------------------------
    @property
    def tags(self) -> InheritedList[str]:
        return self._tags

    @tags.setter
    def tags(self, value: Any) -> None:
        if isinstance(value, str):
            value = [value]
        self._tags.replace(value)

    @property
    def pre(self) -> InheritedList[PreHook]:
        return self._pre

    @pre.setter
    def pre(self, value: Any) -> None:
        if callable(value) or isinstance(value, dict):
            value = [value]
        self._pre.replace(value)

    # ------------------------------------------------------------------
    # Canonicalization
    # ------------------------------------------------------------------
    def join_name(self, base_name: str) -> str:
        return f"{base_name}.{self.name}" if base_name else self.name

    def join_path(self, base_path: str) -> str:
        if self.path is ROOT:
            return base_path
        return join_segment(base_path, self.path)

    def iter_routes(self, base_name: str, base_path: str) -> Iterator[tuple[str, str, Route]]:
        """Yield ``(canonical_name, path, route)`` for routes under this node."""
        return iter(())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, path={self.path!r})"

