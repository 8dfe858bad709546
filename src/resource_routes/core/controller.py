# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Controller designations.

The ``controller`` option of a node says how to obtain the object that
provides handlers for its routes. User code may assign any of::

    routes.controller = UsersController()      # instance
    routes.controller = UsersController        # class, built with no args
    routes.controller = "users"                # name in the controller map
    routes.controller = ("widgets", 42)        # name plus constructor args
    routes.controller = {"show": show}         # mapping of actions

``designation_of(value)`` turns the raw value into exactly one of
``ControllerInstance``, ``ControllerClass`` or ``ControllerName`` so that
resolution is a single explicit dispatch rather than scattered type probes.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

__all__ = [
    "ControllerClass",
    "ControllerDesignation",
    "ControllerInstance",
    "ControllerMap",
    "ControllerName",
    "ControllerSource",
    "designation_of",
    "lookup",
]

ControllerMap = Mapping[str, Any]
ControllerSource = Union[ControllerMap, Callable[[], Union[ControllerMap, Awaitable[ControllerMap]]]]


@dataclass(frozen=True)
class ControllerInstance:
    """An already-built controller object (or mapping of actions)."""

    controller: Any


@dataclass(frozen=True)
class ControllerClass:
    """A controller type to instantiate with ``args``."""

    factory: type
    args: tuple[Any, ...] = field(default=())


@dataclass(frozen=True)
class ControllerName:
    """A name to look up in the controller map; ``args`` feed class entries."""

    name: str
    args: tuple[Any, ...] = field(default=())


ControllerDesignation = Union[ControllerInstance, ControllerClass, ControllerName]


def designation_of(value: Any) -> ControllerDesignation | None:
    """Classify a raw ``controller`` option value.

    Raises:
        ValueError: for an empty tuple/list or a tuple whose head is not a name.
    """
    if value is None:
        return None
    if isinstance(value, (ControllerInstance, ControllerClass, ControllerName)):
        return value
    if isinstance(value, str):
        return ControllerName(value)
    if isinstance(value, (tuple, list)):
        if not value or not isinstance(value[0], str):
            raise ValueError(
                f"Controller tuple must start with a controller name, got {value!r}"
            )
        return ControllerName(value[0], tuple(value[1:]))
    if inspect.isclass(value):
        return ControllerClass(value)
    return ControllerInstance(value)


def lookup(controller: Any, key: str) -> Any:
    """Read ``key`` from a controller: mapping key or attribute."""
    if controller is None:
        return None
    if isinstance(controller, Mapping):
        return controller.get(key)
    return getattr(controller, key, None)
