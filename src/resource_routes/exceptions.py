# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Resource Routes.

This module defines the errors raised while assembling a resource tree,
building the route table and resolving controllers at registration time.
"""

__all__ = [
    "DuplicateChildError",
    "DuplicateRouteError",
    "MissingController",
    "MissingHandler",
    "NotFound",
]


class DuplicateChildError(ValueError):
    """Raised when two children with the same name are added to one resource.

    Attributes:
        name: The colliding child name.
        parent: Name of the resource receiving the child.
    """

    def __init__(self, name: str, parent: str | None = None) -> None:
        self.name = name
        self.parent = parent
        super().__init__(f"Duplicate Resource name found: {name}")


class DuplicateRouteError(ValueError):
    """Raised by ``build()`` when two routes share a canonical name.

    Attributes:
        name: The colliding canonical route name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate route name: {name}")


class MissingController(LookupError):
    """Raised when a controller designation names an unknown controller.

    Attributes:
        name: The controller name looked up in the controller map.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing controller {name}")


class MissingHandler(LookupError):
    """Raised in strict registration when a route action has no handler.

    Attributes:
        name: Canonical name of the route.
        action: The action selector that could not be resolved.
    """

    def __init__(self, name: str, action: str) -> None:
        self.name = name
        self.action = action
        super().__init__(f"Route '{name}' has no handler for action '{action}'")


class NotFound(Exception):
    """Raised when a canonical route name does not exist in the table.

    Attributes:
        name: The requested canonical name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route '{name}' not found")
