# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Registration-time resolution of controllers, handlers and validators.

``ControllerResolver`` turns one row of the route table into a record the
host server can register. It runs once per route at startup, never per
request.

Controller map
--------------
The map is supplied once, either as a mapping or as a zero-argument callable
returning a mapping or an awaitable of one. ``await load()`` resolves it.
A plain mapping is usable without ``load()``; a callable source must be
loaded before any lookup.

Resolution steps
----------------
1. Controller: the route's ``controller`` option is classified by
   ``designation_of`` and dispatched once. Names are looked up in the map
   (``MissingController`` if absent); class entries are instantiated with
   the designation's args.
2. Handler: a string action is looked up on the controller (bound method, or
   mapping value); a missing one resolves to ``None``. A callable action is
   the handler.
3. Validators, per slot ``params``, ``query``, ``response``, ``payload``:

   a. ``payload`` on ``GET``/``OPTIONS`` is always ``None``;
   b. the route's (inherited) value wins when not ``None``;
   c. for string actions, the controller ``validate`` record (the
      instance value, else the one on its class): a mapping entry is
      indexed by action, a callable entry is called with it;
   d. otherwise ``None``.
4. Subscription handlers follow the string-or-callable rule of step 2.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from resource_routes.exceptions import MissingController

from .controller import (
    ControllerClass,
    ControllerMap,
    ControllerName,
    ControllerSource,
    designation_of,
    lookup,
)
from .route import PASSTHROUGH_FIELDS, SUBSCRIPTION, Route
from .router import RouteEntry

__all__ = [
    "ControllerResolver",
    "RouteRegistration",
    "SKIP_PAYLOAD_VALIDATION",
    "SUBSCRIPTION_HANDLERS",
    "SubscriptionRegistration",
    "VALIDATION_SLOTS",
]

SKIP_PAYLOAD_VALIDATION = frozenset({"GET", "OPTIONS"})
VALIDATION_SLOTS = ("params", "query", "response", "payload")
SUBSCRIPTION_HANDLERS = ("filter", "on_subscribe", "on_unsubscribe")


@dataclass
class RouteRegistration:
    """Everything a host needs to register one HTTP route.

    Attributes:
        name: Canonical route name (also used as ``options["id"]``).
        path: URL path with ``{param}`` placeholders.
        method: Upper-case HTTP method.
        handler: Resolved callable, or ``None`` when the action is absent.
        controller: Controller the handler was resolved from.
        route: The tree node.
        options: Host route options (id, auth, tags, pre, validate, ...).
        metadata: Scratch space for registration plugins.
    """

    name: str
    path: str
    method: str
    handler: Callable | None
    controller: Any
    route: Route
    options: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_subscription(self) -> bool:
        return False


@dataclass
class SubscriptionRegistration:
    """Everything a host needs to register one subscription endpoint."""

    name: str
    path: str
    controller: Any
    route: Route
    options: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_subscription(self) -> bool:
        return True

    @property
    def method(self) -> str:
        return SUBSCRIPTION


class ControllerResolver:
    """Resolve controllers, handlers and validators for built routes."""

    __slots__ = ("_source", "_controller_map")

    def __init__(self, controllers: ControllerSource | None = None) -> None:
        self._source = controllers
        self._controller_map: dict[str, Any] | None = None
        if controllers is None:
            self._controller_map = {}
        elif isinstance(controllers, Mapping):
            self._controller_map = dict(controllers)

    # ------------------------------------------------------------------
    # Controller map
    # ------------------------------------------------------------------
    @property
    def loaded(self) -> bool:
        return self._controller_map is not None

    async def load(self) -> ControllerMap:
        """Resolve the controller map once; later calls return the cached map."""
        if self._controller_map is None:
            result = self._source() if callable(self._source) else self._source
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, Mapping):
                raise TypeError(
                    f"Controller source must produce a mapping, got {type(result).__name__}"
                )
            self._controller_map = dict(result)
        return self._controller_map

    @property
    def controller_map(self) -> ControllerMap:
        if self._controller_map is None:
            raise RuntimeError("Controller map not loaded; await load() first")
        return self._controller_map

    def resolve_controller(self, name: str, *args: Any) -> Any:
        """Return the controller registered as ``name``, instantiating classes.

        Raises:
            MissingController: if ``name`` is not in the controller map.
        """
        controller = self.controller_map.get(name)
        if controller is None:
            raise MissingController(name)
        if inspect.isclass(controller):
            return controller(*args)
        return controller

    def controller_for(self, route: Route) -> Any:
        """Resolve the route's (inherited) controller designation."""
        designation = designation_of(route.controller)
        if designation is None:
            return None
        if isinstance(designation, ControllerName):
            return self.resolve_controller(designation.name, *designation.args)
        if isinstance(designation, ControllerClass):
            return designation.factory(*designation.args)
        return designation.controller

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    @staticmethod
    def get_handler(route: Route, controller: Any) -> Callable | None:
        action = route.action
        if isinstance(action, str):
            handler = lookup(controller, action)
            return handler if callable(handler) else None
        return action

    @staticmethod
    def get_subscription_handler(route: Route, controller: Any, key: str) -> Callable | None:
        if key not in SUBSCRIPTION_HANDLERS:
            raise ValueError(f"Unknown subscription handler: {key!r}")
        selector = getattr(route.config, key)  # type: ignore[attr-defined]
        if isinstance(selector, str):
            handler = lookup(controller, selector)
            return handler if callable(handler) else None
        return selector

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------
    @staticmethod
    def skip_payload_validation(route: Route) -> bool:
        return route.method in SKIP_PAYLOAD_VALIDATION

    @classmethod
    def resolve_validator(cls, route: Route, controller: Any, slot: str) -> Any:
        if slot not in VALIDATION_SLOTS:
            raise ValueError(f"Unknown validation slot: {slot!r}")
        if slot == "payload" and cls.skip_payload_validation(route):
            return None

        explicit = route.options.get(f"validate_{slot}")
        if explicit is not None:
            return explicit

        if not isinstance(route.action, str) or controller is None:
            return None

        validate = lookup(controller, "validate")
        if not validate and not isinstance(controller, Mapping):
            validate = getattr(type(controller), "validate", None)
        if not validate:
            return None
        entry = lookup(validate, slot)
        if not entry:
            return None
        if isinstance(entry, Mapping):
            return entry.get(route.action)
        if callable(entry):
            return entry(route.action)
        return None

    @classmethod
    def build_validate(cls, route: Route, controller: Any) -> dict[str, Any]:
        return {slot: cls.resolve_validator(route, controller, slot) for slot in VALIDATION_SLOTS}

    # ------------------------------------------------------------------
    # Registrations
    # ------------------------------------------------------------------
    def resolve(self, name: str, entry: RouteEntry) -> RouteRegistration | SubscriptionRegistration:
        """Build the registration record for one table entry."""
        route = entry.route
        controller = self.controller_for(route)
        if route.method == SUBSCRIPTION:
            return self._resolve_subscription(name, entry.path, route, controller)

        plugins = dict(route.plugins or {})
        plugins["resource_routes"] = {"controller": controller}
        options: dict[str, Any] = {
            "id": name,
            "description": route.description,
            "notes": route.notes,
            "auth": route.auth,
            "tags": route.tags.all(),
            "pre": route.pre.all(),
            "payload": route.payload,
            "bind": route.bind,
            "validate": self.build_validate(route, controller),
            "plugins": plugins,
        }
        for key, value in route.metadata().items():
            options.setdefault(key, value)
        return RouteRegistration(
            name=name,
            path=entry.path,
            method=route.method,
            handler=self.get_handler(route, controller),
            controller=controller,
            route=route,
            options=options,
        )

    def _resolve_subscription(
        self, name: str, path: str, route: Route, controller: Any
    ) -> SubscriptionRegistration:
        config = route.config  # type: ignore[attr-defined]
        options: dict[str, Any] = config.extras()
        for key in SUBSCRIPTION_HANDLERS:
            options[key] = self.get_subscription_handler(route, controller, key)
        options["auth"] = config.auth
        return SubscriptionRegistration(
            name=name,
            path=path,
            controller=controller,
            route=route,
            options=options,
        )
