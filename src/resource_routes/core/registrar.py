# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Registrar - feeds a built route table to a host server.

``Registrar`` is the registration layer between a ``ResourceRouter`` and the
host. At startup it:

1. awaits the controller map exactly once (``load_controllers``);
2. resolves every table entry with ``ControllerResolver`` in table order;
3. lets attached plugins veto (``allow_route``), annotate (``on_register``)
   and wrap (``wrap_handler``) each registration;
4. calls ``host.route(registration)`` or ``host.subscription(registration)``.

No route is resolved against a partially loaded controller map, and a
missing controller aborts registration with ``MissingController``.

Absent handlers
---------------
A string action with no matching controller attribute resolves to
``handler=None``. With ``strict=True`` this raises ``MissingHandler``;
otherwise a warning is logged and the host decides.

Plugins
-------
``Registrar.register_plugin(plugin_class)`` adds a plugin class to the global
registry; ``plug(name, **config)`` attaches an instance to this registrar.
Attached plugins are reachable as attributes (``registrar.logging``).

Example::

    router = ResourceRouter(base_path="/api").add(build_routes)
    registrar = Registrar(router, controllers=load_controllers).plug("logging")
    await registrar.register(host)
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from genro_toolbox.typeutils import safe_is_instance

from resource_routes.exceptions import MissingHandler
from resource_routes.plugins._base_plugin import BasePlugin

from .controller import ControllerMap, ControllerSource
from .resolver import ControllerResolver, RouteRegistration, SubscriptionRegistration
from .router import ResourceRouter

__all__ = ["Registrar"]

logger = logging.getLogger("resource_routes")

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}


class Registrar:
    """Resolve a route table and register it with a host."""

    __slots__ = (
        "router",
        "resolver",
        "strict",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(
        self,
        router: ResourceRouter,
        controllers: ControllerSource | None = None,
        *,
        strict: bool = False,
    ) -> None:
        if router is None:
            raise ValueError("Registrar requires a ResourceRouter")
        self.router = router
        self.resolver = ControllerResolver(controllers)
        self.strict = strict
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Register a plugin class globally.

        Raises:
            TypeError: If plugin_class is not a BasePlugin subclass.
            ValueError: If plugin_code is missing or name collision occurs.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        """Return a copy of the global plugin registry."""
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Registrar:
        """Attach a registered plugin by name. Returns self for chaining.

        Raises:
            ValueError: If plugin is not registered or already attached.
        """
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin in self._plugins_by_name:
            raise ValueError(
                f"Plugin '{plugin}' is already attached to this registrar. "
                "Use configure() to update settings."
            )
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> list[BasePlugin]:
        return list(self._plugins)

    def get_config(self, plugin_name: str, route_name: str | None = None) -> dict[str, Any]:
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to registrar")
        return plugin.configuration(route_name)

    def is_plugin_enabled(self, route_name: str, plugin_name: str) -> bool:
        """Per-route ``enabled`` wins over the registrar-wide value (default True)."""
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to registrar")
        route_cfg = bucket.get(route_name, {})
        if "enabled" in route_cfg:
            return bool(route_cfg["enabled"])
        return bool(bucket.get("_all_", {}).get("enabled", True))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to registrar")
        return plugin

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------
    async def load_controllers(self) -> ControllerMap:
        return await self.resolver.load()

    def resolve_controller(self, name: str, *args: Any) -> Any:
        """Look up (and instantiate) a controller from the loaded map."""
        return self.resolver.resolve_controller(name, *args)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def resolve_all(self) -> list[RouteRegistration | SubscriptionRegistration]:
        """Resolve every table entry, applying plugins. The map must be loaded."""
        registrations: list[RouteRegistration | SubscriptionRegistration] = []
        for name, entry in self.router.routes.items():
            registration = self.resolver.resolve(name, entry)
            if not self._allowed(registration):
                logger.debug("Route %s skipped by plugins", name)
                continue
            for plugin in self._plugins:
                if self.is_plugin_enabled(name, plugin.name):
                    plugin.on_register(self, registration)
            if not registration.is_subscription:
                self._check_handler(registration)
                if registration.handler is not None:
                    registration.handler = self._wrap_handler(registration, registration.handler)
            registrations.append(registration)
        return registrations

    async def register(self, host: Any) -> list[RouteRegistration | SubscriptionRegistration]:
        """Load controllers, resolve all routes and hand them to ``host``.

        Returns:
            The registrations actually passed to the host.
        """
        await self.load_controllers()
        registered: list[RouteRegistration | SubscriptionRegistration] = []
        subscribable = self._is_subscribable(host)
        for registration in self.resolve_all():
            if registration.is_subscription:
                if not subscribable:
                    logger.warning(
                        "Host %s does not support subscriptions, skipping %s",
                        type(host).__name__,
                        registration.name,
                    )
                    continue
                result = host.subscription(registration)
            else:
                result = host.route(registration)
            if inspect.isawaitable(result):
                await result
            logger.debug(
                "Registered %s %s %s", registration.method, registration.path, registration.name
            )
            registered.append(registration)
        return registered

    def _allowed(self, registration: RouteRegistration | SubscriptionRegistration) -> bool:
        for plugin in self._plugins:
            if not self.is_plugin_enabled(registration.name, plugin.name):
                continue
            if not plugin.allow_route(self, registration):
                return False
        return True

    def _check_handler(self, registration: RouteRegistration) -> None:
        if registration.handler is not None:
            return
        action = registration.route.action
        if self.strict:
            raise MissingHandler(registration.name, str(action))
        logger.warning(
            "Route %s: controller has no handler for action %r", registration.name, action
        )

    def _wrap_handler(self, registration: RouteRegistration, call_next: Callable) -> Callable:
        wrapped = call_next
        for plugin in reversed(self._plugins):
            if not self.is_plugin_enabled(registration.name, plugin.name):
                continue
            wrapped = plugin.wrap_handler(self, registration, wrapped)
        return wrapped

    @staticmethod
    def _is_subscribable(host: Any) -> bool:
        if safe_is_instance(host, "resource_routes.core.host_interface.HostInterface"):
            return bool(host.supports_subscriptions)
        return callable(getattr(host, "subscription", None))
