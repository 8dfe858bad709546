"""Plugin contract definitions for Resource Routes.

Plugins hook into the ``Registrar`` while it turns the route table into host
registrations.

``BasePlugin``
    Abstract base class that every plugin must subclass. Provides:
        - Configuration helpers that delegate to the registrar's ``plugin_info`` store
        - Optional hooks ``allow_route``, ``on_register`` and ``wrap_handler``

    Required class attributes:
        - ``plugin_code``: unique identifier used for registration (e.g. "logging")
        - ``plugin_description``: human-readable description of the plugin

    Constructor signature: ``BasePlugin(registrar, **config)``

    Key methods:
        - ``configure(**config)``: Define accepted configuration parameters
        - ``configuration(route_name=None)``: Read merged configuration
        - ``allow_route(registrar, registration)``: Skip a route at registration
        - ``on_register(registrar, registration)``: Annotate a registration
        - ``wrap_handler(registrar, registration, call_next)``: Wrap the handler

Configuration is stored per plugin in buckets: ``_all_`` for registrar-wide
values and one bucket per canonical route name::

    registrar.plug("logging")
    registrar.logging.configure(_target="users.index", before=False)

Example::

    from resource_routes.plugins._base_plugin import BasePlugin

    class AuditPlugin(BasePlugin):
        plugin_code = "audit"
        plugin_description = "Records registered route names"

        def configure(self, enabled: bool = True):
            pass  # Storage handled by wrapper

        def on_register(self, registrar, registration):
            registration.metadata["audit"] = True
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from pydantic import validate_call

__all__ = ["BasePlugin"]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, _target, validation, and storage."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(
        self: BasePlugin, *, _target: str = "_all_", flags: str | None = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        # Comma-separated targets address several routes at once
        if "," in _target:
            targets = [t.strip() for t in _target.split(",") if t.strip()]
            for t in targets:
                wrapper(self, _target=t, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface and configuration helpers for registration plugins.

    Subclass this to create custom plugins. Override the hooks you need
    and define your configuration schema in ``configure()``.
    """

    __slots__ = ("name", "_registrar")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, registrar: Any, **config: Any):
        self.name = self.plugin_code
        self._registrar = registrar
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault("_all_", {"enabled": True})

    def _write_config(self, target: str, config: dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._get_store().setdefault(self.name, {}).setdefault(target, {})
        bucket.update(config)

    def configuration(self, route_name: str | None = None) -> dict[str, Any]:
        """Read merged configuration (base + optional per-route override).

        Args:
            route_name: If provided, merge the route's bucket over the base one.

        Returns:
            Dict of configuration values.
        """
        plugin_bucket = self._get_store().get(self.name)
        if not plugin_bucket:
            return {}
        merged = dict(plugin_bucket.get("_all_", {}))
        if route_name:
            merged.update(plugin_bucket.get(route_name, {}))
        return merged

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def _get_store(self) -> dict[str, Any]:
        return self._registrar._plugin_info  # type: ignore[no-any-return]

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM PLUGINS
    # =========================================================================

    def configure(self, *, _target: str = "_all_", flags: str | None = None) -> None:
        """Override to define accepted configuration parameters.

        The wrapper added by __init_subclass__ handles:
            - Parsing ``flags`` (e.g. "enabled,before:off") into booleans
            - Routing to ``_target`` ("_all_", a canonical route name, or "a,b")
            - Pydantic validation via @validate_call
            - Writing to the registrar's config store
        """
        if flags:
            self._write_config(_target, self._parse_flags(flags))

    def allow_route(self, registrar: Any, registration: Any) -> bool:
        """Return False to keep a route away from the host."""
        return True

    def on_register(self, registrar: Any, registration: Any) -> None:  # pragma: no cover
        """Called once per registration, before the handler is wrapped."""

    def wrap_handler(self, registrar: Any, registration: Any, call_next: Callable) -> Callable:
        """Override to wrap the resolved handler.

        Return a callable with the same signature as ``call_next``.
        """
        return call_next
