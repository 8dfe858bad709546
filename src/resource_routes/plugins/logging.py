"""Logging plugin for Resource Routes.

Wraps resolved handlers with configurable logging messages including timing.

Configuration
-------------
Accepted keys (registrar-level or per canonical route name):
    - ``enabled``: Gate the plugin entirely (default True)
    - ``before``: Log "start" message (default True)
    - ``after``: Log "end" message with timing (default True)
    - ``log``: Use logger.info() when available (default True)
    - ``print``: Always use print() (default False)

Example::

    from resource_routes import Registrar

    registrar = Registrar(router, controllers).plug("logging")
    registrar.logging.configure(_target="users.index", flags="after:off")

Coroutine handlers get a coroutine wrapper so timings cover the awaited call.
"""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable
from functools import wraps

from resource_routes.core.registrar import Registrar
from resource_routes.core.resolver import RouteRegistration
from resource_routes.plugins._base_plugin import BasePlugin

_DEFAULTS = {"enabled": True, "before": True, "after": True, "log": True, "print": False}


class LoggingPlugin(BasePlugin):
    """Logging plugin with configurable start/end messages and timing."""

    plugin_code = "logging"
    plugin_description = "Logs handler calls with timing"

    __slots__ = ("_logger",)

    def __init__(self, registrar, *, logger: logging.Logger | None = None, **cfg):
        self._logger = logger or logging.getLogger("resource_routes")
        super().__init__(registrar, **cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Set the flags for the registrar (default) or one route via ``_target``.

        Args:
            enabled: Wrap and log this route at all.
            before: Emit "<route> start" when the handler is entered.
            after: Emit "<route> end (X ms)" once it returns.
            log: Send messages to the ``resource_routes`` logger.
            print: Send messages to stdout regardless of ``log``.
        """
        pass  # Storage is handled by the wrapper

    def _emit(self, cfg: dict, message: str) -> None:
        if cfg["print"]:
            print(message)
        elif cfg["log"]:
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    def _route_config(self, registrar, route_name: str) -> dict | None:
        """Return the active flags for a route, or None when logging is off."""
        cfg = _DEFAULTS | self.configuration(route_name)
        if not cfg["enabled"] or not registrar.is_plugin_enabled(route_name, self.name):
            return None
        return {
            key: default if cfg[key] is None else bool(cfg[key])
            for key, default in _DEFAULTS.items()
        }

    def _started(self, registrar, route_name: str) -> tuple[dict, float] | None:
        cfg = self._route_config(registrar, route_name)
        if cfg is None:
            return None
        if cfg["before"]:
            self._emit(cfg, f"{route_name} start")
        return cfg, time.perf_counter()

    def _finished(self, route_name: str, state: tuple[dict, float]) -> None:
        cfg, started = state
        if cfg["after"]:
            elapsed = (time.perf_counter() - started) * 1000
            self._emit(cfg, f"{route_name} end ({elapsed:.2f} ms)")

    def wrap_handler(self, registrar, registration: RouteRegistration, call_next: Callable):
        """Wrap the resolved handler; flags are read on every call."""
        name = registration.name

        if inspect.iscoroutinefunction(call_next):

            @wraps(call_next)
            async def logged_async(*args, **kwargs):
                state = self._started(registrar, name)
                result = await call_next(*args, **kwargs)
                if state is not None:
                    self._finished(name, state)
                return result

            return logged_async

        @wraps(call_next)
        def logged(*args, **kwargs):
            state = self._started(registrar, name)
            result = call_next(*args, **kwargs)
            if state is not None:
                self._finished(name, state)
            return result

        return logged


Registrar.register_plugin(LoggingPlugin)
