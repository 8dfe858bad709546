# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""FilterPlugin - Tag-based route selection at registration time.

Routes whose inherited tags do not satisfy the configured rule are never
handed to the host. Useful to mount only part of a resource tree on a given
server (e.g. public API vs. internal admin).

Usage::

    registrar = Registrar(router, controllers).plug("filter", tags="public|api")

Operators:
    - ``|`` : OR
    - ``&`` : AND
    - ``!`` : NOT
    - ``()`` : grouping

A per-route bucket overrides the rule for one canonical name::

    registrar.filter.configure(_target="health", tags="")

An empty rule lets every route through.
"""

from __future__ import annotations

from typing import Any

from genro_toolbox import tags_match

from resource_routes.core.registrar import Registrar

from ._base_plugin import BasePlugin

__all__ = ["FilterPlugin"]


class FilterPlugin(BasePlugin):
    """Registration filter driven by route tags."""

    plugin_code = "filter"
    plugin_description = "Registers only routes whose tags match a rule"

    def configure(  # type: ignore[override]
        self,
        *,
        tags: str = "",
        enabled: bool = True,
        _target: str = "_all_",
        flags: str | None = None,
    ) -> None:
        """Define the tag rule for the registrar or one route.

        Args:
            tags: Rule expression (e.g. "public", "api&!internal").
            enabled: Whether filtering is enabled (default True)
            _target: Internal - target bucket name
            flags: Internal - flag string
        """
        pass  # Storage handled by wrapper

    def allow_route(self, registrar: Any, registration: Any) -> bool:
        rule = self.configuration(registration.name).get("tags")
        if not rule:
            return True
        route_tags = {str(tag) for tag in registration.route.tags.all()}
        return bool(tags_match(rule, route_tags))


Registrar.register_plugin(FilterPlugin)
