# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""ResourceRouter - root of the resource tree and owner of the route table.

``ResourceRouter`` is a ``Resource`` that never contributes to names or
paths. Builder callbacks populate it, ``build()`` walks the tree and
produces the flat route table::

    router = ResourceRouter(base_path="/api")
    router.add(lambda routes: routes.namespace("example", example))
    router.routes["example.act"].path   # "/api/example/act"

Build
-----
``build()`` discards the previous table, walks children depth-first from
``base_name=""`` and ``base_path=options.base_path or "/"`` and stores
``RouteEntry(path, route)`` under each canonical name. A canonical name seen
twice raises ``DuplicateRouteError``. The tree itself is never modified.

URL generation
--------------
``href(name, params)`` substitutes ``{param}`` placeholders of the route
path and prefixes ``options.base_url`` when set.

Introspection
-------------
``nodes(pattern=None, tags=None)`` describes the built table. ``pattern`` is
a regex searched in canonical names; ``tags`` is a tag rule evaluated with
``genro_toolbox.tags_match`` against each route's inherited tags
(``|`` OR, ``&`` AND, ``!`` NOT).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from genro_toolbox import tags_match
from pydantic import BaseModel, ConfigDict

from resource_routes.exceptions import DuplicateRouteError, NotFound

from .node import ROOT
from .resource import Resource
from .route import Route

__all__ = ["ResourceRouter", "RouteEntry", "RouterOptions"]

_PARAM_RE = re.compile(r"\{(\w+)\}")


class RouterOptions(BaseModel):
    """Build configuration for a ``ResourceRouter``.

    Attributes:
        base_path: Path every route is mounted under (default ``/``).
        base_url: Scheme and host prepended by ``href()``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_path: str | None = None
    base_url: str | None = None


@dataclass(frozen=True)
class RouteEntry:
    """One row of the route table."""

    path: str
    route: Route


class ResourceRouter(Resource):
    """Root resource owning build options and the compiled route table."""

    __slots__ = ("router_options", "routes")

    def __init__(
        self, options: RouterOptions | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> None:
        super().__init__("ROUTER", ROOT, None)
        if options is None:
            options = RouterOptions(**kwargs)
        elif not isinstance(options, RouterOptions):
            options = RouterOptions(**{**dict(options), **kwargs})
        elif kwargs:
            options = options.model_copy(update=kwargs)
        self.router_options: RouterOptions = options
        self.routes: dict[str, RouteEntry] = {}

    def join_name(self, base_name: str) -> str:
        return base_name

    def join_path(self, base_path: str) -> str:
        return base_path

    @property
    def base_path(self) -> str:
        return self.router_options.base_path or "/"

    def add(self, builder: Callable[[ResourceRouter], Any]) -> ResourceRouter:
        """Run ``builder`` against the router, then rebuild the table."""
        builder(self)
        self.build()
        return self

    def build(self) -> dict[str, RouteEntry]:
        """Recompute the route table from the current tree."""
        routes: dict[str, RouteEntry] = {}
        for name, path, route in self.iter_routes("", self.base_path):
            if name in routes:
                raise DuplicateRouteError(name)
            routes[name] = RouteEntry(path, route)
        self.routes = routes
        return routes

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------
    def entry(self, name: str) -> RouteEntry:
        try:
            return self.routes[name]
        except KeyError:
            raise NotFound(name) from None

    def href(self, name: str, params: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Return the URL of route ``name`` with path parameters filled in.

        Raises:
            NotFound: if ``name`` is not in the built table.
            ValueError: if a path parameter has no value.
        """
        values = {**dict(params or {}), **kwargs}
        path = self.entry(name).path

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in values:
                raise ValueError(f"Missing parameter {key!r} for route {name!r}")
            return quote(str(values[key]), safe="")

        url = _PARAM_RE.sub(substitute, path)
        base_url = self.router_options.base_url
        if base_url:
            url = f"{base_url.rstrip('/')}{url}"
        return url

    def nodes(self, pattern: str | None = None, tags: str | None = None) -> dict[str, Any]:
        """Describe built routes, optionally filtered by name regex and tag rule."""
        regex = re.compile(pattern) if pattern else None
        result: dict[str, Any] = {}
        for name, entry in self.routes.items():
            route = entry.route
            route_tags = route.tags.all()
            if regex is not None and not regex.search(name):
                continue
            if tags and not tags_match(tags, set(route_tags)):
                continue
            result[name] = {
                "path": entry.path,
                "method": route.method,
                "action": route.action if isinstance(route.action, str) else None,
                "tags": route_tags,
                "auth": route.auth,
                "description": route.description,
            }
        return result

    def __repr__(self) -> str:
        return f"ResourceRouter(base_path={self.base_path!r}, routes={len(self.routes)})"
