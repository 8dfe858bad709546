# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Route leaves of the resource tree.

``Route``
    One HTTP endpoint. ``method`` is normalized to upper case and checked
    against ``HTTP_METHODS``. ``action`` defaults to the route name; a string
    action is a selector into the resolved controller, a callable action is
    used as the handler directly.

    Passthrough metadata (``description``, ``notes``, ``cache``, ...) is not
    interpreted here and is forwarded verbatim to the host at registration.

``SubscriptionRoute``
    Publish/subscribe endpoint. ``method`` is always ``SUBSCRIPTION`` and the
    path is always ``ROOT`` so the subscription sits at its parent's path.
    Handler selectors live on ``config`` (a ``SubscriptionConfig``).
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from .node import ROOT, Node

__all__ = [
    "HTTP_METHODS",
    "PASSTHROUGH_FIELDS",
    "SUBSCRIPTION",
    "Route",
    "SubscriptionConfig",
    "SubscriptionRoute",
]

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
SUBSCRIPTION = "SUBSCRIPTION"

PASSTHROUGH_FIELDS = (
    "description",
    "notes",
    "cache",
    "compression",
    "cors",
    "json",
    "jsonp",
    "log",
    "payload",
    "plugins",
    "response",
    "security",
    "state",
    "timeout",
)


class Route(Node):
    """Leaf node describing a single HTTP endpoint."""

    __slots__ = ("method", "action") + PASSTHROUGH_FIELDS

    def __init__(
        self,
        method: str,
        name: str,
        path: Any = ROOT,
        parent: Node | None = None,
    ) -> None:
        super().__init__(name, path, parent)
        self.method = self._normalize_method(method)
        self.action: str | Callable = name
        for field in PASSTHROUGH_FIELDS:
            setattr(self, field, None)

    def _normalize_method(self, method: str) -> str:
        normalized = method.upper()
        if normalized not in HTTP_METHODS:
            allowed = ", ".join(sorted(HTTP_METHODS))
            raise ValueError(f"Unsupported HTTP method {method!r}. Allowed: {allowed}")
        return normalized

    def metadata(self) -> dict[str, Any]:
        """Return passthrough metadata that has been set on this route."""
        return {
            field: getattr(self, field)
            for field in PASSTHROUGH_FIELDS
            if getattr(self, field) is not None
        }

    def iter_routes(self, base_name: str, base_path: str) -> Iterator[tuple[str, str, Route]]:
        yield base_name, base_path, self


class SubscriptionConfig(BaseModel):
    """Handler selectors and options for a subscription endpoint.

    Each handler is either the name of a controller method or a callable.
    Unknown keys are kept and forwarded to the host untouched.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    filter: str | Callable[..., Any] | None = None
    on_subscribe: str | Callable[..., Any] | None = None
    on_unsubscribe: str | Callable[..., Any] | None = None
    auth: Any = None

    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class SubscriptionRoute(Route):
    """Route bound to a publish/subscribe endpoint instead of an HTTP verb."""

    __slots__ = ("config",)

    def __init__(
        self,
        name: str,
        config: SubscriptionConfig | Mapping[str, Any] | None = None,
        parent: Node | None = None,
    ) -> None:
        super().__init__("GET", name, ROOT, parent)
        self.method = SUBSCRIPTION
        if config is None:
            config = SubscriptionConfig()
        elif not isinstance(config, SubscriptionConfig):
            config = SubscriptionConfig(**dict(config))
        self.config = config
