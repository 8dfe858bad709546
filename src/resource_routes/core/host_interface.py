# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""HostInterface - Abstract base for servers receiving route registrations.

The core never accepts connections. A host adapter (HTTP framework, pub/sub
server, test double) implements this interface and the ``Registrar`` feeds
it one registration per table entry.

Required methods:
    - route(registration) -> register an HTTP route

Optional:
    - subscription(registration) -> register a pub/sub endpoint; set
      ``supports_subscriptions = True`` when implemented

Both methods may be coroutines; the registrar awaits them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from resource_routes.core.resolver import RouteRegistration, SubscriptionRegistration

__all__ = ["HostInterface"]


class HostInterface(ABC):
    """Minimal interface for host servers.

    Attributes:
        supports_subscriptions: True when ``subscription()`` is implemented.
    """

    supports_subscriptions: bool = False

    @abstractmethod
    def route(self, registration: RouteRegistration) -> Any:
        """Register one HTTP route.

        Args:
            registration: path, method, handler and host options
                (``id``, ``auth``, ``tags``, ``pre``, ``validate``, ...).
        """
        ...

    def subscription(self, registration: SubscriptionRegistration) -> Any:
        """Register one subscription endpoint."""
        raise NotImplementedError(f"{type(self).__name__} does not support subscriptions")
