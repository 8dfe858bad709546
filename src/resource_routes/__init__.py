"""Resource Routes - Declarative resource trees compiled into route tables.

Public API surface for describing REST-style resources, compiling them into
a flat table of canonical names and paths, and resolving controllers and
validators when registering the table with a host server.

Public exports:
    - ``ResourceRouter``: Root of the resource tree, owns the route table
    - ``Registrar``: Resolves the table and registers it with a host
    - ``HostInterface``: Base class for host adapters
    - ``ROOT``: Path sentinel for nodes that add no URL segment

Plugin registration happens lazily via ``import_module`` to avoid cycles.
Built-in plugins (logging, filter) are auto-registered on first import.

Example::

    from resource_routes import ResourceRouter

    def users(users):
        users.index()
        users.create()
        users.items("user", lambda user: user.show())

    router = ResourceRouter(base_path="/api")
    router.add(lambda routes: routes.collection("users", users))
    router.routes["users[user].show"].path  # "/api/users/{user}"
"""

from importlib import import_module

__version__ = "0.4.0"

from .core import (
    ROOT,
    ControllerResolver,
    HostInterface,
    Registrar,
    ResourceRouter,
    Route,
    RouteEntry,
    RouteRegistration,
    RouterOptions,
    SubscriptionConfig,
    SubscriptionRegistration,
    SubscriptionRoute,
)
from .exceptions import (
    DuplicateChildError,
    DuplicateRouteError,
    MissingController,
    MissingHandler,
    NotFound,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging", "filter"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "ROOT",
    "ControllerResolver",
    "HostInterface",
    "Registrar",
    "ResourceRouter",
    "Route",
    "RouteEntry",
    "RouteRegistration",
    "RouterOptions",
    "SubscriptionConfig",
    "SubscriptionRegistration",
    "SubscriptionRoute",
    "DuplicateChildError",
    "DuplicateRouteError",
    "MissingController",
    "MissingHandler",
    "NotFound",
]
