"""Core runtime aggregator for Resource Routes.

Exposes the building blocks from a single module:
``ResourceRouter``, the resource kinds, ``Route``/``SubscriptionRoute``,
``ControllerResolver`` and ``Registrar``.

Importing this module performs only imports; it does not register plugins
or build routers.
"""

from .controller import (
    ControllerClass,
    ControllerInstance,
    ControllerName,
    designation_of,
)
from .host_interface import HostInterface
from .inherited import InheritedList, InheritedOptions
from .node import ROOT, Node
from .registrar import Registrar
from .resolver import ControllerResolver, RouteRegistration, SubscriptionRegistration
from .resource import (
    CollectionGroupResource,
    CollectionItemResource,
    CollectionResource,
    GroupResource,
    ItemGroupResource,
    ItemResource,
    NamespaceResource,
    Resource,
)
from .route import Route, SubscriptionConfig, SubscriptionRoute
from .router import ResourceRouter, RouteEntry, RouterOptions

__all__ = [
    "ROOT",
    "CollectionGroupResource",
    "CollectionItemResource",
    "CollectionResource",
    "ControllerClass",
    "ControllerInstance",
    "ControllerName",
    "ControllerResolver",
    "GroupResource",
    "HostInterface",
    "InheritedList",
    "InheritedOptions",
    "ItemGroupResource",
    "ItemResource",
    "NamespaceResource",
    "Node",
    "Registrar",
    "Resource",
    "ResourceRouter",
    "Route",
    "RouteEntry",
    "RouteRegistration",
    "RouterOptions",
    "SubscriptionConfig",
    "SubscriptionRegistration",
    "SubscriptionRoute",
    "designation_of",
]
