# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Resource nodes and the builder DSL.

A ``Resource`` owns an insertion-ordered ``children`` dict (name → Node).
Names are unique within one parent: adding a second child with the same
name raises ``DuplicateChildError``.

Builder DSL
-----------
Every DSL call builds a child with ``self`` as inheritance parent, runs the
builder callback synchronously with the new node, inserts it into
``children`` and returns it::

    routes.collection("users", users_builder)          # path "users"
    routes.collection("users", "people", users_builder)  # path "people"
    routes.group("admin", admin_builder)               # transparent
    routes.route("GET", "search")                      # path "search"
    routes.route("GET", "search", "find")              # path "find"
    routes.root_route("GET", "home")                   # no segment

REST shortcuts all sit at the resource's own path: ``create`` (POST),
``update`` (PUT), ``patch`` (PATCH), ``destroy`` (DELETE), plus ``index``
(GET) on collections and ``show`` (GET) on items.

Kinds
-----
=====================  ================  ==================
Kind                   Name              Path
=====================  ================  ==================
Namespace/Collection   ``base.name``     ``base/segment``
Item                   ``base.name``     ``base/segment``
Group (all variants)   ``base``          ``base``
CollectionItem         ``base[name]``    ``base/{name}``
=====================  ================  ==================

Collections and collection groups own at most one ``CollectionItemResource``
created by ``items(name, builder)``; it is walked after the ordinary
children.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from resource_routes.exceptions import DuplicateChildError

from .node import ROOT, Node, join_segment
from .route import Route, SubscriptionConfig, SubscriptionRoute

__all__ = [
    "Resource",
    "CollectionResource",
    "ItemResource",
    "NamespaceResource",
    "GroupResource",
    "CollectionItemResource",
    "CollectionGroupResource",
    "ItemGroupResource",
]

RouteBuilder = Callable[[Route], Any]


class Resource(Node):
    """Internal tree node exposing the builder DSL."""

    __slots__ = ("children",)

    def __init__(self, name: str, path: Any = ROOT, parent: Node | None = None) -> None:
        super().__init__(name, path, parent)
        self.children: dict[str, Node] = {}

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------
    def add_child(self, node: Node) -> Node:
        if node.name in self.children:
            raise DuplicateChildError(node.name, self.name)
        self.children[node.name] = node
        return node

    def _add_subresource(
        self,
        factory: type[Resource],
        name: str,
        path_or_builder: Any,
        builder: Callable | None,
    ) -> Any:
        if isinstance(path_or_builder, str) or path_or_builder is ROOT:
            path = path_or_builder
        else:
            path = name
            if path_or_builder is not None:
                builder = path_or_builder
        resource = factory(name, path, self)
        if builder is not None:
            builder(resource)
        return self.add_child(resource)

    def collection(
        self,
        name: str,
        path_or_builder: str | Callable[[CollectionResource], Any] | None = None,
        builder: Callable[[CollectionResource], Any] | None = None,
    ) -> CollectionResource:
        return self._add_subresource(CollectionResource, name, path_or_builder, builder)

    def item(
        self,
        name: str,
        path_or_builder: str | Callable[[ItemResource], Any] | None = None,
        builder: Callable[[ItemResource], Any] | None = None,
    ) -> ItemResource:
        return self._add_subresource(ItemResource, name, path_or_builder, builder)

    def namespace(
        self,
        name: str,
        path_or_builder: str | Callable[[NamespaceResource], Any] | None = None,
        builder: Callable[[NamespaceResource], Any] | None = None,
    ) -> NamespaceResource:
        return self._add_subresource(NamespaceResource, name, path_or_builder, builder)

    def _group_class(self) -> type[GroupResource]:
        return GroupResource

    def group(self, name: str, builder: Callable[[Any], Any] | None = None) -> GroupResource:
        """Add a transparent child: it contributes neither name nor path."""
        resource = self._group_class()(name, ROOT, self)
        if builder is not None:
            builder(resource)
        self.add_child(resource)
        return resource

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------
    def _add_route(self, route: Route, builder: RouteBuilder | None) -> Route:
        if builder is not None:
            builder(route)
        self.add_child(route)
        return route

    def route(
        self,
        method: str,
        name: str,
        path_or_builder: str | RouteBuilder | None = None,
        builder: RouteBuilder | None = None,
    ) -> Route:
        """Add an HTTP route; the path segment defaults to ``name``."""
        if isinstance(path_or_builder, str) or path_or_builder is ROOT:
            path = path_or_builder
        else:
            path = name
            if path_or_builder is not None:
                builder = path_or_builder
        return self._add_route(Route(method, name, path, self), builder)

    def root_route(self, method: str, name: str, builder: RouteBuilder | None = None) -> Route:
        """Add an HTTP route sitting exactly at this resource's path."""
        return self._add_route(Route(method, name, ROOT, self), builder)

    def subscription(
        self,
        name: str,
        config: SubscriptionConfig | Mapping[str, Any] | None = None,
        builder: RouteBuilder | None = None,
    ) -> SubscriptionRoute:
        route = SubscriptionRoute(name, config, self)
        self._add_route(route, builder)
        return route

    def create(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("POST", "create", builder)

    def update(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("PUT", "update", builder)

    def patch(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("PATCH", "patch", builder)

    def destroy(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("DELETE", "destroy", builder)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------
    def iter_routes(self, base_name: str, base_path: str) -> Iterator[tuple[str, str, Route]]:
        for child in self.children.values():
            yield from child.iter_routes(child.join_name(base_name), child.join_path(base_path))


class _CollectionMixin:
    """Shared behaviour of collections and collection groups."""

    __slots__ = ()

    items_resource: CollectionItemResource | None

    def index(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("GET", "index", builder)  # type: ignore[attr-defined]

    def items(
        self, name: str, builder: Callable[[CollectionItemResource], Any] | None = None
    ) -> CollectionItemResource:
        """Return the collection's item resource, creating it on first use.

        Repeated calls run ``builder`` against the same item resource.
        """
        if self.items_resource is None:
            self.items_resource = CollectionItemResource(name, ROOT, self)  # type: ignore[arg-type]
        elif self.items_resource.name != name:
            raise ValueError(
                f"Collection '{self.name}' already has items "  # type: ignore[attr-defined]
                f"'{self.items_resource.name}', cannot add '{name}'"
            )
        if builder is not None:
            builder(self.items_resource)
        return self.items_resource

    def _group_class(self) -> type[GroupResource]:
        return CollectionGroupResource

    def iter_routes(self, base_name: str, base_path: str) -> Iterator[tuple[str, str, Route]]:
        yield from super().iter_routes(base_name, base_path)  # type: ignore[misc]
        node = self.items_resource
        if node is not None:
            yield from node.iter_routes(node.join_name(base_name), node.join_path(base_path))


class _ItemMixin:
    """Shared behaviour of items and item groups."""

    __slots__ = ()

    def show(self, builder: RouteBuilder | None = None) -> Route:
        return self.root_route("GET", "show", builder)  # type: ignore[attr-defined]

    def _group_class(self) -> type[GroupResource]:
        return ItemGroupResource


class NamespaceResource(Resource):
    __slots__ = ()


class CollectionResource(_CollectionMixin, Resource):
    __slots__ = ("items_resource",)

    def __init__(self, name: str, path: Any = ROOT, parent: Node | None = None) -> None:
        super().__init__(name, path, parent)
        self.items_resource = None


class ItemResource(_ItemMixin, Resource):
    __slots__ = ()


class CollectionItemResource(ItemResource):
    """Item addressed through a path parameter named after the item."""

    __slots__ = ()

    def join_name(self, base_name: str) -> str:
        return f"{base_name}[{self.name}]"

    def join_path(self, base_path: str) -> str:
        return join_segment(base_path, f"{{{self.name}}}")


class GroupResource(Resource):
    """Transparent resource used to share options among sibling routes."""

    __slots__ = ()

    def __init__(self, name: str, path: Any = ROOT, parent: Node | None = None) -> None:
        super().__init__(name, ROOT, parent)

    def join_name(self, base_name: str) -> str:
        return base_name

    def join_path(self, base_path: str) -> str:
        return base_path


class CollectionGroupResource(_CollectionMixin, GroupResource):
    __slots__ = ("items_resource",)

    def __init__(self, name: str, path: Any = ROOT, parent: Node | None = None) -> None:
        super().__init__(name, path, parent)
        self.items_resource = None


class ItemGroupResource(_ItemMixin, GroupResource):
    __slots__ = ()
