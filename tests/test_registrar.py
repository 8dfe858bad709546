# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for registering route tables with host servers, including plugins."""

import inspect
import logging

import pytest
from pydantic import ValidationError

from resource_routes import (
    HostInterface,
    MissingController,
    MissingHandler,
    Registrar,
    ResourceRouter,
    RouteRegistration,
    SubscriptionRegistration,
)
from resource_routes.plugins._base_plugin import BasePlugin


class UsersController:
    def index(self, request, h):
        return ["ann", "bob"]

    async def create(self, request, h):
        return {"created": True}

    def show(self, request, h):
        return "ann"


class AuditPlugin(BasePlugin):
    plugin_code = "audit_test"
    plugin_description = "Marks registrations and vetoes one route"

    def configure(self, veto: str = ""):
        pass

    def allow_route(self, registrar, registration):
        return registration.name != self.configuration().get("veto")

    def on_register(self, registrar, registration):
        registration.metadata["audited"] = True


Registrar.register_plugin(AuditPlugin)


def build(routes):
    routes.controller = "users"
    routes.tags = "api"

    def users(users):
        users.index()
        users.create()
        users.items("user", lambda user: user.show())

    routes.collection("users", users)
    routes.namespace("chat", lambda chat: chat.subscription("messages", {"filter": "allow"}))

    def health(route):
        route.tags = "public"
        route.action = lambda request, h: "ok"

    routes.route("GET", "health", health)


class RecordingHost(HostInterface):
    supports_subscriptions = True

    def __init__(self):
        self.routes = []
        self.subscriptions = []

    def route(self, registration):
        self.routes.append(registration)

    def subscription(self, registration):
        self.subscriptions.append(registration)


class RouteOnlyHost(HostInterface):
    def __init__(self):
        self.routes = []

    def route(self, registration):
        self.routes.append(registration)


class AsyncDuckHost:
    def __init__(self):
        self.calls = []

    async def route(self, registration):
        self.calls.append(("route", registration.name))

    async def subscription(self, registration):
        self.calls.append(("subscription", registration.name))


@pytest.fixture
def router():
    return ResourceRouter(base_path="/api").add(build)


@pytest.fixture
def registrar(router):
    return Registrar(router, {"users": UsersController})


class TestRegister:
    @pytest.mark.asyncio
    async def test_routes_reach_host_in_table_order(self, registrar):
        host = RecordingHost()
        registered = await registrar.register(host)

        assert [r.name for r in host.routes] == [
            "users.index",
            "users.create",
            "users[user].show",
            "health",
        ]
        assert [s.name for s in host.subscriptions] == ["chat.messages"]
        assert [r.name for r in registered] == [
            "users.index",
            "users.create",
            "users[user].show",
            "chat.messages",
            "health",
        ]
        show = host.routes[2]
        assert isinstance(show, RouteRegistration)
        assert show.path == "/api/users/{user}"
        assert show.handler(None, None) == "ann"
        assert show.options["tags"] == ["api"]
        assert isinstance(host.subscriptions[0], SubscriptionRegistration)
        assert host.subscriptions[0].path == "/api/chat"

    @pytest.mark.asyncio
    async def test_host_without_subscriptions_skips_them(self, registrar, caplog):
        host = RouteOnlyHost()
        with caplog.at_level(logging.WARNING, logger="resource_routes"):
            registered = await registrar.register(host)
        assert "chat.messages" not in [r.name for r in registered]
        assert len(host.routes) == 4
        assert any("does not support subscriptions" in m for m in caplog.messages)

    @pytest.mark.asyncio
    async def test_duck_typed_async_host(self, registrar):
        host = AsyncDuckHost()
        await registrar.register(host)
        assert ("subscription", "chat.messages") in host.calls
        assert host.calls[0] == ("route", "users.index")

    @pytest.mark.asyncio
    async def test_async_controller_source_loaded_once(self, router):
        calls = []

        async def load_controllers():
            calls.append(1)
            return {"users": UsersController}

        registrar = Registrar(router, load_controllers)
        await registrar.register(RecordingHost())
        await registrar.register(RecordingHost())
        assert calls == [1]
        assert isinstance(registrar.resolve_controller("users"), UsersController)

    @pytest.mark.asyncio
    async def test_missing_controller_aborts(self, router):
        registrar = Registrar(router, {})
        host = RecordingHost()
        with pytest.raises(MissingController):
            await registrar.register(host)
        assert host.routes == []

    @pytest.mark.asyncio
    async def test_absent_handler_warns(self, caplog):
        def posts(posts):
            posts.controller = {}
            posts.index()

        router = ResourceRouter().add(lambda r: r.collection("posts", posts))
        host = RecordingHost()
        with caplog.at_level(logging.WARNING, logger="resource_routes"):
            await Registrar(router).register(host)
        assert host.routes[0].handler is None
        assert any("no handler for action 'index'" in m for m in caplog.messages)

    @pytest.mark.asyncio
    async def test_absent_handler_strict(self):
        router = ResourceRouter().add(lambda r: r.route("GET", "ping"))
        with pytest.raises(MissingHandler) as exc_info:
            await Registrar(router, strict=True).register(RecordingHost())
        assert exc_info.value.name == "ping"
        assert exc_info.value.action == "ping"

    def test_resolve_all_requires_loaded_map(self, router):
        registrar = Registrar(router, lambda: {"users": UsersController})
        with pytest.raises(RuntimeError):
            registrar.resolve_all()

    def test_router_is_required(self):
        with pytest.raises(ValueError):
            Registrar(None)


class TestPluginRegistry:
    def test_builtin_plugins_available(self):
        available = Registrar.available_plugins()
        assert "logging" in available
        assert "filter" in available

    def test_register_plugin_rejects_non_plugins(self):
        with pytest.raises(TypeError):
            Registrar.register_plugin(object)

    def test_register_plugin_requires_code(self):
        class Nameless(BasePlugin):
            pass

        with pytest.raises(ValueError):
            Registrar.register_plugin(Nameless)

    def test_plug_unknown_plugin(self, registrar):
        with pytest.raises(ValueError, match="Unknown plugin"):
            registrar.plug("nope")

    def test_plug_twice(self, registrar):
        registrar.plug("logging")
        with pytest.raises(ValueError, match="already attached"):
            registrar.plug("logging")

    def test_plugin_attribute_access(self, registrar):
        registrar.plug("logging").plug("filter")
        assert registrar.logging.plugin_code == "logging"
        assert [p.name for p in registrar.iter_plugins()] == ["logging", "filter"]
        with pytest.raises(AttributeError):
            registrar.nope

    def test_configure_is_validated(self, registrar):
        registrar.plug("logging")
        with pytest.raises(ValidationError):
            registrar.logging.configure(before="sometimes")

    def test_flags_and_targets(self, registrar):
        registrar.plug("logging", flags="before:off")
        registrar.logging.configure(_target="users.index,users.create", enabled=False)
        assert registrar.get_config("logging")["before"] is False
        assert registrar.get_config("logging", "users.create")["enabled"] is False
        assert not registrar.is_plugin_enabled("users.index", "logging")
        assert registrar.is_plugin_enabled("health", "logging")


class TestLoggingPlugin:
    @pytest.mark.asyncio
    async def test_print_sink(self, registrar, capsys):
        registrar.plug("logging", print=True)
        host = RecordingHost()
        await registrar.register(host)
        assert host.routes[0].handler(None, None) == ["ann", "bob"]
        out = capsys.readouterr().out
        assert "users.index start" in out
        assert "users.index end (" in out

    @pytest.mark.asyncio
    async def test_logger_sink(self, registrar, caplog):
        registrar.plug("logging")
        host = RecordingHost()
        await registrar.register(host)
        with caplog.at_level(logging.INFO, logger="resource_routes"):
            caplog.clear()
            host.routes[0].handler(None, None)
        assert caplog.messages[0] == "users.index start"
        assert caplog.messages[1].startswith("users.index end (")

    @pytest.mark.asyncio
    async def test_coroutine_handler_stays_coroutine(self, registrar, capsys):
        registrar.plug("logging", print=True)
        host = RecordingHost()
        await registrar.register(host)
        create = host.routes[1].handler
        assert inspect.iscoroutinefunction(create)
        assert await create(None, None) == {"created": True}
        assert "users.create end (" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_disabled_route_is_not_wrapped(self, registrar, capsys):
        registrar.plug("logging", print=True)
        registrar.logging.configure(_target="users.index", enabled=False)
        host = RecordingHost()
        await registrar.register(host)
        host.routes[0].handler(None, None)
        host.routes[2].handler(None, None)
        out = capsys.readouterr().out
        assert "users.index" not in out
        assert "users[user].show start" in out

    @pytest.mark.asyncio
    async def test_after_flag_off(self, registrar, capsys):
        registrar.plug("logging", print=True, flags="after:off")
        host = RecordingHost()
        await registrar.register(host)
        host.routes[0].handler(None, None)
        out = capsys.readouterr().out
        assert "users.index start" in out
        assert "end (" not in out


class TestFilterPlugin:
    @pytest.mark.asyncio
    async def test_tag_rule_selects_routes(self, registrar):
        registrar.plug("filter", tags="public")
        host = RecordingHost()
        await registrar.register(host)
        assert [r.name for r in host.routes] == ["health"]
        assert host.subscriptions == []

    @pytest.mark.asyncio
    async def test_route_bucket_overrides_rule(self, registrar):
        registrar.plug("filter", tags="public")
        registrar.filter.configure(_target="users.index", tags="")
        host = RecordingHost()
        await registrar.register(host)
        assert [r.name for r in host.routes] == ["users.index", "health"]

    @pytest.mark.asyncio
    async def test_disabled_filter_lets_everything_through(self, registrar):
        registrar.plug("filter", tags="public", enabled=False)
        host = RecordingHost()
        await registrar.register(host)
        assert len(host.routes) == 4


class TestCustomPlugin:
    @pytest.mark.asyncio
    async def test_on_register_and_veto(self, registrar):
        registrar.plug("audit_test", veto="users.create")
        host = RecordingHost()
        await registrar.register(host)
        assert "users.create" not in [r.name for r in host.routes]
        assert all(r.metadata["audited"] for r in host.routes)
        assert host.subscriptions[0].metadata["audited"] is True
