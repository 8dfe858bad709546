# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""Tests for option and list inheritance across tree nodes."""

import pytest

from resource_routes import ResourceRouter
from resource_routes.core.inherited import InheritedList, InheritedOptions


class TestInheritedOptions:
    def test_lookup_falls_through_to_ancestor(self):
        root = InheritedOptions()
        root.set("auth", "session")
        child = InheritedOptions(InheritedOptions(root))
        assert child.get("auth") == "session"
        assert "auth" in child
        assert not child.has_own("auth")

    def test_child_write_shadows_only_its_subtree(self):
        root = InheritedOptions()
        root.set("auth", "session")
        left = InheritedOptions(root)
        right = InheritedOptions(root)
        left.set("auth", "admin")
        assert left.get("auth") == "admin"
        assert right.get("auth") == "session"
        assert root.get("auth") == "session"

    def test_explicit_none_shadows_parent(self):
        root = InheritedOptions()
        root.set("validate_payload", "schema")
        child = InheritedOptions(root)
        child.set("validate_payload", None)
        assert child.get("validate_payload") is None
        child.unset("validate_payload")
        assert child.get("validate_payload") == "schema"

    def test_missing_value_returns_default(self):
        options = InheritedOptions()
        assert options.get("controller") is None
        assert options.get("controller", "fallback") == "fallback"

    def test_unknown_key_rejected(self):
        with pytest.raises(KeyError):
            InheritedOptions().set("colour", "red")


class TestInheritedList:
    def test_ancestor_items_come_first(self):
        root = InheritedList(items=["api"])
        middle = InheritedList(root).add("users")
        leaf = InheritedList(middle).add("read", "list")
        assert leaf.all() == ["api", "users", "read", "list"]
        assert middle.all() == ["api", "users"]
        assert len(leaf) == 4
        assert "users" in leaf

    def test_replace_keeps_ancestors(self):
        root = InheritedList(items=["api"])
        child = InheritedList(root, ["old"])
        child.replace(["new"])
        assert child == ["api", "new"]
        assert child.own() == ["new"]

    def test_parent_changes_are_visible(self):
        root = InheritedList()
        child = InheritedList(root)
        root.add("late")
        assert list(child) == ["late"]


class TestNodeInheritance:
    def test_scalars_override_and_lists_accumulate(self):
        router = ResourceRouter()
        captured = {}

        def users(users):
            users.auth = "session"
            users.tags = ["users"]

            def admin(admin):
                admin.auth = "admin"
                admin.tags.add("admin")
                captured["update"] = admin.update()

            users.group("admin", admin)
            captured["index"] = users.index()

        router.tags = "api"
        router.collection("users", users)

        assert captured["update"].auth == "admin"
        assert captured["index"].auth == "session"
        assert captured["update"].tags.all() == ["api", "users", "admin"]
        assert captured["index"].tags.all() == ["api", "users"]

    def test_validate_proxy_reads_and_writes_options(self):
        router = ResourceRouter()
        users = router.collection("users")
        users.validate.payload = "user-schema"
        create = users.create()
        assert create.validate.payload == "user-schema"
        create.validate.payload = None
        assert create.validate.payload is None
        assert users.validate.payload == "user-schema"
        assert create.validate.to_dict() == {
            "params": None,
            "query": None,
            "response": None,
            "payload": None,
        }

    def test_validate_proxy_rejects_unknown_slot(self):
        router = ResourceRouter()
        with pytest.raises(AttributeError):
            router.validate.headers = "nope"

    def test_pre_hooks_accumulate(self):
        def load_session(request, h):
            return None

        def load_user(request, h):
            return None

        router = ResourceRouter()
        router.pre = load_session
        users = router.collection("users")
        users.pre.add({"method": load_user, "assign": "user"})
        show = users.items("user").show()
        assert show.pre.all() == [load_session, {"method": load_user, "assign": "user"}]
