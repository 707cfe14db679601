"""Tests for PluginManager — registration, discovery, and hook dispatch."""

from __future__ import annotations

from unittest.mock import patch

from milaan.plugins import PluginManager, hookimpl
from milaan.plugins.manager import _has_hook_impls


class _CountingPlugin:
    def __init__(self) -> None:
        self.calls = 0

    @hookimpl
    def post_register(self, user_id: str, role: str) -> None:
        self.calls += 1


class _NoHooks:
    def helper(self) -> None:
        pass


class _BrokenInit:
    def __init__(self) -> None:
        raise RuntimeError("cannot build")

    @hookimpl
    def post_register(self, user_id: str, role: str) -> None:
        pass


class TestRegistration:
    def test_register_and_dispatch(self) -> None:
        pm = PluginManager()
        plugin = _CountingPlugin()
        pm.register_plugin(plugin)
        pm.hook.post_register(user_id="user_5", role="helper")
        assert plugin.calls == 1
        assert "_CountingPlugin" in pm.list_plugin_names()

    def test_explicit_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_CountingPlugin(), name="counter")
        assert pm.list_plugin_names() == ["counter"]

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = _CountingPlugin()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        pm.hook.post_register(user_id="user_5", role="helper")
        assert plugin.calls == 0
        assert pm.get_plugins() == []

    def test_no_plugins_dispatch_is_empty(self) -> None:
        assert PluginManager().dispatch("post_upvote", problem_id="problem_1", user_id="u") == []

    def test_dispatch_by_name(self) -> None:
        pm = PluginManager()
        plugin = _CountingPlugin()
        pm.register_plugin(plugin)
        pm.dispatch("post_register", user_id="user_5", role="asker")
        pm.dispatch("post_register", user_id="user_6", role="asker")
        assert plugin.calls == 2


class TestDiscovery:
    def test_discovery_without_entry_points(self) -> None:
        pm = PluginManager()
        with patch.object(pm._pm, "load_setuptools_entrypoints", return_value=0):
            assert pm.discover_and_load() == []

    def test_entry_point_classes_instantiated(self) -> None:
        pm = PluginManager()

        def fake_load(group: str) -> int:
            assert group == "milaan.plugins"
            pm._pm.register(_CountingPlugin, name="counting")
            return 1

        with patch.object(pm._pm, "load_setuptools_entrypoints", side_effect=fake_load):
            names = pm.discover_and_load()

        assert names == ["counting"]
        (plugin,) = pm.get_plugins()
        assert isinstance(plugin, _CountingPlugin)

    def test_broken_plugin_class_dropped(self) -> None:
        pm = PluginManager()

        def fake_load(group: str) -> int:
            pm._pm.register(_BrokenInit, name="broken")
            return 1

        with patch.object(pm._pm, "load_setuptools_entrypoints", side_effect=fake_load):
            names = pm.discover_and_load()

        assert names == []


class TestHasHookImpls:
    def test_marked_class(self) -> None:
        assert _has_hook_impls(_CountingPlugin)

    def test_plain_class(self) -> None:
        assert not _has_hook_impls(_NoHooks)
