# src/xolyd/plugins/manager.py
"""Plugin manager for discovery, registration and lookup.

Uses pluggy for hook-based plugin registration.
"""

from dataclasses import dataclass
from typing import Any

import pluggy

from xolyd.plugins.base import BasePlugin
from xolyd.plugins.hookspecs import PROJECT_NAME, XolydPluginSpec, hookimpl


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin class."""

    name: str
    version: str
    expected_entity: str | None
    expected_messages: tuple[str, ...]
    run_as_system: bool

    @classmethod
    def from_plugin(cls, plugin_cls: type[BasePlugin]) -> "PluginSpec":
        return cls(
            name=plugin_cls.name,
            version=plugin_cls.plugin_version,
            expected_entity=plugin_cls.expected_entity,
            expected_messages=tuple(plugin_cls.expected_messages),
            run_as_system=plugin_cls.run_as_system,
        )

    def accepts(self, entity_name: str, message_name: str) -> bool:
        """Whether the plugin's entry guard would let this operation through."""
        if self.expected_entity and self.expected_entity != entity_name:
            return False
        return not self.expected_messages or message_name in self.expected_messages


def create_dynamic_hookimpl(plugin_classes: list[type[BasePlugin]]) -> object:
    """Create a pluggy hookimpl object returning the given plugin classes.

    Lets callers register plain classes without writing a hook implementer.
    """

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

        @hookimpl
        def xolyd_get_plugins(self) -> list[type[BasePlugin]]:
            return plugin_classes

    return DynamicHookImpl()


class PluginManager:
    """Manages plugin registration and lookup.

    Usage:
        manager = PluginManager()
        manager.register(ContactPlugins())
        manager.register_classes([AccountPlugin])

        plugin_cls = manager.get_plugin_by_name("contact_name")
        for plugin_cls in manager.plugins_for("contact", "Update"):
            plugin_cls(config).execute(service_provider)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(XolydPluginSpec)
        self._plugins: dict[str, type[BasePlugin]] = {}

    def register(self, plugin: Any) -> None:
        """Register a hook implementer.

        Raises:
            ValueError: If it contributes a plugin name that is already registered.
            TypeError: If it contributes something that is not a BasePlugin subclass.
        """
        self._pm.register(plugin)
        try:
            self._refresh_cache()
        except (TypeError, ValueError):
            self._pm.unregister(plugin)
            raise

    def register_classes(self, plugin_classes: list[type[BasePlugin]]) -> None:
        self.register(create_dynamic_hookimpl(plugin_classes))

    def _refresh_cache(self) -> None:
        # Collect everything first so a bad registration leaves the cache untouched
        new_plugins: dict[str, type[BasePlugin]] = {}
        for plugin_classes in self._pm.hook.xolyd_get_plugins():
            for cls in plugin_classes:
                if not (isinstance(cls, type) and issubclass(cls, BasePlugin)):
                    raise TypeError(f"Registered plugin {cls!r} is not a BasePlugin subclass")
                name = getattr(cls, "name", None)
                if not name:
                    raise TypeError(f"Plugin class {cls.__name__} does not declare a name")
                if name in new_plugins:
                    raise ValueError(f"Duplicate plugin name: '{name}'. Already registered by {new_plugins[name].__name__}")
                new_plugins[name] = cls
        self._plugins = new_plugins

    # === Getters ===

    def get_plugins(self) -> list[type[BasePlugin]]:
        """Get all registered plugins."""
        return list(self._plugins.values())

    def get_plugin_by_name(self, name: str) -> type[BasePlugin] | None:
        return self._plugins.get(name)

    def get_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(cls) for cls in self._plugins.values()]

    def plugins_for(self, entity_name: str, message_name: str) -> list[type[BasePlugin]]:
        """Plugins whose entry guard accepts the given record type and message."""
        return [cls for cls in self._plugins.values() if PluginSpec.from_plugin(cls).accepts(entity_name, message_name)]
