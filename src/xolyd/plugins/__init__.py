"""Plugin system: host-invoked plugins registered via pluggy.

- Base class: entry guard and context dump around the plugin's handler
- Manager: registration and lookup by name or by (entity, message)
- Hookspecs: pluggy hook definitions
- Relationships: parent/child lookups through the traced Context
"""

from xolyd.plugins.base import BasePlugin
from xolyd.plugins.hookspecs import hookimpl, hookspec
from xolyd.plugins.manager import PluginManager, PluginSpec, create_dynamic_hookimpl
from xolyd.plugins.relationships import get_child_entities, get_parent_entity

__all__ = [
    "BasePlugin",
    "PluginManager",
    "PluginSpec",
    "create_dynamic_hookimpl",
    "get_child_entities",
    "get_parent_entity",
    "hookimpl",
    "hookspec",
]
