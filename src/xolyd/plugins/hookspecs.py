# src/xolyd/plugins/hookspecs.py
"""pluggy hook specifications for Xolyd plugins.

Plugin packages implement these hooks to make their plugin classes known
to a host or test harness.

Usage (implementing a plugin package):
    from xolyd.plugins.hookspecs import hookimpl

    class ContactPlugins:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def xolyd_get_plugins(self):
            return [ContactNamePlugin]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from xolyd.plugins.base import BasePlugin

PROJECT_NAME = "xolyd"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class XolydPluginSpec:
    """Hook specifications for host plugins."""

    @hookspec
    def xolyd_get_plugins(self) -> list[type["BasePlugin"]]:  # type: ignore[empty-body]
        """Return plugin classes.

        Returns:
            List of BasePlugin subclasses (not instances)
        """
