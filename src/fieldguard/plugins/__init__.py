"""Plugin system: rule catalogs contributed via pluggy.

Plugin authors decorate methods with :data:`hookimpl` and either publish
the class under the ``fieldguard.rules`` entry-point group or drop a
single-file module into a local plugins directory.
"""

from fieldguard.plugins.hookspecs import hookimpl, hookspec
from fieldguard.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl", "hookspec"]
