"""Plugin discovery and loading.

Discovery: entry points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery of single-file plugins. Loaded plugins only
contribute rules; they are installed into a registry with
:meth:`PluginManager.install_rules`.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from fieldguard.errors import RegistryError
from fieldguard.plugins.hookspecs import PROJECT_NAME, FieldguardHookSpec

if TYPE_CHECKING:
    from fieldguard.engine.registry import RuleRegistry

ENTRY_POINT_GROUP = "fieldguard.rules"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages rule plugin discovery, loading, and installation."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FieldguardHookSpec)

    def discover_and_load(
        self,
        *,
        local_dir: Path | None = None,
        entry_points: bool = True,
    ) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Uses pluggy's native setuptools entry_point discovery for the
        ``fieldguard.rules`` group (unless *entry_points* is False), then
        scans *local_dir* for single-file Python plugins.

        Returns a list of loaded plugin names.
        """
        if entry_points:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
            self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Rule installation
    # ------------------------------------------------------------------

    def install_rules(self, registry: RuleRegistry, *, override: bool = False) -> list[str]:
        """Register every plugin-provided validator and filter into *registry*.

        A broken plugin or a conflicting rule name is logged and skipped;
        the remaining rules are still installed.

        Returns the names of the rules that were installed.
        """
        installed: list[str] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            for hook_name, register in (
                ("fieldguard_validators", registry.register_validator),
                ("fieldguard_filters", registry.register_filter),
            ):
                rules = self._collect(plugin, plugin_name, hook_name)
                for rule_name, fn in rules.items():
                    try:
                        register(rule_name, fn, override=override)
                    except (RegistryError, TypeError):
                        logger.warning(
                            "Skipping rule %r from plugin %s",
                            rule_name,
                            plugin_name,
                            exc_info=True,
                        )
                        continue
                    installed.append(rule_name)
        if installed:
            logger.debug("Installed plugin rules: %s", ", ".join(installed))
        return installed

    @staticmethod
    def _collect(
        plugin: object, plugin_name: str, hook_name: str
    ) -> dict[str, Callable[..., Any]]:
        """Call one rule hook on a single plugin, tolerating failures."""
        hook = getattr(plugin, hook_name, None)
        if hook is None:
            return {}

        try:
            rules = hook()
        except Exception:
            logger.warning(
                "Failed to collect %s from plugin %s",
                hook_name,
                plugin_name,
                exc_info=True,
            )
            return {}

        if rules is None:
            return {}
        if not isinstance(rules, dict):
            logger.warning("Plugin %s returned non-dict from %s", plugin_name, hook_name)
            return {}
        return rules

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised.
        """
        if not local_dir.is_dir():
            logger.warning("Plugin directory %s does not exist", local_dir)
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"fieldguard_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly, leaving
        ``self`` unbound when its hooks are called.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* defines at least one hookimpl-decorated method."""
        marker = f"{PROJECT_NAME}_impl"
        return any(
            hasattr(getattr(cls, name, None), marker)
            for name in dir(cls)
            if not name.startswith("__")
        )
