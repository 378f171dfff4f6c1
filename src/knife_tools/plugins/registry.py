"""Command registry for knife subcommands.

Holds every subcommand registered by loaded plugin files, keyed by name,
and the derived grouping by category used for help listings.

Usage:
    from knife_tools.plugins.registry import CommandRegistry

    registry = CommandRegistry()
    registry.populate(["/home/me/.chef/plugins/knife/node_show.py"])

    registry.subcommands["node_show"]
    registry.subcommands_by_category["node"]
"""

from __future__ import annotations

import importlib.util
import logging
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from knife_tools.exceptions import LoadError
from knife_tools.plugins.protocol import category_of, is_subcommand_class

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubcommandDescriptor:
    """A registered subcommand.

    Attributes:
        name: Registry key (e.g. "node_show")
        category: Listing group (e.g. "node")
        source: Path of the file that registered it, if any
        implementation: The Subcommand class
    """

    name: str
    category: str
    source: str | None
    implementation: Any

    @property
    def help(self) -> str:
        return getattr(self.implementation, "help", "") or ""

    @property
    def words(self) -> list[str]:
        """Name as typed on the command line ("node_show" -> ["node", "show"])."""
        return self.name.split("_")


class CommandRegistry:
    """Mapping of subcommand names and categories to descriptors.

    Population runs at most once per registry: the first call to
    populate() executes the candidate files and later calls return
    immediately. Each file is executed at most once even if population is
    retried after a failure.
    """

    def __init__(self) -> None:
        self._subcommands: dict[str, SubcommandDescriptor] = {}
        self._loaded_files: set[str] = set()
        self._populated = False
        self._lock = threading.Lock()

    @property
    def subcommands(self) -> dict[str, SubcommandDescriptor]:
        return self._subcommands

    @property
    def subcommands_by_category(self) -> dict[str, list[SubcommandDescriptor]]:
        """Descriptors grouped by category, in registration order."""
        by_category: dict[str, list[SubcommandDescriptor]] = {}
        for descriptor in self._subcommands.values():
            by_category.setdefault(descriptor.category, []).append(descriptor)
        return by_category

    @property
    def populated(self) -> bool:
        return self._populated

    def register(
        self,
        name: str,
        category: str,
        implementation: Any,
        source: str | None = None,
    ) -> SubcommandDescriptor:
        """Register a subcommand under name.

        A name that is already registered is replaced by the newer
        implementation.
        """
        previous = self._subcommands.get(name)
        if previous is not None and previous.implementation is not implementation:
            logger.warning(
                f"Subcommand '{name}' from {source} replaces the one from {previous.source}"
            )
        descriptor = SubcommandDescriptor(
            name=name, category=category, source=source, implementation=implementation
        )
        self._subcommands[name] = descriptor
        return descriptor

    def register_class(self, cls: type, source: str | None = None) -> SubcommandDescriptor:
        """Register a class implementing the Subcommand protocol."""
        return self.register(cls.name, category_of(cls), cls, source)

    def populate(self, files: Iterable[str]) -> bool:
        """Load every file once and register the subcommands it defines.

        Args:
            files: Candidate subcommand files, in load order

        Returns:
            True once the registry is populated

        Raises:
            LoadError: If a file raises while executing. Files after it
                are not loaded and the registry stays partially populated.
        """
        with self._lock:
            if self._populated:
                return True
            for path in files:
                self.load_file(path)
            self._populated = True
            return True

    def load_file(self, path: str) -> list[SubcommandDescriptor]:
        """Execute a subcommand file and register the classes it defines.

        Returns the descriptors registered by this file; an empty list if
        the file was already loaded.
        """
        key = str(Path(path).resolve())
        if key in self._loaded_files:
            return []
        self._loaded_files.add(key)

        logger.debug(f"Loading subcommand file {path}")
        module = _execute_file(path)

        registered = []
        # Definition order
        for obj in list(vars(module).values()):
            # Skip classes imported from elsewhere
            if is_subcommand_class(obj) and obj.__module__ == module.__name__:
                registered.append(self.register_class(obj, source=str(path)))
        if not registered:
            logger.debug(f"No subcommands defined in {path}")
        return registered


def _execute_file(path: str) -> Any:
    """Import a Python source file as a fresh module."""
    module_name = f"knife_tools.plugins.loaded.{Path(path).stem}_{abs(hash(path)):x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise LoadError(
            f"Cannot load subcommand file {path}",
            path=path,
            suggestions=["Subcommand files must be Python sources ending in .py"],
        )
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise LoadError(
            f"Subcommand file raised {type(e).__name__}: {e}",
            path=path,
        ) from e
    return module
