"""
Subcommand loader strategies.

A loader decides which files to execute to fill the command registry and
answers lookups against it once filled:

    loader = for_config(config_dir, resolver=resolver, registry=registry)
    loader.list_commands()                       # {"node": [...], ...}
    loader.command_class_from(["node", "show"])  # SubcommandDescriptor
    loader.guess_category(["node"])              # "node"

Three strategies exist:

    GlobLoader          - scans the bundled and plugin directories
    AutoManifestLoader  - reads paths from an autogenerated manifest
    CustomManifestLoader - reads paths from a user-written manifest

Loading is all-or-nothing per process: every lookup loads the full
candidate set (once) rather than just the file for the requested command.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Sequence

from knife_tools.config import BUNDLED_DIR
from knife_tools.exceptions import ConfigError
from knife_tools.plugins.manifest import AUTOGENERATED_KEY, ManifestKind, ManifestResolver
from knife_tools.plugins.registry import CommandRegistry, SubcommandDescriptor
from knife_tools.plugins.resolver import CommandResolver, find_longest_key, positional_arguments
from knife_tools.plugins.site import SiteSubcommandLocator, glob_subcommands
from knife_tools.utils import unique

logger = logging.getLogger(__name__)

__all__ = [
    "SubcommandLoader",
    "GlobLoader",
    "ManifestLoader",
    "AutoManifestLoader",
    "CustomManifestLoader",
    "for_config",
    "manifest_for",
]


class SubcommandLoader(ABC):
    """Base class for loader strategies.

    Subclasses provide subcommand_files(); loading and lookups are shared.

    Attributes:
        config_dir: Extra configuration directory, or None
        env: Environment mapping (never modified)
        registry: Registry filled by load_commands()
    """

    def __init__(
        self,
        config_dir: str | None,
        env: Mapping[str, str] | None = None,
        registry: CommandRegistry | None = None,
    ):
        self.config_dir = config_dir
        self.env = os.environ if env is None else env
        self.registry = registry if registry is not None else CommandRegistry()

    @abstractmethod
    def subcommand_files(self) -> list[str]:
        """Ordered, deduplicated list of files that could be loaded."""

    def load_commands(self) -> bool:
        """Load all subcommand files into the registry.

        Raises:
            LoadError: If a file raises while executing
        """
        return self.registry.populate(self.subcommand_files())

    def load_command(self, command_args: Sequence[str]) -> bool:
        # Loads everything; a category listing needs the full set anyway.
        return self.load_commands()

    def list_commands(self, category: str | None = None) -> dict[str, list[SubcommandDescriptor]]:
        """Commands grouped by category, optionally just one category.

        An unknown category returns the full listing.
        """
        self.load_commands()
        by_category = self.registry.subcommands_by_category
        if category and category in by_category:
            return {category: by_category[category]}
        return by_category

    def command_class_from(self, args: Sequence[str]) -> SubcommandDescriptor | None:
        """The subcommand named by the leading positional words of args."""
        self.load_command(args)
        name = self._resolver().command_name_from(args)
        if name is None:
            return None
        return self.registry.subcommands[name]

    def guess_category(self, args: Sequence[str]) -> str | None:
        """The category named by the leading positional words of args."""
        self.load_commands()
        return self._resolver().guess_category(args)

    def _resolver(self) -> CommandResolver:
        return CommandResolver(self.registry.subcommands, self.registry.subcommands_by_category)

    # Kept on the loader for callers that use them directly
    find_longest_key = staticmethod(find_longest_key)
    positional_arguments = staticmethod(positional_arguments)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config_dir={self.config_dir!r})"


class GlobLoader(SubcommandLoader):
    """Finds subcommand files by scanning directories.

    Search order: the bundled directory, ``<config_dir>/plugins/knife``,
    ``<home>/.chef/plugins/knife``.
    """

    def __init__(
        self,
        config_dir: str | None,
        env: Mapping[str, str] | None = None,
        registry: CommandRegistry | None = None,
        bundled_dir: str | os.PathLike | None = BUNDLED_DIR,
        home_var: str = "HOME",
    ):
        super().__init__(config_dir, env, registry)
        self.bundled_dir = bundled_dir
        self.home_var = home_var

    def bundled_subcommands(self) -> list[str]:
        if self.bundled_dir is None:
            return []
        return glob_subcommands(self.bundled_dir)

    def site_subcommands(self) -> list[str]:
        return SiteSubcommandLocator(self.config_dir, self.env, self.home_var).subcommand_files()

    def subcommand_files(self) -> list[str]:
        return unique(self.bundled_subcommands() + self.site_subcommands())


class ManifestLoader(SubcommandLoader):
    """Takes subcommand file paths from a parsed plugin manifest.

    The paths are used as written; the filesystem is not consulted.
    """

    def __init__(
        self,
        config_dir: str | None,
        manifest: Mapping[str, Any],
        env: Mapping[str, str] | None = None,
        registry: CommandRegistry | None = None,
    ):
        super().__init__(config_dir, env, registry)
        self.manifest = manifest

    def subcommand_files(self) -> list[str]:
        return unique(self.manifest_paths())

    @abstractmethod
    def manifest_paths(self) -> list[str]:
        """Paths listed by the manifest, in manifest order."""

    def _autogenerated_paths(self) -> list[str]:
        paths = self.manifest[AUTOGENERATED_KEY]
        if not isinstance(paths, list):
            raise ConfigError(
                f"Manifest key '{AUTOGENERATED_KEY}' must be a list of paths",
                context={"got": type(paths).__name__},
                suggestions=["Run 'knife-tools rehash' to regenerate the manifest"],
            )
        return [_check_path(path, AUTOGENERATED_KEY) for path in paths]


class AutoManifestLoader(ManifestLoader):
    """Loads the file list written by ``knife-tools rehash``."""

    def manifest_paths(self) -> list[str]:
        if AUTOGENERATED_KEY not in self.manifest:
            raise ConfigError(
                f"Autogenerated manifest has no '{AUTOGENERATED_KEY}' key",
                context={"keys": ", ".join(sorted(self.manifest)) or "(none)"},
            )
        return self._autogenerated_paths()


class CustomManifestLoader(ManifestLoader):
    """Loads file paths from user-declared groupings.

    Every key other than the reserved one is a grouping. Accepted shapes::

        {"extras": ["/opt/knife/a.py", "/opt/knife/b.py"]}
        {"node": {"show": ["/opt/knife/node_show.py"]}}
        {"plugins": {"knife-ec2": {"paths": ["/opt/ec2/server_create.py"]}}}
    """

    def manifest_paths(self) -> list[str]:
        paths: list[str] = []
        if AUTOGENERATED_KEY in self.manifest:
            paths.extend(self._autogenerated_paths())
        for key, value in self.manifest.items():
            if key == AUTOGENERATED_KEY:
                continue
            paths.extend(_flatten_grouping(key, value))
        return paths


def _flatten_grouping(key: str, value: Any) -> list[str]:
    if isinstance(value, list):
        return [_check_path(path, key) for path in value]
    if not isinstance(value, dict):
        raise ConfigError(
            f"Manifest grouping '{key}' must be a list or an object",
            context={"got": type(value).__name__},
        )

    paths = []
    for group, entry in value.items():
        where = f"{key}.{group}"
        if isinstance(entry, dict):
            if "paths" not in entry:
                raise ConfigError(
                    f"Manifest grouping '{where}' has no 'paths' list",
                    suggestions=[f'Use {{"paths": [...]}} for "{group}"'],
                )
            entry = entry["paths"]
            where = f"{where}.paths"
        if not isinstance(entry, list):
            raise ConfigError(
                f"Manifest grouping '{where}' must be a list of paths",
                context={"got": type(entry).__name__},
            )
        paths.extend(_check_path(path, where) for path in entry)
    return paths


def _check_path(path: Any, where: str) -> str:
    if not isinstance(path, str):
        raise ConfigError(
            f"Manifest entry under '{where}' is not a path",
            context={"value": repr(path)},
        )
    return path


def for_config(
    config_dir: str | None,
    *,
    resolver: ManifestResolver | None = None,
    registry: CommandRegistry | None = None,
    bundled_dir: str | os.PathLike | None = BUNDLED_DIR,
    env: Mapping[str, str] | None = None,
) -> SubcommandLoader:
    """Pick the loader strategy for the current manifest state.

    Args:
        config_dir: Extra configuration directory, or None
        resolver: Manifest resolver; built from env when omitted
        registry: Registry the loader fills
        bundled_dir: Directory of subcommands shipped with the tool
        env: Environment mapping; defaults to the resolver's

    Raises:
        ConfigError: If the manifest exists but cannot be parsed
    """
    if resolver is None:
        resolver = ManifestResolver(env)
    if env is None:
        env = resolver.env

    kind = resolver.classify()
    logger.debug(f"Plugin manifest state: {kind.value}")

    if kind is ManifestKind.AUTOGENERATED:
        return AutoManifestLoader(config_dir, resolver.manifest(), env, registry)
    if kind is ManifestKind.CUSTOM:
        return CustomManifestLoader(config_dir, resolver.manifest(), env, registry)
    return GlobLoader(config_dir, env, registry, bundled_dir=bundled_dir, home_var=resolver.home_var)


def manifest_for(files: Sequence[str | Path]) -> dict[str, list[str]]:
    """Autogenerated manifest content listing files."""
    return {AUTOGENERATED_KEY: [str(path) for path in unique(files)]}
