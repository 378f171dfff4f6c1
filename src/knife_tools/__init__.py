"""
knife-tools: subcommand discovery and dispatch for a pluggable knife CLI.

Subcommands are Python files shipped in the package, dropped into plugin
directories, or listed in a plugin manifest. knife-tools finds them, loads
them into a registry and resolves the words a user types to a subcommand.

Modules:
    plugins: Manifest handling, loader strategies, registry and matching
    cli: The ``knife-tools`` command
    config: TOML configuration files
    exceptions: Error hierarchy

Quick Start::

    from knife_tools import KnifeContext

    ctx = KnifeContext(config_dir="/etc/chef")
    ctx.list_commands()                          # {"node": [...], ...}
    ctx.command_class_from(["node", "show", "web01"])
    ctx.guess_category(["cookbook", "upload"])   # "cookbook upload"
"""

__version__ = "0.1.0"

from knife_tools.exceptions import ConfigError, KnifeToolsError, LoadError
from knife_tools.plugins import (
    AutoManifestLoader,
    CommandRegistry,
    CustomManifestLoader,
    GlobLoader,
    KnifeContext,
    ManifestResolver,
    SubcommandDescriptor,
    SubcommandLoader,
    for_config,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "KnifeToolsError",
    "ConfigError",
    "LoadError",
    # Discovery
    "KnifeContext",
    "ManifestResolver",
    "SubcommandLoader",
    "GlobLoader",
    "AutoManifestLoader",
    "CustomManifestLoader",
    "for_config",
    "CommandRegistry",
    "SubcommandDescriptor",
]
