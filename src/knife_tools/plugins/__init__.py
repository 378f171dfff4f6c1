"""
Subcommand discovery for knife-tools.

Finds subcommand files (bundled, in plugin directories, or listed in a
plugin manifest), loads them into a CommandRegistry and resolves
command-line words to registered subcommands.
"""

from knife_tools.plugins.context import KnifeContext
from knife_tools.plugins.loaders import (
    AutoManifestLoader,
    CustomManifestLoader,
    GlobLoader,
    ManifestLoader,
    SubcommandLoader,
    for_config,
)
from knife_tools.plugins.manifest import AUTOGENERATED_KEY, ManifestKind, ManifestResolver
from knife_tools.plugins.protocol import Subcommand
from knife_tools.plugins.registry import CommandRegistry, SubcommandDescriptor
from knife_tools.plugins.resolver import CommandResolver, find_longest_key, positional_arguments
from knife_tools.plugins.site import SiteSubcommandLocator

__all__ = [
    "KnifeContext",
    "SubcommandLoader",
    "GlobLoader",
    "ManifestLoader",
    "AutoManifestLoader",
    "CustomManifestLoader",
    "for_config",
    "AUTOGENERATED_KEY",
    "ManifestKind",
    "ManifestResolver",
    "Subcommand",
    "CommandRegistry",
    "SubcommandDescriptor",
    "CommandResolver",
    "find_longest_key",
    "positional_arguments",
    "SiteSubcommandLocator",
]
