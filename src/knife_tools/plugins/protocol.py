"""Subcommand protocol for knife plugins.

Defines the interface that subcommand classes in plugin files implement.
When a plugin file is loaded, every class in it that satisfies this
protocol is registered under its ``name``.

Usage:
    # ~/.chef/plugins/knife/node_show.py
    import argparse


    class NodeShow:
        name = "node_show"
        category = "node"
        help = "Show a single node"

        @staticmethod
        def add_arguments(parser: argparse.ArgumentParser) -> None:
            parser.add_argument("node", help="Node name")

        @staticmethod
        def run(args: argparse.Namespace) -> int:
            print(f"showing {args.node}")
            return 0
"""

import argparse
from typing import Protocol, runtime_checkable


@runtime_checkable
class Subcommand(Protocol):
    """Protocol for knife subcommands.

    Attributes:
        name: Registry key; words joined by underscores (e.g. "node_show").
        help: One-line description shown in command listings.

    A class may also set ``category``; when it is missing the first word
    of ``name`` is used (``node_show`` is listed under ``node``).

    Methods:
        add_arguments: Register arguments on the provided parser.
        run: Execute the command with the parsed argument namespace.
    """

    name: str
    help: str

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments to the parser.

        Args:
            parser: The argparse parser for this subcommand.
        """
        ...

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        """Execute the command.

        Args:
            args: Parsed arguments. ``args.context`` holds the KnifeContext
                  and ``args.format`` the requested output format.

        Returns:
            Exit code (0 for success, non-zero for errors).
        """
        ...


def is_subcommand_class(obj: object) -> bool:
    """Return True if obj is a class implementing the Subcommand protocol."""
    return (
        isinstance(obj, type)
        and obj is not Subcommand
        and isinstance(getattr(obj, "name", None), str)
        and hasattr(obj, "help")
        and hasattr(obj, "add_arguments")
        and hasattr(obj, "run")
    )


def category_of(cls: type) -> str:
    """Category a subcommand class is listed under."""
    category = getattr(cls, "category", None)
    if category:
        return category
    return cls.name.split("_")[0]
