"""Rendering of subcommand listings as a table, JSON or YAML."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

import yaml
from rich.console import Console
from rich.table import Table

from knife_tools.plugins.registry import SubcommandDescriptor


def listing_data(by_category: Mapping[str, Sequence[SubcommandDescriptor]]) -> dict[str, list[dict[str, Any]]]:
    """Plain-data form of a category listing, categories sorted."""
    return {
        category: [
            {
                "name": d.name,
                "command": " ".join(d.words),
                "help": d.help,
                "source": d.source,
            }
            for d in sorted(by_category[category], key=lambda d: d.name)
        ]
        for category in sorted(by_category)
    }


def render_listing(
    by_category: Mapping[str, Sequence[SubcommandDescriptor]],
    fmt: str = "table",
    console: Console | None = None,
    prog: str = "knife-tools",
) -> None:
    """Print a category listing in the requested format."""
    data = listing_data(by_category)

    if fmt == "json":
        print(json.dumps(data, indent=2))
        return
    if fmt == "yaml":
        print(yaml.safe_dump(data, sort_keys=False), end="")
        return

    if console is None:
        from knife_tools.cli.utils import get_console

        console = get_console()

    if not data:
        console.print("[yellow]No subcommands found[/yellow]")
        return

    table = Table(title="Available subcommands", show_lines=False)
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Command", style="bold", no_wrap=True)
    table.add_column("Description")

    for category, commands in data.items():
        for i, entry in enumerate(commands):
            table.add_row(
                category if i == 0 else "",
                f"{prog} {entry['command']}",
                entry["help"],
            )

    console.print(table)
