"""List available subcommands, optionally for one category."""

import argparse

from knife_tools.cli.listing import render_listing


class Help:
    name = "help"
    category = "help"
    help = "List available subcommands"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "category",
            nargs="*",
            help="Only list this category (e.g. 'cookbook upload')",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        ctx = args.context
        category = ctx.guess_category(args.category) if args.category else None
        render_listing(ctx.list_commands(category), args.format)
        return 0
