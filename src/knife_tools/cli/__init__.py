"""
Command-line interface for knife-tools.

Every subcommand is a plugin: the words typed after the global options
are matched against the registered subcommands (longest match wins) and
the rest of the line is handed to the subcommand's own parser:

    knife-tools help [category]        - List available subcommands
    knife-tools rehash                 - Write the plugin manifest
    knife-tools config show            - Show effective configuration
    knife-tools config init            - Create a template config file

Subcommand files are picked up from:
    <package>/bundled/*.py
    <config_dir>/plugins/knife/*.py
    ~/.chef/plugins/knife/*.py
or from ~/.chef/plugin_manifest.json when it exists.

Examples:
    knife-tools help
    knife-tools --format json help config
    knife-tools --config-dir /etc/chef node show web01 -a ipaddress
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from knife_tools import __version__
from knife_tools.cli.listing import render_listing
from knife_tools.cli.utils import get_console, get_error_console, print_error
from knife_tools.config import OUTPUT_FORMATS, Config
from knife_tools.exceptions import KnifeToolsError
from knife_tools.plugins.context import KnifeContext
from knife_tools.plugins.registry import SubcommandDescriptor

__all__ = ["main", "build_parser", "run_subcommand", "command_argv"]

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "KNIFE_TOOLS_LOG_LEVEL"
LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

PROG = "knife-tools"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Pluggable knife command runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"{PROG} {__version__}")
    parser.add_argument(
        "--config-dir",
        default=None,
        help="Configuration directory; plugins are read from <dir>/plugins/knife/",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format for listings (default from config: table)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help=f"Log level (default from ${LOG_LEVEL_ENV} or config)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--debug", action="store_true", help="Show tracebacks on errors")
    parser.add_argument(
        "words",
        nargs=argparse.REMAINDER,
        metavar="<command> ...",
        help="Subcommand words followed by the subcommand's arguments",
    )
    return parser


def _configure_logging(
    cli_level: Optional[str],
    verbose: bool,
    cfg_level: Optional[str],
    env: Optional[dict] = None,
    cfg_verbose: bool = False,
    cfg_quiet: bool = False,
) -> None:
    # Precedence: --verbose > --log-level > env > config verbose/quiet > config level > WARNING
    env = os.environ if env is None else env
    if verbose:
        level_name = "DEBUG"
    else:
        level_name = (
            (cli_level or "").strip()
            or (env.get(LOG_LEVEL_ENV) or "").strip()
            or ("DEBUG" if cfg_verbose else "")
            or ("ERROR" if cfg_quiet else "")
            or (cfg_level or "").strip()
            or "WARNING"
        )
    level = getattr(logging, level_name.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for knife-tools CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = Config.load()
    except KnifeToolsError as e:
        print_error(e, verbose=args.debug)
        return 1

    _configure_logging(
        args.log_level,
        args.verbose,
        config.logging.level,
        cfg_verbose=config.defaults.verbose,
        cfg_quiet=config.defaults.quiet,
    )

    ctx = KnifeContext.from_config(
        config,
        config_dir=args.config_dir,
        output_format=args.format,
    )

    try:
        return run_subcommand(ctx, args.words)
    except KnifeToolsError as e:
        print_error(e, verbose=args.debug)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


def run_subcommand(ctx: KnifeContext, words: Sequence[str]) -> int:
    """Resolve words to a subcommand and run it.

    Returns the subcommand's exit code, or 1 after printing a listing when
    nothing matches.
    """
    words = list(words)
    console = get_console()
    err = get_error_console()

    if not words:
        err.print(f"Usage: {PROG} <command> [args...]\n")
        render_listing(ctx.list_commands(), ctx.output_format, console, prog=PROG)
        return 1

    descriptor = ctx.command_class_from(words)
    if descriptor is not None:
        return _run_descriptor(ctx, descriptor, command_argv(words, descriptor))

    category = ctx.guess_category(words)
    if category is not None:
        logger.debug(f"No subcommand for {words}; listing category '{category}'")
        err.print(f"{PROG} {category}: no subcommand given\n")
        render_listing(ctx.list_commands(category), ctx.output_format, console, prog=PROG)
        return 1

    err.print(f"[red]Unknown command:[/red] {' '.join(words)}\n")
    err.print(f"Usage: {PROG} <command> [args...]\n")
    render_listing(ctx.list_commands(), ctx.output_format, console, prog=PROG)
    return 1


def command_argv(words: Sequence[str], descriptor: SubcommandDescriptor) -> list[str]:
    """The arguments left for the subcommand once its name words are removed.

    Each name word is consumed once, wherever it appears, so flags given
    between the words are kept. A leading hyphenated name
    (``cookbook-upload``) is consumed as a whole.
    """
    remaining = descriptor.words
    rest = []
    for i, word in enumerate(words):
        if i == 0 and word.replace("-", "_") == descriptor.name:
            remaining = []
            continue
        if word in remaining:
            remaining.remove(word)
            continue
        rest.append(word)
    return rest


def _run_descriptor(ctx: KnifeContext, descriptor: SubcommandDescriptor, argv: list[str]) -> int:
    impl = descriptor.implementation
    parser = argparse.ArgumentParser(
        prog=f"{PROG} {' '.join(descriptor.words)}",
        description=descriptor.help,
    )
    impl.add_arguments(parser)
    args = parser.parse_args(argv)
    args.context = ctx
    if not hasattr(args, "format"):
        args.format = ctx.output_format

    logger.debug(f"Running {descriptor.name} from {descriptor.source}")
    return int(impl.run(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
