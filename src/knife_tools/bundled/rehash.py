"""Write the autogenerated plugin manifest.

Scans the plugin directories once and records every subcommand file in
~/.chef/plugin_manifest.json, so later runs read the list instead of
scanning.
"""

import argparse
import json
import logging

from knife_tools.exceptions import ConfigError
from knife_tools.plugins.loaders import GlobLoader, manifest_for
from knife_tools.plugins.registry import CommandRegistry
from knife_tools.utils import ensure_parent_dir

logger = logging.getLogger("knife_tools.bundled.rehash")


class Rehash:
    name = "rehash"
    help = "Regenerate the plugin manifest from the plugin directories"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the manifest instead of writing it",
        )

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        ctx = args.context
        path = ctx.resolver.manifest_path()
        if path is None:
            raise ConfigError(
                "Cannot write plugin manifest without a home directory",
                context={"variable": ctx.home_var},
                suggestions=[f"Set the {ctx.home_var} environment variable"],
            )

        # Always scan, even when a manifest is currently in use
        loader = GlobLoader(
            ctx.config_dir,
            ctx.env,
            CommandRegistry(),
            bundled_dir=ctx.bundled_dir,
            home_var=ctx.home_var,
        )
        manifest = manifest_for(loader.subcommand_files())
        text = json.dumps(manifest, indent=2) + "\n"

        if args.dry_run:
            print(text, end="")
            return 0

        ensure_parent_dir(path).write_text(text, encoding="utf-8")
        count = len(next(iter(manifest.values())))
        logger.info(f"Wrote {count} subcommand path(s) to {path}")
        print(f"Knife subcommands are cached in {path}. Delete this file to disable the caching.")
        return 0
