"""Show and initialize knife-tools configuration."""

import argparse
from pathlib import Path

from knife_tools import config as knife_config
from knife_tools.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    Config,
    generate_template,
    get_config_paths,
)
from knife_tools.utils import ensure_parent_dir


class ConfigShow:
    name = "config_show"
    help = "Show effective configuration with sources"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--paths", action="store_true", help="Only show config file paths")

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        if args.paths:
            for kind, path in get_config_paths().items():
                print(f"{kind}: {path or '(not found)'}")
            return 0

        config = Config.load()
        for section, keys in KNOWN_KEYS.items():
            print(f"[{section}]")
            for key in sorted(keys):
                value = getattr(getattr(config, section), key)
                source = config.get_source(f"{section}.{key}")
                print(f"  {key} = {value!r}  ({source})")
        ctx = args.context
        print(f"\nmanifest: {ctx.resolver.manifest_path() or '(no home directory)'}")
        print(f"manifest kind: {ctx.resolver.classify().value}")
        print(f"loader: {type(ctx.loader()).__name__}")
        return 0


class ConfigInit:
    name = "config_init"
    help = "Create a template config file"

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--user",
            action="store_true",
            help=f"Write {knife_config.USER_CONFIG_PATH} instead of ./{CONFIG_FILENAMES[0]}",
        )
        parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    @staticmethod
    def run(args: argparse.Namespace) -> int:
        path = knife_config.USER_CONFIG_PATH if args.user else Path.cwd() / CONFIG_FILENAMES[0]
        if path.exists() and not args.force:
            print(f"Config file already exists: {path} (use --force to overwrite)")
            return 1
        ensure_parent_dir(path).write_text(generate_template(), encoding="utf-8")
        print(f"Created {path}")
        return 0
