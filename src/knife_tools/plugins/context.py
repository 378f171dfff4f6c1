"""Application context for subcommand discovery.

One KnifeContext is created per CLI invocation. It owns the environment
view, the manifest cache and the command registry, so nothing about
discovery lives in module globals and tests can build isolated contexts:

    ctx = KnifeContext(config_dir="/etc/chef", env={"HOME": str(tmp_path)})
    ctx.command_class_from(["node", "show", "web01"])
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from knife_tools.config import BUNDLED_DIR, Config
from knife_tools.plugins.loaders import SubcommandLoader, for_config
from knife_tools.plugins.manifest import ManifestResolver
from knife_tools.plugins.registry import CommandRegistry, SubcommandDescriptor


@dataclass
class KnifeContext:
    """Discovery state shared by the loader strategies of one process."""

    config_dir: str | None = None
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)
    home_var: str = "HOME"
    bundled_dir: str | None = str(BUNDLED_DIR)
    output_format: str = "table"
    registry: CommandRegistry = field(default_factory=CommandRegistry)
    resolver: ManifestResolver | None = None

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = ManifestResolver(self.env, self.home_var)

    @classmethod
    def from_config(
        cls,
        config: Config,
        env: Mapping[str, str] | None = None,
        config_dir: str | None = None,
        output_format: str | None = None,
    ) -> "KnifeContext":
        """Build a context from loaded configuration; arguments override it."""
        return cls(
            config_dir=config_dir if config_dir is not None else config.loader.config_dir,
            env=os.environ if env is None else env,
            home_var=config.loader.home_var,
            bundled_dir=config.loader.bundled_dir,
            output_format=output_format or config.defaults.format,
        )

    @property
    def home(self) -> str | None:
        return self.env.get(self.home_var) or None

    def loader(self) -> SubcommandLoader:
        """The loader strategy for the current manifest state.

        Selected anew on each call; all strategies share this context's
        registry.
        """
        return for_config(
            self.config_dir,
            resolver=self.resolver,
            registry=self.registry,
            bundled_dir=self.bundled_dir,
            env=self.env,
        )

    def load_commands(self) -> bool:
        return self.loader().load_commands()

    def list_commands(self, category: str | None = None) -> dict[str, list[SubcommandDescriptor]]:
        return self.loader().list_commands(category)

    def command_class_from(self, args: Sequence[str]) -> SubcommandDescriptor | None:
        return self.loader().command_class_from(args)

    def guess_category(self, args: Sequence[str]) -> str | None:
        return self.loader().guess_category(args)
