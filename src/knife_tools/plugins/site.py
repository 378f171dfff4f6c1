"""Subcommand files dropped into plugin directories.

Searches, in order:
    <config_dir>/plugins/knife/*.py
    <home>/.chef/plugins/knife/*.py
"""

from __future__ import annotations

import glob
import logging
import os
from typing import Mapping

from knife_tools.utils import escape_glob

logger = logging.getLogger(__name__)

SUBCOMMAND_GLOB = "*.py"
PLUGIN_SUBDIR = ("plugins", "knife")


class SiteSubcommandLocator:
    """Finds subcommand files under the config and home plugin directories."""

    def __init__(
        self,
        config_dir: str | None,
        env: Mapping[str, str] | None = None,
        home_var: str = "HOME",
    ):
        self.config_dir = config_dir
        self.env = os.environ if env is None else env
        self.home_var = home_var

    def search_dirs(self) -> list[str]:
        """Plugin directories that apply to the current settings."""
        dirs = []
        if self.config_dir:
            dirs.append(os.path.join(os.path.abspath(self.config_dir), *PLUGIN_SUBDIR))
        home = self.env.get(self.home_var)
        if home:
            dirs.append(os.path.join(home, ".chef", *PLUGIN_SUBDIR))
        return dirs

    def subcommand_files(self) -> list[str]:
        files: list[str] = []
        for directory in self.search_dirs():
            found = glob_subcommands(directory)
            logger.debug(f"Found {len(found)} subcommand file(s) in {directory}")
            files.extend(found)
        return files


def glob_subcommands(directory: str | os.PathLike) -> list[str]:
    """Sorted subcommand files directly inside directory.

    The directory is matched literally even if its name contains glob
    metacharacters. A missing directory yields an empty list.
    """
    pattern = os.path.join(escape_glob(directory), SUBCOMMAND_GLOB)
    return sorted(path for path in glob.glob(pattern) if os.path.isfile(path))
