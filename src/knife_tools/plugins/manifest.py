"""
Plugin manifest detection and parsing.

The manifest lives at ``<home>/.chef/plugin_manifest.json``. Its shape
decides how subcommand files are found:

- absent: scan the plugin directories (GlobLoader)
- only ``_autogenerated_command_paths``: a list of file paths written by
  ``knife-tools rehash`` (AutoManifestLoader)
- any other key: user-declared groupings of file paths
  (CustomManifestLoader)
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from knife_tools.exceptions import ConfigError

logger = logging.getLogger(__name__)

AUTOGENERATED_KEY = "_autogenerated_command_paths"
MANIFEST_DIR = ".chef"
MANIFEST_FILENAME = "plugin_manifest.json"


class ManifestKind(Enum):
    """Shape of the plugin manifest."""

    NONE = "none"
    AUTOGENERATED = "autogenerated"
    CUSTOM = "custom"


class ManifestResolver:
    """Locates, parses and classifies the plugin manifest.

    The parsed manifest is cached on the resolver after the first
    successful read; later changes to the file are not seen.
    """

    def __init__(self, env: Mapping[str, str] | None = None, home_var: str = "HOME"):
        self.env = os.environ if env is None else env
        self.home_var = home_var
        self._manifest: dict[str, Any] | None = None

    @property
    def home(self) -> str | None:
        return self.env.get(self.home_var) or None

    def manifest_path(self) -> Path | None:
        """Path of the manifest file, or None when the home variable is unset."""
        if not self.home:
            return None
        return Path(self.home) / MANIFEST_DIR / MANIFEST_FILENAME

    def manifest_available(self) -> bool:
        path = self.manifest_path()
        return path is not None and path.is_file()

    def manifest(self) -> dict[str, Any]:
        """Parse the manifest, caching the result.

        Raises:
            ConfigError: If the file is unreadable, not valid JSON, or not
                a JSON object
        """
        if self._manifest is not None:
            return self._manifest

        path = self.manifest_path()
        if path is None:
            raise ConfigError(
                "Cannot locate plugin manifest",
                context={"variable": self.home_var},
                suggestions=[f"Set the {self.home_var} environment variable"],
            )

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read plugin manifest: {e}", file_path=path) from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(
                "Plugin manifest is not valid JSON",
                context={"file": str(path), "line": e.lineno, "column": e.colno},
                suggestions=[
                    "Fix the JSON syntax",
                    "Run 'knife-tools rehash' to regenerate the manifest",
                ],
            ) from e

        if not isinstance(data, dict):
            raise ConfigError(
                f"Plugin manifest must be a JSON object, got {type(data).__name__}",
                file_path=path,
            )

        logger.debug(f"Read plugin manifest {path} with keys {sorted(data)}")
        self._manifest = data
        return data

    def classify(self) -> ManifestKind:
        if not self.manifest_available():
            return ManifestKind.NONE
        keys = set(self.manifest())
        if keys == {AUTOGENERATED_KEY}:
            return ManifestKind.AUTOGENERATED
        if keys - {AUTOGENERATED_KEY}:
            return ManifestKind.CUSTOM
        return ManifestKind.NONE
