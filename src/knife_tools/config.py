"""
Configuration file support for knife-tools.

Provides hierarchical configuration loading from:
1. Project config: .knife-tools.toml or knife-tools.toml in project root
2. User config: ~/.config/knife-tools/config.toml

CLI arguments override config file values, and project config overrides user config.
"""

import sys
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from knife_tools.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Config file names to search for in project directories
CONFIG_FILENAMES = [".knife-tools.toml", "knife-tools.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "knife-tools" / "config.toml"

# Directory of subcommand files shipped with the package
BUNDLED_DIR = Path(__file__).parent / "bundled"

OUTPUT_FORMATS = ("table", "json", "yaml")

# All known config keys for validation
KNOWN_KEYS = {
    "defaults": {"format", "verbose", "quiet"},
    "loader": {"config_dir", "home_var", "bundled_dir"},
    "logging": {"level"},
}


@dataclass
class DefaultsConfig:
    """Default options for CLI commands."""

    format: str = "table"
    verbose: bool = False
    quiet: bool = False


@dataclass
class LoaderConfig:
    """Where subcommand files are searched for."""

    config_dir: str | None = None
    home_var: str = "HOME"
    bundled_dir: str = str(BUNDLED_DIR)


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class Config:
    """Merged configuration from all sources."""

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Track which file each setting came from (for --show)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None, user_path: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)
            user_path: User config file (default: USER_CONFIG_PATH)

        Returns:
            Merged configuration object

        Raises:
            ConfigError: If a config file contains invalid TOML
        """
        if start_dir is None:
            start_dir = Path.cwd()
        if user_path is None:
            user_path = USER_CONFIG_PATH

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if user_path.exists():
            user_data = _load_toml_file(user_path)
            if user_data:
                _merge_config(config, user_data, str(user_path), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            if project_data:
                _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", file_path=path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}", file_path=path) from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section, known in KNOWN_KEYS.items():
        section_data = data.get(section)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            raise ConfigError(
                f"Config section [{section}] must be a table",
                file_path=source,
            )
        _warn_unknown_keys(section_data, known, section, source)

        target = getattr(config, section)
        for key in sorted(known):
            if key in section_data:
                setattr(target, key, section_data[key])
                sources[f"{section}.{key}"] = source

    if config.defaults.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unsupported output format '{config.defaults.format}'",
            context={"file": source, "allowed": ", ".join(OUTPUT_FORMATS)},
        )


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """Generate a template config file with all options documented."""
    return """# knife-tools configuration file
# Place as .knife-tools.toml in project root or ~/.config/knife-tools/config.toml for user defaults

[defaults]
# Output format for listings: table, json, yaml
# format = "table"

# Debug logging (like -v); quiet logs errors only. Flags and KNIFE_TOOLS_LOG_LEVEL win
# verbose = false
# quiet = false

[loader]
# Extra configuration directory; plugins are read from <config_dir>/plugins/knife/
# config_dir = "/etc/chef"

# Environment variable naming the home directory
# home_var = "HOME"

# Directory of subcommand files shipped with knife-tools
# bundled_dir = "/path/to/knife_tools/bundled"

[logging]
# level = "WARNING"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
