"""
Custom exception hierarchy for knife-tools.

Provides consistent error handling with context and actionable suggestions.
All exceptions include:
- Context information (manifest path, subcommand file, etc.)
- Suggestions for how to fix the issue

Example::

    from knife_tools.exceptions import ConfigError, LoadError

    raise ConfigError(
        "Plugin manifest is not valid JSON",
        context={"file": "~/.chef/plugin_manifest.json", "line": 3},
        suggestions=["Run 'knife-tools rehash' to regenerate the manifest"],
    )

Looking up a command that does not exist is not an error: resolution
functions return None and the CLI falls back to usage help.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class KnifeToolsError(Exception):
    """
    Base exception for all knife-tools errors.

    Attributes:
        context: Dictionary of contextual information (file, key, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()

    def __rich_console__(self, console, options):
        """Render the error as a red headline followed by dimmed details."""
        from rich.text import Text

        yield Text(f"Error: {self.message}", style="bold red")
        for key, value in self.context.items():
            yield Text(f"  {key}: {value}", style="dim")
        for suggestion in self.suggestions:
            yield Text(f"  - {suggestion}", style="yellow")


class ConfigError(KnifeToolsError):
    """
    Configuration could not be read or has the wrong shape.

    Raised for an unreadable, unparseable or structurally malformed plugin
    manifest, and for invalid TOML configuration files.

    Example::

        raise ConfigError(
            "Manifest key '_autogenerated_command_paths' must be a list",
            context={"file": "/home/me/.chef/plugin_manifest.json"},
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        super().__init__(message, ctx, suggestions)


class LoadError(KnifeToolsError):
    """
    A subcommand file raised while it was being executed.

    Loading stops at the first failing file; commands registered by files
    loaded before it stay in the registry.

    Attributes:
        path: The subcommand file that failed
    """

    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.path = str(path)
        ctx = context or {}
        ctx.setdefault("file", self.path)
        super().__init__(message, ctx, suggestions)


__all__ = [
    "KnifeToolsError",
    "ConfigError",
    "LoadError",
]
