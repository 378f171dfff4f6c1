"""
Utility helpers for knife-tools.
"""

from __future__ import annotations

import glob
import os
from pathlib import Path
from typing import Hashable, Iterable, TypeVar

T = TypeVar("T", bound=Hashable)


def ensure_parent_dir(path: Path) -> Path:
    """
    Ensure the parent directory of a path exists.

    Creates the parent directory (and any missing ancestors) if it doesn't exist.

    Args:
        path: The file path whose parent directory should be ensured.

    Returns:
        The original path, unchanged. This allows chaining like:
            with ensure_parent_dir(output_path).open('w') as f:
                ...
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def escape_glob(*parts: str | os.PathLike) -> str:
    """
    Join path parts and escape glob metacharacters in the result.

    Directories such as ``config[dir]`` or ``build*`` would otherwise be read
    as patterns by :func:`glob.glob`. Append the wildcard after escaping:

        >>> escape_glob("/etc/chef[prod]", "plugins") + "/*.py"
        '/etc/chef[[]prod]/plugins/*.py'
    """
    return glob.escape(os.path.join(*[os.fspath(p) for p in parts]))


def unique(items: Iterable[T]) -> list[T]:
    """Drop repeated items, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


__all__ = [
    "ensure_parent_dir",
    "escape_glob",
    "unique",
]
