"""Longest-prefix matching of command-line words to registry keys.

The user types the words of a subcommand followed by its own arguments and
flags, e.g. ``knife node show web01 -a ipaddress``. The registry key is the
longest run of leading positional words that names a command:

    >>> find_longest_key({"node_show": 1, "node": 2}, ["node", "show", "web01"])
    'node_show'

These functions work on any mapping, so they do not depend on how the
registry was filled.
"""

from __future__ import annotations

import re
from typing import Mapping, Sequence

# One alphanumeric character, then at least one alphanumeric, '_' or '-'
_POSITIONAL_RE = re.compile(r"[^\W_][\w-]+")


def positional_arguments(args: Sequence[str]) -> list[str]:
    """The identifier-shaped tokens of args.

    Flags (``-a``, ``--long``) and values that are not identifiers
    (``/tmp/x``, ``a.b``) are dropped, as are single-character tokens.
    """
    return [arg for arg in args if _POSITIONAL_RE.fullmatch(arg)]


def find_longest_key(mapping: Mapping[str, object], words: Sequence[str], sep: str = "_") -> str | None:
    """Find the longest key of mapping made of the leading words joined by sep.

    Tries all words, then drops words from the end one at a time.
    Returns None when no prefix (or no word at all) matches.
    """
    candidates = list(words)
    while candidates:
        candidate = sep.join(candidates)
        if candidate in mapping:
            return candidate
        candidates.pop()
    return None


class CommandResolver:
    """Resolves argument lists against a command map and a category map."""

    def __init__(self, subcommands: Mapping[str, object], categories: Mapping[str, object]):
        self.subcommands = subcommands
        self.categories = categories

    def command_name_from(self, args: Sequence[str]) -> str | None:
        """Registry key for args, or None.

        Falls back to the first raw argument with hyphens turned into
        underscores, so ``knife-tools cookbook-upload`` finds
        ``cookbook_upload``.
        """
        name = find_longest_key(self.subcommands, positional_arguments(args), "_")
        if name is not None:
            return name
        if args:
            fallback = args[0].replace("-", "_")
            if fallback in self.subcommands:
                return fallback
        return None

    def guess_category(self, args: Sequence[str]) -> str | None:
        words = [part for word in positional_arguments(args) for part in word.split("-")]
        return find_longest_key(self.categories, words, " ")
