"""Pytest fixtures for knife-tools tests."""

import json
import textwrap
from pathlib import Path

import pytest

from knife_tools.plugins.manifest import AUTOGENERATED_KEY


def plugin_source(*commands, extra=""):
    """Source of a plugin file defining one class per (name, category) pair."""
    parts = ["import argparse\n", textwrap.dedent(extra)]
    for i, (name, category) in enumerate(commands):
        category_line = f"    category = {category!r}\n" if category else ""
        parts.append(
            f"\n\nclass Command{i}:\n"
            f"    name = {name!r}\n"
            f"{category_line}"
            f"    help = 'Run {name}'\n"
            "\n"
            "    @staticmethod\n"
            "    def add_arguments(parser):\n"
            "        parser.add_argument('rest', nargs='*')\n"
            "\n"
            "    @staticmethod\n"
            "    def run(args):\n"
            f"        print('ran {name}', args.rest)\n"
            "        return 0\n"
        )
    return "".join(parts)


def write_plugin(directory: Path, filename: str, *commands, extra="") -> Path:
    """Write a plugin file defining the given (name, category) commands."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(plugin_source(*commands, extra=extra))
    return path


def write_manifest(home: Path, data) -> Path:
    path = home / ".chef" / "plugin_manifest.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


@pytest.fixture
def home(tmp_path):
    """An empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def env(home):
    """Environment mapping pointing HOME at the temporary home directory."""
    return {"HOME": str(home)}


@pytest.fixture
def config_dir(tmp_path):
    """A configuration directory with an empty plugins/knife/ directory."""
    path = tmp_path / "chef"
    (path / "plugins" / "knife").mkdir(parents=True)
    return path


@pytest.fixture
def site_plugins(home):
    """The home plugin directory, ~/.chef/plugins/knife/."""
    path = home / ".chef" / "plugins" / "knife"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def autogenerated_manifest():
    return {AUTOGENERATED_KEY: ["/opt/knife/node_show.py", "/opt/knife/node_list.py"]}
