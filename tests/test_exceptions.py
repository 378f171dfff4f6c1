"""Tests for knife_tools.exceptions module."""

import pytest

from knife_tools.exceptions import ConfigError, KnifeToolsError, LoadError


class TestKnifeToolsError:
    """Tests for the base exception class."""

    def test_basic_message(self):
        err = KnifeToolsError("Something went wrong")
        assert str(err) == "Something went wrong"
        assert err.message == "Something went wrong"
        assert err.context == {}
        assert err.suggestions == []

    def test_with_context_and_suggestions(self):
        err = KnifeToolsError(
            "Manifest unusable",
            context={"file": "plugin_manifest.json", "line": 3},
            suggestions=["Run rehash"],
        )
        msg = str(err)
        assert "Manifest unusable" in msg
        assert "Context:" in msg
        assert "line: 3" in msg
        assert "Suggestions:" in msg
        assert "- Run rehash" in msg

    def test_rich_rendering(self):
        """Errors render through a Rich console."""
        from rich.console import Console

        console = Console(record=True, width=120, color_system=None)
        console.print(KnifeToolsError("Boom", context={"file": "x.py"}, suggestions=["Fix it"]))
        text = console.export_text()
        assert "Error: Boom" in text
        assert "file: x.py" in text
        assert "- Fix it" in text


class TestConfigError:
    def test_file_path_added_to_context(self):
        err = ConfigError("Bad manifest", file_path="/home/me/.chef/plugin_manifest.json")
        assert err.context["file"] == "/home/me/.chef/plugin_manifest.json"
        assert isinstance(err, KnifeToolsError)

    def test_explicit_context_file_wins(self):
        err = ConfigError("Bad", context={"file": "a"}, file_path="b")
        assert err.context["file"] == "a"


class TestLoadError:
    def test_path(self):
        err = LoadError("Subcommand file raised", path="/plugins/bad.py")
        assert err.path == "/plugins/bad.py"
        assert "file: /plugins/bad.py" in str(err)

    def test_catchable_as_base(self):
        with pytest.raises(KnifeToolsError):
            raise LoadError("boom", path="x.py")
