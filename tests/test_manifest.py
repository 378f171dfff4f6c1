"""Tests for plugin manifest detection, parsing and classification."""

import pytest

from conftest import write_manifest
from knife_tools.exceptions import ConfigError
from knife_tools.plugins.manifest import AUTOGENERATED_KEY, ManifestKind, ManifestResolver


class TestManifestAvailable:
    """Tests for locating the manifest."""

    def test_path_under_home(self, home, env):
        """The manifest is ~/.chef/plugin_manifest.json."""
        resolver = ManifestResolver(env)
        assert resolver.manifest_path() == home / ".chef" / "plugin_manifest.json"

    def test_no_home_variable(self):
        """Without HOME there is no manifest path and no manifest."""
        resolver = ManifestResolver({})
        assert resolver.manifest_path() is None
        assert resolver.manifest_available() is False

    def test_empty_home_variable(self):
        assert ManifestResolver({"HOME": ""}).manifest_available() is False

    def test_missing_file(self, env):
        assert ManifestResolver(env).manifest_available() is False

    def test_present_file(self, home, env):
        write_manifest(home, {AUTOGENERATED_KEY: []})
        assert ManifestResolver(env).manifest_available() is True

    def test_custom_home_variable(self, home):
        """The home variable name is configurable."""
        write_manifest(home, {AUTOGENERATED_KEY: []})
        resolver = ManifestResolver({"USERPROFILE": str(home)}, home_var="USERPROFILE")
        assert resolver.manifest_available() is True


class TestManifestParsing:
    """Tests for reading and caching the manifest."""

    def test_parses_json(self, home, env, autogenerated_manifest):
        write_manifest(home, autogenerated_manifest)
        assert ManifestResolver(env).manifest() == autogenerated_manifest

    def test_cached_after_first_read(self, home, env):
        """Later changes to the file are not seen by the same resolver."""
        path = write_manifest(home, {"plugins": {}})
        resolver = ManifestResolver(env)
        first = resolver.manifest()

        path.write_text('{"changed": []}')
        assert resolver.manifest() is first
        assert ManifestResolver(env).manifest() == {"changed": []}

    def test_malformed_json(self, home, env):
        """Invalid JSON raises ConfigError with the location."""
        write_manifest(home, '{"plugins": ')
        with pytest.raises(ConfigError) as exc_info:
            ManifestResolver(env).manifest()
        assert "not valid JSON" in str(exc_info.value)
        assert "line" in exc_info.value.context

    def test_failed_parse_not_cached(self, home, env):
        """A manifest fixed after a failed read is picked up."""
        path = write_manifest(home, "not json")
        resolver = ManifestResolver(env)
        with pytest.raises(ConfigError):
            resolver.manifest()
        path.write_text('{"plugins": {}}')
        assert resolver.manifest() == {"plugins": {}}

    def test_non_object(self, home, env):
        """A top-level array is rejected."""
        write_manifest(home, "[]")
        with pytest.raises(ConfigError, match="must be a JSON object"):
            ManifestResolver(env).manifest()

    def test_unreadable(self, home, env):
        """A directory in place of the file is reported as unreadable."""
        (home / ".chef" / "plugin_manifest.json").mkdir(parents=True)
        with pytest.raises(ConfigError, match="Cannot read"):
            ManifestResolver(env).manifest()

    def test_no_home(self):
        with pytest.raises(ConfigError):
            ManifestResolver({}).manifest()


class TestClassify:
    """Tests for manifest classification."""

    def test_absent(self, env):
        assert ManifestResolver(env).classify() is ManifestKind.NONE

    def test_no_home(self):
        assert ManifestResolver({}).classify() is ManifestKind.NONE

    def test_autogenerated(self, home, env, autogenerated_manifest):
        """Only the reserved key means autogenerated."""
        write_manifest(home, autogenerated_manifest)
        assert ManifestResolver(env).classify() is ManifestKind.AUTOGENERATED

    def test_custom(self, home, env):
        write_manifest(home, {"plugins": {"knife-ec2": {"paths": []}}})
        assert ManifestResolver(env).classify() is ManifestKind.CUSTOM

    def test_mixed_is_custom(self, home, env):
        """Any key besides the reserved one makes the manifest custom."""
        write_manifest(home, {AUTOGENERATED_KEY: [], "extras": []})
        assert ManifestResolver(env).classify() is ManifestKind.CUSTOM

    def test_empty_object(self, home, env):
        """An empty manifest selects no manifest strategy."""
        write_manifest(home, {})
        assert ManifestResolver(env).classify() is ManifestKind.NONE

    def test_malformed_raises(self, home, env):
        write_manifest(home, "{")
        with pytest.raises(ConfigError):
            ManifestResolver(env).classify()
