"""Tests for knife_tools.utils."""

import glob

from knife_tools.utils import ensure_parent_dir, escape_glob, unique


class TestEscapeGlob:
    def test_plain_path_unchanged(self):
        assert escape_glob("/etc/chef", "plugins") == "/etc/chef/plugins"

    def test_brackets_escaped(self):
        assert escape_glob("/etc/chef[prod]") == "/etc/chef[[]prod]"

    def test_escaped_path_matches_literally(self, tmp_path):
        target = tmp_path / "a*b?[c]"
        target.mkdir()
        (target / "x.py").write_text("")
        (tmp_path / "aZZbQc").mkdir()
        (tmp_path / "aZZbQc" / "x.py").write_text("")

        assert glob.glob(escape_glob(target) + "/*.py") == [str(target / "x.py")]


class TestUnique:
    def test_keeps_first_occurrence(self):
        assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_empty(self):
        assert unique([]) == []


def test_ensure_parent_dir(tmp_path):
    path = tmp_path / "a" / "b" / "file.json"
    assert ensure_parent_dir(path) is path
    assert path.parent.is_dir()
