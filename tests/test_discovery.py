"""Tests for glob-based file discovery."""

import os
from pathlib import Path

import pytest

from kvasir.diagnostics import DiagnosticSink
from kvasir.errors import GlobError
from kvasir.sources import discovery
from kvasir.sources.discovery import has_magic, list_files, static_prefix


# ---------------------------------------------------------------------------
# list_files
# ---------------------------------------------------------------------------


class TestListFiles:
    def test_expands_single_pattern(self, source_tree):
        files, errors = list_files([str(source_tree / "*.json")])
        assert files == [source_tree / "a.json"]
        assert errors == []

    def test_overlapping_patterns_deduplicated(self, source_tree):
        files, _ = list_files([
            str(source_tree / "*.yaml"),
            str(source_tree / "b.*"),
            str(source_tree / "**" / "*.yaml"),
        ])
        resolved = [f.resolve() for f in files]
        assert len(resolved) == len(set(resolved))
        assert sorted(f.name for f in files) == ["api.yaml", "b.yaml"]

    def test_same_file_spelled_differently_counted_once(self, source_tree):
        (source_tree / "nested").mkdir()
        files, _ = list_files([
            str(source_tree / "a.json"),
            str(source_tree / "nested" / ".." / "a.json"),
        ])
        assert len(files) == 1

    def test_first_spelling_is_kept(self, source_tree):
        (source_tree / "nested").mkdir()
        first = str(source_tree / "nested" / ".." / "a.json")
        files, _ = list_files([first, str(source_tree / "a.json")])
        assert files == [Path(first)]

    def test_pattern_order_then_sorted_within_pattern(self, source_tree):
        files, _ = list_files([
            str(source_tree / "*.yaml"),
            str(source_tree / "*.json"),
        ])
        assert [f.name for f in files] == ["api.yaml", "b.yaml", "a.json"]

    def test_directories_skipped(self, source_tree):
        (source_tree / "dir.json").mkdir()
        files, _ = list_files([str(source_tree / "*.json")])
        assert [f.name for f in files] == ["a.json"]

    def test_recursive_glob(self, source_tree):
        deep = source_tree / "x" / "y"
        deep.mkdir(parents=True)
        (deep / "deep.json").write_text("{}")
        files, _ = list_files([str(source_tree / "**" / "*.json")])
        assert deep / "deep.json" in files

    def test_no_match_is_not_an_error(self, tmp_path):
        files, errors = list_files([str(tmp_path / "*.nothing")])
        assert files == []
        assert errors == []

    def test_empty_pattern_reported_and_others_continue(self, source_tree):
        sink = DiagnosticSink()
        files, errors = list_files(["", str(source_tree / "a.json")], sink)
        assert files == [source_tree / "a.json"]
        assert len(errors) == 1
        assert isinstance(errors[0], GlobError)
        assert errors[0].pattern == ""
        assert len(sink.for_stage("discovery")) == 1

    def test_filesystem_error_becomes_glob_error(self, source_tree, monkeypatch):
        def _boom(pattern, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(discovery.glob, "glob", _boom)
        sink = DiagnosticSink()
        files, errors = list_files([str(source_tree / "*.json")], sink)
        assert files == []
        assert len(errors) == 1
        assert "denied" in str(errors[0])
        assert sink.records[0].stage == "discovery"

    def test_hidden_files_matched(self, source_tree):
        (source_tree / ".hidden.json").write_text("{}", encoding="utf-8")
        files, _ = list_files([str(source_tree / "*.json")])
        assert [f.name for f in files] == [".hidden.json", "a.json"]


class TestMalformedPatterns:
    @pytest.mark.parametrize(
        "pattern",
        ["[abc", "src/[!a.json", "a/***/b.json", "a/**b/*.json", "x**/*.json"],
    )
    def test_rejected_before_expansion(self, source_tree, pattern):
        sink = DiagnosticSink()
        files, errors = list_files([str(source_tree / pattern)], sink)
        assert files == []
        assert len(errors) == 1
        assert errors[0].pattern == str(source_tree / pattern)
        assert len(sink.for_stage("discovery")) == 1

    @pytest.mark.parametrize("pattern", ["[ab].json", "[!b]*.json", "[]]x", "**/*.json"])
    def test_valid_classes_and_recursion_accepted(self, source_tree, pattern):
        _, errors = list_files([str(source_tree / pattern)])
        assert errors == []

    def test_bad_pattern_does_not_stop_others(self, source_tree):
        files, errors = list_files(["[abc", str(source_tree / "a.json")])
        assert files == [source_tree / "a.json"]
        assert len(errors) == 1


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)
class TestUnreadableDirectories:
    @pytest.fixture
    def locked(self, source_tree):
        locked = source_tree / "locked"
        locked.mkdir()
        (locked / "inner.json").write_text("{}", encoding="utf-8")
        locked.chmod(0)
        yield locked
        locked.chmod(0o755)

    def test_recursive_walk_reports_directory(self, source_tree, locked):
        sink = DiagnosticSink()
        files, errors = list_files([str(source_tree / "**" / "*.json")], sink)
        assert source_tree / "a.json" in files
        assert [e.path for e in errors] == [locked]
        assert sink.for_stage("discovery")

    def test_unreadable_prefix_reported(self, locked):
        _, errors = list_files([str(locked / "*.json")])
        assert len(errors) == 1
        assert errors[0].path == locked

    def test_directory_outside_pattern_ignored(self, source_tree, locked):
        _, errors = list_files([str(source_tree / "*.json")])
        assert errors == []


# ---------------------------------------------------------------------------
# static_prefix / has_magic
# ---------------------------------------------------------------------------


class TestStaticPrefix:
    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("templates/*.j2", Path("templates")),
            ("templates/**/*.j2", Path("templates")),
            ("a/b/base.md", Path("a/b")),
            ("*.j2", Path(".")),
            ("a/*/c/*.j2", Path("a")),
        ],
    )
    def test_prefix(self, pattern, expected):
        assert static_prefix(pattern) == expected

    def test_has_magic(self):
        assert has_magic("*.json")
        assert has_magic("file?.txt")
        assert has_magic("[ab].txt")
        assert not has_magic("plain.txt")
