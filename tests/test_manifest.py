"""Tests for the manifest aggregator — pure filesystem logic."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from extradeps.exceptions import ManifestNotFoundError, ManifestParseError
from extradeps.manifest import (
    build_dependency_table,
    extract_dep_fields,
    find_manifest,
    manifest_failure_message,
    manifest_sources,
    read_manifest,
)
from extradeps.models import DependencyTable, FailureKind, ManifestFailure


class TestFindManifest:
    def test_same_directory(self, tmp_path: Path, write_manifest):
        manifest = write_manifest(tmp_path, dependencies={"a": "1"})
        assert find_manifest(tmp_path / "index.js") == manifest

    def test_walks_upward(self, tmp_path: Path, write_manifest):
        manifest = write_manifest(tmp_path, dependencies={"a": "1"})
        nested = tmp_path / "src" / "deep" / "er"
        nested.mkdir(parents=True)
        assert find_manifest(nested / "file.js") == manifest

    def test_nearest_wins(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path, dependencies={"outer": "1"})
        inner = write_manifest(tmp_path / "packages" / "inner", dependencies={"inner": "1"})
        assert find_manifest(tmp_path / "packages" / "inner" / "lib" / "x.js") == inner

    def test_not_found(self, tmp_path: Path, monkeypatch):
        # Make sure no ancestor manifest leaks in from the test environment.
        monkeypatch.setattr(Path, "is_file", lambda self: False)
        with pytest.raises(ManifestNotFoundError):
            find_manifest(tmp_path / "index.js")


class TestReadManifest:
    def test_valid(self, tmp_path: Path, write_manifest):
        path = write_manifest(tmp_path, dependencies={"a": "1"})
        assert read_manifest(path)["dependencies"] == {"a": "1"}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ManifestNotFoundError):
            read_manifest(tmp_path / "package.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("{ not json")
        with pytest.raises(ManifestParseError) as exc_info:
            read_manifest(path)
        assert str(path) in exc_info.value.detail

    def test_non_object(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ManifestParseError):
            read_manifest(path)

    def test_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_bytes(b'{"dependencies": {"a\xff": "1"}}')
        with pytest.raises(ManifestParseError) as exc_info:
            read_manifest(path)
        assert str(path) in exc_info.value.detail

    def test_byte_order_mark(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_bytes(b'\xef\xbb\xbf{"dependencies": {"a": "1"}}')
        assert read_manifest(path)["dependencies"] == {"a": "1"}


class TestExtractDepFields:
    def test_missing_categories_default_empty(self):
        table = extract_dep_fields({"name": "x", "dependencies": {"a": "1"}})
        assert dict(table.dependencies) == {"a": "1"}
        assert dict(table.dev_dependencies) == {}
        assert dict(table.optional_dependencies) == {}
        assert dict(table.peer_dependencies) == {}

    def test_non_object_category_ignored(self):
        table = extract_dep_fields({"devDependencies": ["jest"]})
        assert table.is_empty()

    def test_table_is_read_only(self):
        table = extract_dep_fields({"dependencies": {"a": "1"}})
        with pytest.raises(TypeError):
            table.dependencies["b"] = "2"


class TestMerge:
    def test_union_keeps_earlier_entries(self):
        first = DependencyTable(dependencies={"a": "1"}, dev_dependencies={"d": "1"})
        second = DependencyTable(dependencies={"b": "2"})
        merged = first.merge(second)
        assert set(merged.dependencies) == {"a", "b"}
        assert set(merged.dev_dependencies) == {"d"}

    def test_collision_last_writer_wins(self):
        merged = DependencyTable(dependencies={"a": "1"}).merge(
            DependencyTable(dependencies={"a": "2"})
        )
        assert merged.dependencies["a"] == "2"

    def test_merge_does_not_mutate(self):
        first = DependencyTable(dependencies={"a": "1"})
        first.merge(DependencyTable(dependencies={"b": "2"}))
        assert set(first.dependencies) == {"a"}


class TestManifestSources:
    def test_deduplicates_closest(self, tmp_path: Path, write_manifest):
        closest = write_manifest(tmp_path, dependencies={"a": "1"})
        sources = manifest_sources(closest, [str(tmp_path), str(tmp_path / ".")])
        assert sources == [closest.resolve()]

    def test_single_string_dir(self, tmp_path: Path, write_manifest):
        closest = write_manifest(tmp_path / "app", dependencies={"a": "1"})
        sources = manifest_sources(closest, str(tmp_path / "shared"))
        assert sources == [closest.resolve(), (tmp_path / "shared" / "package.json").resolve()]


class TestBuildDependencyTable:
    def test_nearest_only(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path, dependencies={"lodash": "^4.0.0"})
        table = build_dependency_table(tmp_path / "index.js")
        assert isinstance(table, DependencyTable)
        assert "lodash" in table.dependencies

    def test_merges_package_dirs(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "app", dependencies={"a": "1"})
        write_manifest(tmp_path / "shared", dependencies={"b": "1"}, devDependencies={"c": "1"})
        table = build_dependency_table(
            tmp_path / "app" / "index.js", [str(tmp_path / "shared")]
        )
        assert set(table.dependencies) == {"a", "b"}
        assert set(table.dev_dependencies) == {"c"}

    def test_merge_order_keeps_all_dependencies(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "app", dependencies={"a": "1"})
        write_manifest(tmp_path / "one", dependencies={"b": "1"})
        write_manifest(tmp_path / "two", dependencies={"c": "1"})
        dirs = [str(tmp_path / "two"), str(tmp_path / "one")]
        table = build_dependency_table(tmp_path / "app" / "x.js", dirs)
        assert set(table.dependencies) == {"a", "b", "c"}

    def test_package_dir_same_as_closest(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path, dependencies={"a": "1"})
        table = build_dependency_table(tmp_path / "x.js", str(tmp_path))
        assert isinstance(table, DependencyTable)
        assert dict(table.dependencies) == {"a": "1"}

    def test_empty_manifest(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path)
        result = build_dependency_table(tmp_path / "x.js")
        assert result == ManifestFailure(FailureKind.EMPTY)
        assert not result.is_reportable
        assert manifest_failure_message(result) is None

    def test_empty_closest_filled_by_package_dir(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "app")
        write_manifest(tmp_path / "root", dependencies={"a": "1"})
        table = build_dependency_table(tmp_path / "app" / "x.js", str(tmp_path / "root"))
        assert isinstance(table, DependencyTable)

    def test_parse_error(self, tmp_path: Path):
        (tmp_path / "package.json").write_text('{"dependencies": ')
        result = build_dependency_table(tmp_path / "x.js")
        assert isinstance(result, ManifestFailure)
        assert result.kind is FailureKind.PARSE_ERROR
        assert manifest_failure_message(result).startswith(
            "The package.json file could not be parsed: "
        )

    def test_undecodable_manifest_is_parse_error(self, tmp_path: Path):
        (tmp_path / "package.json").write_bytes(b'{"dependencies": {"a\xff": "1"}}')
        result = build_dependency_table(tmp_path / "x.js")
        assert isinstance(result, ManifestFailure)
        assert result.kind is FailureKind.PARSE_ERROR

    def test_byte_order_mark_accepted(self, tmp_path: Path):
        (tmp_path / "package.json").write_bytes(b'\xef\xbb\xbf{"dependencies": {"a": "1"}}')
        result = build_dependency_table(tmp_path / "x.js")
        assert isinstance(result, DependencyTable)
        assert dict(result.dependencies) == {"a": "1"}

    def test_package_dir_without_manifest(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "app", dependencies={"a": "1"})
        (tmp_path / "nothing").mkdir()
        result = build_dependency_table(tmp_path / "app" / "x.js", str(tmp_path / "nothing"))
        assert isinstance(result, ManifestFailure)
        assert result.kind is FailureKind.NOT_FOUND
        assert manifest_failure_message(result) == "The package.json file could not be found."

    def test_read_error(self, tmp_path: Path, write_manifest):
        write_manifest(tmp_path / "app", dependencies={"a": "1"})
        # A directory named package.json cannot be read as a file.
        (tmp_path / "weird" / "package.json").mkdir(parents=True)
        result = build_dependency_table(tmp_path / "app" / "x.js", str(tmp_path / "weird"))
        assert isinstance(result, ManifestFailure)
        assert result.kind is FailureKind.READ_ERROR
        assert manifest_failure_message(result) == result.detail

    def test_reads_fresh_each_time(self, tmp_path: Path):
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"dependencies": {"a": "1"}}))
        first = build_dependency_table(tmp_path / "x.js")
        path.write_text(json.dumps({"dependencies": {"b": "1"}}))
        second = build_dependency_table(tmp_path / "x.js")
        assert set(first.dependencies) == {"a"}
        assert set(second.dependencies) == {"b"}
