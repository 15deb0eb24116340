"""Shared pytest fixtures for extradeps tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def write_manifest():
    """Write a package.json into a directory and return its path."""

    def _write(directory: Path, **sections) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        data = {"name": directory.name, "version": "1.0.0"}
        data.update(sections)
        path = directory / "package.json"
        path.write_text(json.dumps(data))
        return path

    return _write


@pytest.fixture
def project(tmp_path, write_manifest):
    """A project root with runtime, dev, optional and peer dependencies."""
    write_manifest(
        tmp_path,
        dependencies={"lodash": "^4.0.0", "@scope/runtime": "1.0.0"},
        devDependencies={"jest": "^27", "@scope/devtool": "2.0.0"},
        optionalDependencies={"fsevents": "^2"},
        peerDependencies={"react": ">=17"},
    )
    (tmp_path / "src").mkdir()
    return tmp_path
