"""Manifest aggregator — locate package.json files and fold them into one table."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from functools import reduce
from pathlib import Path

from extradeps.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestReadError,
)
from extradeps.models import DEP_FIELDS, DependencyTable, FailureKind, ManifestFailure

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


def find_manifest(file_path: str | Path) -> Path:
    """Walk upward from *file_path* and return the nearest package.json.

    Raises:
        ManifestNotFoundError: no manifest up to the filesystem root.
    """
    start = Path(file_path).absolute()
    directory = start if start.is_dir() else start.parent
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    raise ManifestNotFoundError(str(file_path))


def read_manifest(path: str | Path) -> dict:
    """Read and parse one manifest file."""
    try:
        content = Path(path).read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ManifestNotFoundError(str(path)) from exc
    except UnicodeDecodeError as exc:
        raise ManifestParseError(str(path), f"Invalid UTF-8 ({exc.reason}) in {path}") from exc
    except OSError as exc:
        raise ManifestReadError(str(path), str(exc)) from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(str(path), f"{exc.msg} in {path}") from exc
    if not isinstance(data, dict):
        raise ManifestParseError(str(path), f"Expected a JSON object in {path}")
    return data


def extract_dep_fields(data: dict) -> DependencyTable:
    """Pull the four dependency categories out of parsed package.json data."""
    categories: dict[str, dict[str, str]] = {}
    for attr, key in DEP_FIELDS.items():
        section = data.get(key)
        if not isinstance(section, dict):
            section = {}
        categories[attr] = {name: str(version) for name, version in section.items()}
    return DependencyTable(**categories)


def _as_dirs(package_dirs: str | Sequence[str] | None) -> list[str]:
    if package_dirs is None:
        return []
    if isinstance(package_dirs, (str, os.PathLike)):
        return [os.fspath(package_dirs)]
    return [os.fspath(d) for d in package_dirs]


def manifest_sources(
    closest: Path, package_dirs: str | Sequence[str] | None
) -> list[Path]:
    """Ordered, de-duplicated manifest paths: nearest first, then configured dirs."""
    sources = [closest.resolve()]
    for directory in _as_dirs(package_dirs):
        pkg_file = (Path(directory) / MANIFEST_NAME).resolve()
        if pkg_file in sources:
            logger.debug("Skipping already consulted manifest %s", pkg_file)
            continue
        sources.append(pkg_file)
    return sources


def load_dependency_table(
    file_path: str | Path, package_dirs: str | Sequence[str] | None = None
) -> DependencyTable:
    """Exception-raising core of :func:`build_dependency_table`."""
    closest = find_manifest(file_path)
    logger.debug("Nearest manifest for %s: %s", file_path, closest)

    sources = manifest_sources(closest, package_dirs)
    tables = [extract_dep_fields(read_manifest(path)) for path in sources]
    return reduce(DependencyTable.merge, tables, DependencyTable())


def build_dependency_table(
    file_path: str | Path, package_dirs: str | Sequence[str] | None = None
) -> DependencyTable | ManifestFailure:
    """Build the merged DependencyTable for the file being analyzed.

    Returns a :class:`ManifestFailure` instead of raising when the manifest is
    missing, malformed, unreadable, or declares no dependencies at all.
    """
    try:
        table = load_dependency_table(file_path, package_dirs)
    except ManifestNotFoundError as exc:
        logger.debug("No package.json for %s (missing %s)", file_path, exc.path)
        return ManifestFailure(FailureKind.NOT_FOUND, str(exc))
    except ManifestParseError as exc:
        logger.debug("Cannot parse %s: %s", exc.path, exc.detail)
        return ManifestFailure(FailureKind.PARSE_ERROR, exc.detail)
    except ManifestReadError as exc:
        logger.debug("Cannot read manifest for %s: %s", file_path, exc)
        return ManifestFailure(FailureKind.READ_ERROR, str(exc))

    if table.is_empty():
        logger.debug("No dependencies declared for %s", file_path)
        return ManifestFailure(FailureKind.EMPTY)
    return table


def manifest_failure_message(failure: ManifestFailure) -> str | None:
    """Diagnostic text for a failure, or None when it must stay silent."""
    if failure.kind is FailureKind.NOT_FOUND:
        return "The package.json file could not be found."
    if failure.kind is FailureKind.PARSE_ERROR:
        return f"The package.json file could not be parsed: {failure.detail}"
    if failure.kind is FailureKind.READ_ERROR:
        return failure.detail
    return None
