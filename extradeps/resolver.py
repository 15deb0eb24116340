"""Module resolvers used to confirm that an external specifier exists."""

from __future__ import annotations

import logging
from pathlib import Path

from extradeps.classifier import package_name

logger = logging.getLogger(__name__)

_EXTENSIONS = ("", ".js", ".mjs", ".cjs", ".json", ".ts", ".tsx", ".jsx", ".d.ts")


class NodeModulesResolver:
    """Resolve specifiers by looking through node_modules directories.

    Search starts in the analyzed file's directory and walks upward, like
    Node's own lookup. Only presence is checked; package ``exports`` maps
    are not interpreted.
    """

    def __init__(self, file_path: str | Path):
        start = Path(file_path).absolute()
        self._base = start if start.is_dir() else start.parent

    def _candidates(self, root: Path, specifier: str):
        target = root / specifier
        for ext in _EXTENSIONS:
            yield target.with_name(target.name + ext) if ext else target

    def __call__(self, specifier: str) -> str | None:
        pkg = package_name(specifier)
        for directory in (self._base, *self._base.parents):
            modules = directory / "node_modules"
            if not (modules / pkg).exists():
                continue
            if specifier == pkg:
                return str(modules / pkg)
            for candidate in self._candidates(modules, specifier):
                if candidate.exists():
                    return str(candidate)
        logger.debug("Could not resolve %s from %s", specifier, self._base)
        return None


def assume_resolved(specifier: str) -> str:
    """Resolver that treats every specifier as resolvable."""
    return specifier
