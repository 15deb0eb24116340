"""Per-file rule runner."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from extradeps.classifier import Resolver, classify
from extradeps.config import RuleOptions
from extradeps.manifest import build_dependency_table, manifest_failure_message
from extradeps.models import Diagnostic, ManifestFailure, VerdictKind
from extradeps.policy import resolve_allow_policy
from extradeps.resolver import NodeModulesResolver, assume_resolved
from extradeps.scanner import scan_imports

logger = logging.getLogger(__name__)


def check_file(
    file_path: str | Path,
    options: RuleOptions | None = None,
    *,
    cwd: str | Path | None = None,
    source: str | None = None,
    resolver: Resolver | None = None,
) -> list[Diagnostic]:
    """Analyze one file and return its diagnostics.

    The dependency table and allow policy are computed once and shared by
    every import in the file. Nothing is carried over between calls.
    """
    options = options or RuleOptions()
    path = str(file_path)
    base = os.fspath(cwd) if cwd is not None else os.getcwd()

    table = build_dependency_table(path, options.package_dirs())
    if isinstance(table, ManifestFailure):
        message = manifest_failure_message(table)
        if message is None:
            logger.debug("Skipping %s: no dependencies declared", path)
            return []
        return [Diagnostic(path, 0, 0, message)]

    policy = resolve_allow_policy(options, path, base)
    if source is None:
        source = Path(path).read_text(encoding="utf-8", errors="replace")
    resolve = resolver if resolver is not None else NodeModulesResolver(path)

    diagnostics: list[Diagnostic] = []
    for spec in scan_imports(source):
        verdict = classify(spec.value, spec.kind, table, policy, resolve)
        if verdict.kind is not VerdictKind.REPORT:
            continue
        logger.debug("%s:%d: extraneous import of %s", path, spec.line, verdict.package_name)
        diagnostics.append(
            Diagnostic(path, spec.line, spec.column, verdict.message, verdict.package_name)
        )
    return diagnostics


def check_files(
    paths: Iterable[str | Path],
    options: RuleOptions | None = None,
    *,
    cwd: str | Path | None = None,
    resolve: bool = True,
) -> list[Diagnostic]:
    """Run :func:`check_file` over several files independently."""
    results: list[Diagnostic] = []
    resolver = None if resolve else assume_resolved
    for path in paths:
        results.extend(check_file(path, options, cwd=cwd, resolver=resolver))
    return results
