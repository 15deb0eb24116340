"""Import classifier — decide whether a specifier is covered by declared dependencies."""

from __future__ import annotations

from collections.abc import Callable

from extradeps.import_types import get_import_type
from extradeps.models import (
    SKIP,
    AllowPolicy,
    DependencyTable,
    ImportKind,
    ImportType,
    ReportReason,
    Verdict,
    VerdictKind,
)

Resolver = Callable[[str], str | None]


def package_name(specifier: str) -> str:
    """Package part of a specifier: ``@scope/pkg/sub`` -> ``@scope/pkg``, ``pkg/sub`` -> ``pkg``."""
    parts = specifier.split("/")
    if parts[0].startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def decide(name: str, table: DependencyTable, policy: AllowPolicy) -> Verdict:
    """Apply the allow/report table to an already extracted package name."""
    in_deps = name in table.dependencies
    in_dev = name in table.dev_dependencies
    in_opt = name in table.optional_dependencies
    in_peer = name in table.peer_dependencies

    if (
        in_deps
        or (policy.allow_dev and in_dev)
        or (policy.allow_peer and in_peer)
        or (policy.allow_optional and in_opt)
    ):
        return Verdict(VerdictKind.ALLOW, name)

    if in_dev and not policy.allow_dev:
        return Verdict(VerdictKind.REPORT, name, ReportReason.DEV)
    if in_opt and not policy.allow_optional:
        return Verdict(VerdictKind.REPORT, name, ReportReason.OPTIONAL)
    # Peer dependencies that are not allowed share the generic message.
    return Verdict(VerdictKind.REPORT, name, ReportReason.MISSING)


def classify(
    specifier: str,
    import_kind: ImportKind,
    table: DependencyTable,
    policy: AllowPolicy,
    resolve_external: Resolver,
    import_type: Callable[[str], ImportType] = get_import_type,
) -> Verdict:
    """Classify one import/require specifier.

    Type-only imports, non-external specifiers and specifiers that do not
    resolve are skipped; everything else is allowed or reported.
    """
    if import_kind is ImportKind.TYPE:
        return SKIP
    if import_type(specifier) is not ImportType.EXTERNAL:
        return SKIP
    if resolve_external(specifier) is None:
        return SKIP
    return decide(package_name(specifier), table, policy)
