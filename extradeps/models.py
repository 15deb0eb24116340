"""Data models shared by the manifest aggregator, classifier and rule runner."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


def _frozen(mapping: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


# Category attribute name -> package.json key
DEP_FIELDS: dict[str, str] = {
    "dependencies": "dependencies",
    "dev_dependencies": "devDependencies",
    "optional_dependencies": "optionalDependencies",
    "peer_dependencies": "peerDependencies",
}


@dataclass(frozen=True)
class DependencyTable:
    """Declared dependencies of a project, one read-only mapping per category.

    Version strings are kept only for completeness; classification looks at
    presence alone. A package may appear in several categories.
    """

    dependencies: Mapping[str, str] = field(default_factory=_frozen)
    dev_dependencies: Mapping[str, str] = field(default_factory=_frozen)
    optional_dependencies: Mapping[str, str] = field(default_factory=_frozen)
    peer_dependencies: Mapping[str, str] = field(default_factory=_frozen)

    def __post_init__(self) -> None:
        for name in DEP_FIELDS:
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in DEP_FIELDS)

    def merge(self, other: DependencyTable) -> DependencyTable:
        """Return a new table holding the key-wise union of both tables.

        Entries from ``other`` win on collision; nothing from ``self`` is dropped.
        """
        return DependencyTable(
            **{
                name: {**getattr(self, name), **getattr(other, name)}
                for name in DEP_FIELDS
            }
        )


class FailureKind(Enum):
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    READ_ERROR = "read_error"
    EMPTY = "empty"


@dataclass(frozen=True)
class ManifestFailure:
    """Why no DependencyTable could be produced for a file."""

    kind: FailureKind
    detail: str = ""

    @property
    def is_reportable(self) -> bool:
        # EMPTY means "nothing to check against" and stays silent.
        return self.kind is not FailureKind.EMPTY


@dataclass(frozen=True)
class AllowPolicy:
    """Effective per-file allowances. Runtime dependencies are always allowed."""

    allow_dev: bool = True
    allow_optional: bool = True
    allow_peer: bool = True


class ImportKind(Enum):
    VALUE = "value"
    TYPE = "type"
    TYPEOF = "typeof"


class ImportType(Enum):
    ABSOLUTE = "absolute"
    BUILTIN = "builtin"
    EXTERNAL = "external"
    RELATIVE = "relative"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ImportSpecifier:
    """A module specifier found at one import or require() call site."""

    value: str
    kind: ImportKind = ImportKind.VALUE
    line: int = 1
    column: int = 0
    origin: str = "import"  # "import" | "require"


class VerdictKind(Enum):
    SKIP = "skip"
    ALLOW = "allow"
    REPORT = "report"


class ReportReason(Enum):
    MISSING = "missing"
    DEV = "dev"
    OPTIONAL = "optional"


_MESSAGES: dict[ReportReason, str] = {
    ReportReason.MISSING: (
        "'{pkg}' should be listed in the project's dependencies. "
        "Run 'npm i -S {pkg}' to add it"
    ),
    ReportReason.DEV: (
        "'{pkg}' should be listed in the project's dependencies, not devDependencies."
    ),
    ReportReason.OPTIONAL: (
        "'{pkg}' should be listed in the project's dependencies, "
        "not optionalDependencies."
    ),
}


@dataclass(frozen=True)
class Verdict:
    """Outcome of classifying one specifier."""

    kind: VerdictKind
    package_name: str | None = None
    reason: ReportReason | None = None

    @property
    def message(self) -> str | None:
        if self.kind is not VerdictKind.REPORT or self.reason is None:
            return None
        return _MESSAGES[self.reason].format(pkg=self.package_name)


SKIP = Verdict(VerdictKind.SKIP)


@dataclass(frozen=True)
class Diagnostic:
    """A single reported problem in an analyzed file.

    Manifest-level problems are attached to line 0, column 0.
    """

    file_path: str
    line: int
    column: int
    message: str
    package_name: str | None = None

    def to_dict(self) -> dict:
        return {
            "file_path": self.file_path,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "package_name": self.package_name,
        }
