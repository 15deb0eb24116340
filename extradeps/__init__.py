"""extradeps: flag imports of packages not declared in package.json."""

__version__ = "0.1.0"

from extradeps.classifier import classify, package_name
from extradeps.config import RuleOptions, load_options
from extradeps.manifest import build_dependency_table
from extradeps.models import (
    AllowPolicy,
    DependencyTable,
    Diagnostic,
    FailureKind,
    ImportKind,
    ImportSpecifier,
    ManifestFailure,
    Verdict,
    VerdictKind,
)
from extradeps.policy import Fixed, GlobList, matches_config, resolve_allow_policy
from extradeps.rule import check_file, check_files

__all__ = [
    "AllowPolicy",
    "DependencyTable",
    "Diagnostic",
    "FailureKind",
    "Fixed",
    "GlobList",
    "ImportKind",
    "ImportSpecifier",
    "ManifestFailure",
    "RuleOptions",
    "Verdict",
    "VerdictKind",
    "build_dependency_table",
    "check_file",
    "check_files",
    "classify",
    "load_options",
    "matches_config",
    "package_name",
    "resolve_allow_policy",
]
