"""Glob policy evaluator — turn option settings into a per-file AllowPolicy.

Patterns match the whole path, one ``/``-separated segment at a time:
``*`` and ``?`` stay inside a segment, a ``**`` segment spans any number of
segments, and ``{a,b}`` expands to alternatives. Wildcards never match a
segment that starts with a dot unless the pattern segment does too.
"""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from extradeps.models import AllowPolicy

if TYPE_CHECKING:
    from extradeps.config import RuleOptions

_BRACE_RE = re.compile(r"\{([^{}]*,[^{}]*)\}")


@dataclass(frozen=True)
class Fixed:
    """Setting that applies the same value to every file."""

    value: bool


@dataclass(frozen=True)
class GlobList:
    """Setting that is true only for files matching one of the patterns."""

    patterns: tuple[str, ...]


PolicySetting = Fixed | GlobList


@lru_cache(maxsize=256)
def _expand_braces(pattern: str) -> tuple[str, ...]:
    match = _BRACE_RE.search(pattern)
    if match is None:
        return (pattern,)
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(_expand_braces(head + option + tail))
    return tuple(expanded)


def _match_segment(name: str, pattern: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return name == pattern
    return fnmatch.fnmatchcase(name, pattern)


def _match_parts(parts: tuple[str, ...], pattern: tuple[str, ...]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        if _match_parts(parts, rest):
            return True
        return bool(parts) and not parts[0].startswith(".") and _match_parts(parts[1:], pattern)
    return bool(parts) and _match_segment(parts[0], head) and _match_parts(parts[1:], rest)


def _matches(file_path: str, pattern: str) -> bool:
    parts = tuple(file_path.split("/"))
    return any(
        _match_parts(parts, tuple(alternative.split("/")))
        for alternative in _expand_braces(pattern)
    )


def matches_config(
    setting: PolicySetting | None, file_path: str | os.PathLike, cwd: str | os.PathLike
) -> bool:
    """Evaluate one setting for *file_path*.

    An absent setting allows. Each glob is tried against the path as written
    and again after being joined onto *cwd*, so patterns may be given either
    relative to the project root or already qualified.
    """
    if setting is None:
        return True
    if isinstance(setting, Fixed):
        return setting.value

    path = os.fspath(file_path)
    base = os.fspath(cwd)
    return any(
        _matches(path, pattern) or _matches(path, os.path.normpath(os.path.join(base, pattern)))
        for pattern in setting.patterns
    )


def resolve_allow_policy(
    options: RuleOptions, file_path: str | os.PathLike, cwd: str | os.PathLike
) -> AllowPolicy:
    """Compute the effective allowances for one file."""
    return AllowPolicy(
        allow_dev=matches_config(options.setting("dev_dependencies"), file_path, cwd),
        allow_optional=matches_config(
            options.setting("optional_dependencies"), file_path, cwd
        ),
        allow_peer=matches_config(options.setting("peer_dependencies"), file_path, cwd),
    )
