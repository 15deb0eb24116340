"""Find import declarations and static require() calls in JS/TS source.

Best-effort lexical scan, not a parser: comments are blanked out first so
commented-out imports are ignored and string literals are recorded so text
that merely looks like an import is skipped. Two patterns pick up

    import x from 'pkg'        import type { T } from 'pkg'
    import 'pkg'               import typeof T from 'pkg'
    require('pkg')

Dynamic ``import()`` and ``require()`` with non-literal arguments are not
reported, matching what a static require check would see.
"""

from __future__ import annotations

import bisect
import re

from extradeps.models import ImportKind, ImportSpecifier

# String literals are matched so comment markers inside them are kept.
_TOKEN_RE = re.compile(
    r"""(?P<string>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"""|(?P<comment>//[^\n]*|/\*.*?\*/)""",
    re.DOTALL,
)

_IMPORT_RE = re.compile(
    r"""(?<![\w$.])import\s+"""
    r"""(?:(?P<kind>type|typeof)\s+(?!from\b))?"""  # "import type from 'x'" is a default import
    r"""(?:[\w$*{}\s,]+?\s+from\s+)?"""
    r"""(?P<quote>['"])(?P<spec>[^'"\n]+)(?P=quote)"""
)

_REQUIRE_RE = re.compile(
    r"""(?<![\w$.])require\s*\(\s*(?P<quote>['"])(?P<spec>[^'"\n]+)(?P=quote)\s*\)"""
)

_KINDS = {"type": ImportKind.TYPE, "typeof": ImportKind.TYPEOF}


def _lex(source: str) -> tuple[str, list[tuple[int, int]]]:
    """Blank comments and collect the spans of string literals."""
    strings: list[tuple[int, int]] = []

    def _blank(match: re.Match) -> str:
        if match.group("comment") is None:
            strings.append(match.span())
            return match.group(0)
        return re.sub(r"[^\n]", " ", match.group(0))

    return _TOKEN_RE.sub(_blank, source), strings


def strip_comments(source: str) -> str:
    """Replace comments with spaces, keeping newlines so offsets stay valid."""
    return _lex(source)[0]


def _inside(offset: int, spans: list[tuple[int, int]], starts: list[int]) -> bool:
    i = bisect.bisect_right(starts, offset) - 1
    return i >= 0 and offset < spans[i][1]


def _location(source: str, offset: int) -> tuple[int, int]:
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1)
    return line, column


def scan_imports(source: str) -> list[ImportSpecifier]:
    """Return every import/require specifier in *source*, in source order.

    Matches that begin inside a string literal are text, not code, and are
    dropped.
    """
    text, strings = _lex(source)
    starts = [start for start, _ in strings]
    found: list[tuple[int, ImportSpecifier]] = []

    for m in _IMPORT_RE.finditer(text):
        if _inside(m.start(), strings, starts):
            continue
        line, column = _location(text, m.start())
        kind = _KINDS.get(m.group("kind") or "", ImportKind.VALUE)
        found.append(
            (m.start(), ImportSpecifier(m.group("spec"), kind, line, column, "import"))
        )

    for m in _REQUIRE_RE.finditer(text):
        if _inside(m.start(), strings, starts):
            continue
        line, column = _location(text, m.start())
        found.append(
            (
                m.start(),
                ImportSpecifier(m.group("spec"), ImportKind.VALUE, line, column, "require"),
            )
        )

    found.sort(key=lambda item: item[0])
    return [spec for _, spec in found]
