"""Classify module specifiers as relative, absolute, builtin or external."""

from __future__ import annotations

import re

from extradeps.models import ImportType

# Node.js core modules
NODE_BUILTINS = frozenset(
    {
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

_RELATIVE_RE = re.compile(r"^\.\.?(?:/|$)")
# bare: "lodash", "lodash/fp"; scoped: "@babel/core", "@babel/core/lib/x"
_EXTERNAL_RE = re.compile(r"^(?:@[\w.-]+/[\w.-]+|\w[\w.-]*)(?:/.*)?$")


def is_builtin(name: str) -> bool:
    if name.startswith("node:"):
        return True
    return name.split("/", 1)[0] in NODE_BUILTINS


def get_import_type(name: str) -> ImportType:
    if not name:
        return ImportType.UNKNOWN
    if name.startswith("/"):
        return ImportType.ABSOLUTE
    if _RELATIVE_RE.match(name):
        return ImportType.RELATIVE
    if is_builtin(name):
        return ImportType.BUILTIN
    if _EXTERNAL_RE.match(name):
        return ImportType.EXTERNAL
    return ImportType.UNKNOWN
