"""Build constraint evaluation for Go source files."""

from __future__ import annotations

import re
from typing import List

from ..models import BuildContext
from .gosource import GoFileHeader, GoSourceError

KNOWN_OS = frozenset(
    {
        "aix",
        "android",
        "darwin",
        "dragonfly",
        "freebsd",
        "hurd",
        "illumos",
        "ios",
        "js",
        "linux",
        "nacl",
        "netbsd",
        "openbsd",
        "plan9",
        "solaris",
        "wasip1",
        "windows",
        "zos",
    }
)

KNOWN_ARCH = frozenset(
    {
        "386",
        "amd64",
        "amd64p32",
        "arm",
        "armbe",
        "arm64",
        "arm64be",
        "loong64",
        "mips",
        "mipsle",
        "mips64",
        "mips64le",
        "mips64p32",
        "mips64p32le",
        "ppc",
        "ppc64",
        "ppc64le",
        "riscv",
        "riscv64",
        "s390",
        "s390x",
        "sparc",
        "sparc64",
        "wasm",
    }
)

UNIX_OS = frozenset(
    {
        "aix",
        "android",
        "darwin",
        "dragonfly",
        "freebsd",
        "hurd",
        "illumos",
        "ios",
        "linux",
        "netbsd",
        "openbsd",
        "solaris",
    }
)

# GOOS values that also satisfy another GOOS tag.
_IMPLIED_OS = {
    "android": "linux",
    "illumos": "solaris",
    "ios": "darwin",
}

_TAG_RE = re.compile(r"^[\w.]+$")
_EXPR_TOKEN_RE = re.compile(r"\s*(\(|\)|!|&&|\|\||[\w.]+)")


def match_tag(tag: str, context: BuildContext) -> bool:
    """Report whether a single build tag is satisfied by ``context``."""
    if not tag or not _TAG_RE.match(tag):
        return False
    if tag == "cgo":
        return context.cgo_enabled
    if tag in (context.goos, context.goarch, context.compiler):
        return True
    if _IMPLIED_OS.get(context.goos) == tag:
        return True
    if tag == "unix" and context.goos in UNIX_OS:
        return True
    return tag in context.build_tags or tag in context.release_tags


def _match_term(term: str, context: BuildContext) -> bool:
    if term.startswith("!!"):
        return False
    if term.startswith("!"):
        return len(term) > 1 and not match_tag(term[1:], context)
    return match_tag(term, context)


def match_plus_build(line: str, context: BuildContext) -> bool:
    """Evaluate one ``// +build`` line: space-separated options, comma-joined terms."""
    fields = line[2:].split()[1:]
    for option in fields:
        if all(_match_term(term, context) for term in option.split(",")):
            return True
    return False


def match_go_build(expr: str, context: BuildContext) -> bool:
    """Evaluate a ``//go:build`` boolean expression."""
    return _ExprParser(expr, context).parse()


class _ExprParser:
    """Recursive descent over ``||``, ``&&``, ``!`` and parentheses."""

    def __init__(self, expr: str, context: BuildContext) -> None:
        self.expr = expr
        self.context = context
        self.tokens = self._tokenize(expr)
        self.pos = 0

    def _tokenize(self, expr: str) -> List[str]:
        tokens: List[str] = []
        index = 0
        stripped = expr.rstrip()
        while index < len(stripped):
            match = _EXPR_TOKEN_RE.match(stripped, index)
            if match is None:
                raise GoSourceError(f"invalid //go:build expression {expr!r}")
            tokens.append(match.group(1))
            index = match.end()
        if not tokens:
            raise GoSourceError("empty //go:build expression")
        return tokens

    def parse(self) -> bool:
        value = self._or()
        if self.pos != len(self.tokens):
            raise GoSourceError(f"unexpected {self.tokens[self.pos]!r} in //go:build {self.expr!r}")
        return value

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _or(self) -> bool:
        value = self._and()
        while self._peek() == "||":
            self.pos += 1
            right = self._and()
            value = value or right
        return value

    def _and(self) -> bool:
        value = self._not()
        while self._peek() == "&&":
            self.pos += 1
            right = self._not()
            value = value and right
        return value

    def _not(self) -> bool:
        if self._peek() == "!":
            self.pos += 1
            return not self._not()
        return self._atom()

    def _atom(self) -> bool:
        token = self._peek()
        if token is None:
            raise GoSourceError(f"unexpected end of //go:build {self.expr!r}")
        self.pos += 1
        if token == "(":
            value = self._or()
            if self._peek() != ")":
                raise GoSourceError(f"missing ')' in //go:build {self.expr!r}")
            self.pos += 1
            return value
        if token in (")", "&&", "||"):
            raise GoSourceError(f"unexpected {token!r} in //go:build {self.expr!r}")
        return match_tag(token, self.context)


def good_os_arch_file(filename: str, context: BuildContext) -> bool:
    """Apply the ``*_GOOS``, ``*_GOARCH`` and ``*_GOOS_GOARCH`` filename rules."""
    name = filename.split(".", 1)[0]
    underscore = name.find("_")
    if underscore < 0:
        return True
    parts = name[underscore:].split("_")
    if parts and parts[-1] == "test":
        parts = parts[:-1]
    count = len(parts)
    if count >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
        return match_tag(parts[-2], context) and match_tag(parts[-1], context)
    if count >= 1 and parts[-1] in KNOWN_OS:
        return match_tag(parts[-1], context)
    if count >= 1 and parts[-1] in KNOWN_ARCH:
        return match_tag(parts[-1], context)
    return True


def should_build(header: GoFileHeader, context: BuildContext) -> bool:
    """Decide whether a parsed file is part of the build under ``context``.

    A ``//go:build`` line, when present, replaces any ``// +build`` lines.
    """
    if header.go_build is not None:
        return match_go_build(header.go_build, context)
    return all(match_plus_build(line, context) for line in header.plus_build)


__all__ = [
    "KNOWN_ARCH",
    "KNOWN_OS",
    "good_os_arch_file",
    "match_go_build",
    "match_plus_build",
    "match_tag",
    "should_build",
]
