"""Lightweight Go source header parser.

Only the part of a Go file that decides how it participates in a package is
read: build constraint comments, the package clause and the import
declarations. Everything after the last import is ignored, so files with
syntax errors in function bodies still parse.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass, field
from typing import List, Optional


class GoSourceError(ValueError):
    """Raised when a Go file header cannot be understood."""


@dataclass
class GoFileHeader:
    """Package clause, imports and constraint lines of one Go file."""

    package: str
    imports: List[str] = field(default_factory=list)
    go_build: Optional[str] = None
    plus_build: List[str] = field(default_factory=list)

    @property
    def uses_cgo(self) -> bool:
        return "C" in self.imports


# Comments and literals, so that comment stripping never looks inside strings.
_LEXEME_RE = re.compile(
    r"""//[^\n]*|/\*.*?\*/|"(?:[^"\\\n]|\\.)*"|`[^`]*`|'(?:[^'\\\n]|\\.)*'""",
    re.DOTALL,
)
_PACKAGE_RE = re.compile(r"\s*package\s+([^\W\d]\w*)")
_IMPORT_RE = re.compile(r"[\s;]*import\b\s*")
_SPEC_RE = re.compile(
    r"""\s*(?:([^\W\d]\w*|\.)\s*)?("(?:[^"\\\n]|\\.)*"|`[^`]*`)[ \t]*;?"""
)
_GROUP_CLOSE_RE = re.compile(r"[\s;]*\)")
_GO_BUILD_RE = re.compile(r"^//go:build(?:\s+(.*))?$")
_PLUS_BUILD_RE = re.compile(r"^//\s*\+build(?:\s|$)")


def parse_header(text: str) -> GoFileHeader:
    """Parse the header of the Go source ``text``."""
    go_build, plus_build = _constraint_lines(text)
    code = _LEXEME_RE.sub(_blank_comment, text)

    match = _PACKAGE_RE.match(code)
    if match is None:
        raise GoSourceError("expected 'package' clause")
    header = GoFileHeader(package=match.group(1), go_build=go_build, plus_build=plus_build)

    pos = match.end()
    while True:
        keyword = _IMPORT_RE.match(code, pos)
        if keyword is None:
            break
        pos = keyword.end()
        if code.startswith("(", pos):
            pos += 1
            while True:
                close = _GROUP_CLOSE_RE.match(code, pos)
                if close is not None:
                    pos = close.end()
                    break
                pos = _read_spec(code, pos, header.imports)
        else:
            pos = _read_spec(code, pos, header.imports)
    return header


def _read_spec(code: str, pos: int, imports: List[str]) -> int:
    spec = _SPEC_RE.match(code, pos)
    if spec is None:
        line = code.count("\n", 0, pos) + 1
        raise GoSourceError(f"malformed import declaration at line {line}")
    path = _unquote(spec.group(2))
    if not path:
        raise GoSourceError("empty import path")
    imports.append(path)
    return spec.end()


def _unquote(literal: str) -> str:
    if literal.startswith("`"):
        return literal[1:-1]
    try:
        value = ast.literal_eval(literal)
    except (SyntaxError, ValueError) as exc:
        raise GoSourceError(f"invalid import path literal {literal}") from exc
    return str(value)


def _blank_comment(match: re.Match[str]) -> str:
    lexeme = match.group(0)
    if lexeme.startswith("//"):
        return ""
    if lexeme.startswith("/*"):
        # Keep line numbers stable for error messages.
        return " " + "\n" * lexeme.count("\n")
    return lexeme


def _constraint_lines(text: str) -> tuple[Optional[str], List[str]]:
    """Return the ``//go:build`` expression and ``// +build`` lines of a file.

    Constraints live in the leading run of ``//`` comments and blank lines and
    must be followed by a blank line, which separates them from the package
    documentation comment.
    """
    run: List[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if line and not line.startswith("//"):
            break
        run.append(line)

    last_blank = 0
    for index, line in enumerate(run):
        if not line:
            last_blank = index

    go_build: Optional[str] = None
    plus_build: List[str] = []
    for line in run[:last_blank]:
        match = _GO_BUILD_RE.match(line)
        if match is not None:
            if go_build is not None:
                raise GoSourceError("multiple //go:build comments")
            go_build = (match.group(1) or "").strip()
            continue
        if _PLUS_BUILD_RE.match(line):
            plus_build.append(line)
    return go_build, plus_build


__all__ = ["GoFileHeader", "GoSourceError", "parse_header"]
