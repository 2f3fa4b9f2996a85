"""
Glob compiler for ignore patterns.

Patterns are translated once into regular expressions and wrapped in small
matcher objects. All matching is done on posix-style relative paths, so the
separator is always ``/``.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

SEP = "/"
GLOBSTAR = "**"


class Matcher(Protocol):
    def matches(self, rel_path: str) -> bool: ...


def _translate_class(pat: str, i: int) -> tuple[str, int] | None:
    # i points just past "["; returns (regex, next index) or None if unterminated
    n = len(pat)
    j = i
    if j < n and pat[j] in "!^":
        j += 1
    if j < n and pat[j] == "]":
        j += 1
    while j < n and pat[j] != "]":
        j += 1
    if j >= n:
        return None
    body = pat[i:j]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    chars = []
    k = 0
    while k < len(body):
        ch = body[k]
        if ch == "\\" and k + 1 < len(body):
            chars.append(re.escape(body[k + 1]))
            k += 2
            continue
        chars.append("-" if ch == "-" else re.escape(ch))
        k += 1
    inner = "".join(chars)
    # a bracket expression never matches the separator
    if negate:
        return f"[^/{inner}]", j + 1
    return f"(?!/)[{inner}]", j + 1


def translate(pattern: str, globstar: bool = False) -> str:
    """Translate a glob into a regex body where ``*`` and ``?`` stop at ``/``.

    With ``globstar`` a ``**/`` at the start of a segment matches zero or
    more whole segments and any other ``**`` matches across separators;
    every other character, brackets and backslashes included, is literal.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i + 1
            while j < n and pattern[j] == "*":
                j += 1
            if globstar and j - i >= 2:
                at_segment_start = i == 0 or pattern[i - 1] == SEP
                if at_segment_start and j < n and pattern[j] == SEP:
                    out.append("(?:.*/)?")
                    i = j + 1
                else:
                    out.append(".*")
                    i = j
                continue
            out.append("[^/]*")
            i = j
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif globstar:
            # only *, ? and ** are special in globstar patterns
            out.append(re.escape(c))
            i += 1
        elif c == "[":
            cls = _translate_class(pattern, i + 1)
            if cls is None:
                out.append(re.escape(c))
                i += 1
            else:
                out.append(cls[0])
                i = cls[1]
        elif c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


@lru_cache(maxsize=1024)
def compile_glob(pattern: str, globstar: bool = False) -> re.Pattern[str]:
    try:
        return re.compile(f"(?s:{translate(pattern, globstar)})\\Z")
    except re.error as e:
        # e.g. a reversed range "[z-a]": fall back to a literal match
        logger.debug("Treating pattern %r literally: %s", pattern, e)
        return re.compile(f"(?s:{re.escape(pattern)})\\Z")


def glob_match(pattern: str, path: str) -> bool:
    """Separator-sensitive match of the whole ``path`` against ``pattern``."""
    return compile_glob(pattern).match(path) is not None


@dataclass(frozen=True, slots=True)
class ComponentMatcher:
    pattern: str
    regex: re.Pattern[str] = field(repr=False)

    def matches(self, rel_path: str) -> bool:
        return any(self.regex.match(part) for part in rel_path.split(SEP))


@dataclass(frozen=True, slots=True)
class PathMatcher:
    pattern: str
    directory: str
    regex: re.Pattern[str] = field(repr=False)
    is_dir: Callable[[str], bool] = field(default=os.path.isdir, repr=False, compare=False)

    def matches(self, rel_path: str) -> bool:
        if self.regex.match(rel_path):
            return True
        # a bare directory name also covers everything below it
        if not self.pattern or not rel_path.startswith(self.pattern + SEP):
            return False
        return self.is_dir(os.path.join(self.directory, self.pattern))


@dataclass(frozen=True, slots=True)
class GlobstarMatcher:
    pattern: str
    regex: re.Pattern[str] = field(repr=False)

    def matches(self, rel_path: str) -> bool:
        return self.regex.match(rel_path) is not None


def compile_pattern(
    pattern: str,
    directory: str = "",
    is_dir: Callable[[str], bool] = os.path.isdir,
) -> Matcher:
    """Compile one cleaned ignore pattern owned by ``directory``."""
    if SEP not in pattern:
        return ComponentMatcher(pattern, compile_glob(pattern))
    anchored = pattern[1:] if pattern.startswith(SEP) else pattern
    if GLOBSTAR in anchored:
        return GlobstarMatcher(anchored, compile_glob(anchored, globstar=True))
    base = anchored.rstrip(SEP)
    return PathMatcher(base, directory, compile_glob(base), is_dir)
