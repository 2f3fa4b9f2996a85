from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .patterns import GLOBSTAR, SEP, Matcher, compile_pattern

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"


@dataclass(frozen=True, slots=True)
class Rule:
    raw_pattern: str
    negated: bool
    anchored: bool
    has_globstar: bool
    owning_directory: str
    matcher: Matcher = field(repr=False, compare=False)

    def matches(self, rel_path: str) -> bool:
        return self.matcher.matches(rel_path)


RuleSet = tuple[Rule, ...]


def parse_line(line: str, directory: str) -> Optional[Rule]:
    # escaped trailing space survives, any other trailing whitespace does not
    if line.endswith("\\ "):
        line = line[:-2] + " "
    else:
        line = line.rstrip()
    if not line:
        return None
    if line.startswith("#"):
        return None
    if line.startswith("\\#"):
        line = line[1:]
    negated = False
    if line.startswith("!"):
        negated = True
        line = line[1:]
    elif line.startswith("\\!"):
        line = line[1:]
    if not line:
        return None
    return Rule(
        raw_pattern=line,
        negated=negated,
        anchored=SEP in line,
        has_globstar=GLOBSTAR in line,
        owning_directory=directory,
        matcher=compile_pattern(line, directory),
    )


def parse_lines(lines: Iterable[str], directory: str) -> RuleSet:
    rules = (parse_line(line, directory) for line in lines)
    return tuple(r for r in rules if r is not None)


def load_rule_set(directory: str) -> RuleSet:
    """Rules of ``directory``'s ignore file; empty when it is missing or unreadable."""
    path = os.path.join(directory, IGNORE_FILE)
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            text = fh.read()
    except OSError as e:
        logger.debug("No rules from %s: %s", path, e)
        return ()
    return parse_lines(text.splitlines(), directory)


class RuleSetCache:
    """Per-run directory -> RuleSet cache, reloaded when the ignore file changes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: dict[str, tuple[Optional[float], RuleSet]] = {}

    def _mtime(self, directory: str) -> Optional[float]:
        try:
            return os.stat(os.path.join(directory, IGNORE_FILE)).st_mtime
        except OSError:
            return None

    def get(self, directory: str) -> RuleSet:
        key = os.fspath(directory)
        mtime = self._mtime(key)
        # held while loading so each directory is parsed at most once
        with self._lock:
            cached = self._snapshot.get(key)
            if cached is None or cached[0] != mtime:
                rules = load_rule_set(key) if mtime is not None else ()
                cached = (mtime, rules)
                self._snapshot[key] = cached
            return cached[1]

    def clear(self) -> None:
        with self._lock:
            self._snapshot.clear()

    def __len__(self) -> int:
        return len(self._snapshot)
