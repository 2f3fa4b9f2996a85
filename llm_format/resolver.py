"""
Ignore resolution for a single candidate path.

Order of evaluation:

1. the tool's own entry script and anything under ``.git`` are always ignored;
2. command line patterns, first match wins, no negation;
3. ``.gitignore`` files from the export root down to the candidate's parent,
   folded into one :class:`Verdict` where every matching rule overwrites the
   previous state.

The fold is global: a rule in a deeper directory always beats an earlier
one, and inside one file the last matching line wins. Git proper stops at
the closest file with a match; that difference is kept on purpose.
"""
from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from functools import reduce
from typing import Callable, Iterable, Optional

from .errors import PathOutsideRootError
from .gitignore import Rule, RuleSet, RuleSetCache, load_rule_set
from .patterns import SEP, glob_match

logger = logging.getLogger(__name__)

GIT_DIR = ".git"


class Verdict(Enum):
    UNSET = "unset"
    INCLUDE = "include"
    EXCLUDE = "exclude"

    def apply(self, rule: Rule, rel_path: str) -> "Verdict":
        if not rule.matches(rel_path):
            return self
        return Verdict.INCLUDE if rule.negated else Verdict.EXCLUDE


def default_self_path() -> Optional[str]:
    """Path of the running entry script, symlinks resolved.

    Under ``python -m llm_format`` this is the package's ``__main__.py``.
    Through the ``llm-format`` console script it is the launcher in the
    environment's ``bin/`` directory, not a file of the package; callers that
    need a different file excluded should pass ``self_path`` explicitly.
    """
    main = sys.modules.get("__main__")
    path = getattr(main, "__file__", None) or (sys.argv[0] if sys.argv else None)
    return os.path.realpath(path) if path else None


def relative_to_root(candidate: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Posix path of ``candidate`` relative to ``root`` (``"."`` for the root itself)."""
    root_abs = os.path.abspath(root)
    cand = os.path.abspath(os.path.join(root_abs, candidate))
    rel = os.path.relpath(cand, root_abs)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise PathOutsideRootError(f"'{candidate}' is not inside '{root_abs}'")
    return rel.replace(os.sep, SEP)


def ancestor_chain(root: str, rel_path: str) -> list[tuple[str, str]]:
    """(directory, candidate relative to it) from ``root`` down to the candidate's parent."""
    parts = rel_path.split(SEP)
    chain = [(root, rel_path)]
    cur = root
    for i, part in enumerate(parts[:-1]):
        cur = os.path.join(cur, part)
        chain.append((cur, SEP.join(parts[i + 1:])))
    return chain


def resolve_verdict(
    root: str,
    rel_path: str,
    load: Callable[[str], RuleSet] = load_rule_set,
) -> Verdict:
    pairs = [
        (rule, sub_path)
        for directory, sub_path in ancestor_chain(root, rel_path)
        for rule in load(directory)
    ]
    return reduce(lambda verdict, pair: verdict.apply(*pair), pairs, Verdict.UNSET)


def is_ignored(
    candidate: str | os.PathLike[str],
    root: str | os.PathLike[str],
    cli_patterns: Iterable[str],
    use_gitignore: bool,
    *,
    self_path: Optional[str] = None,
    cache: Optional[RuleSetCache] = None,
) -> bool:
    root_abs = os.path.abspath(root)
    if self_path is None:
        self_path = default_self_path()
    # checked before anything else, even for candidates outside the root
    if self_path and os.path.realpath(os.path.join(root_abs, candidate)) == os.path.realpath(self_path):
        return True
    rel = relative_to_root(candidate, root_abs)
    if rel == os.curdir:
        return False
    if rel == GIT_DIR or rel.startswith(GIT_DIR + SEP):
        return True

    for pattern in cli_patterns:
        if pattern and glob_match(pattern, rel):
            logger.debug("%s ignored by command line pattern %r", rel, pattern)
            return True

    if not use_gitignore:
        return False

    load = cache.get if cache is not None else load_rule_set
    verdict = resolve_verdict(root_abs, rel, load)
    if verdict is not Verdict.UNSET:
        logger.debug("%s -> %s", rel, verdict.value)
    return verdict is Verdict.EXCLUDE


class IgnoreResolver:
    """``is_ignored`` bound to one export root, sharing a rule cache across calls."""

    def __init__(
        self,
        root: str | os.PathLike[str],
        cli_patterns: Iterable[str] = (),
        use_gitignore: bool = False,
        *,
        self_path: Optional[str] = None,
        cache: Optional[RuleSetCache] = None,
    ) -> None:
        self.root = os.path.abspath(root)
        self.cli_patterns = tuple(cli_patterns)
        self.use_gitignore = use_gitignore
        self.self_path = os.path.realpath(self_path) if self_path else default_self_path()
        self.cache = cache if cache is not None else RuleSetCache()

    def is_ignored(self, path: str | os.PathLike[str]) -> bool:
        return is_ignored(
            path,
            self.root,
            self.cli_patterns,
            self.use_gitignore,
            self_path=self.self_path,
            cache=self.cache,
        )
