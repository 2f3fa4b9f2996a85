from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from .classifier import ContentClassifier, default_classifier
from .config import Config
from .errors import InvalidRootError
from .formatter import DumpBuilder
from .gitignore import RuleSetCache
from .reader import read_text
from .resolver import IgnoreResolver

logger = logging.getLogger(__name__)

def resolve_root(path: str | os.PathLike[str]) -> Path:
    try:
        root = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve directory '{path}': {e}") from e
    if not root.exists():
        raise InvalidRootError(f"The specified directory '{path}' does not exist.")
    if not root.is_dir():
        raise InvalidRootError(f"The specified path '{path}' is not a directory.")
    return root

class Walker:
    def __init__(self, cfg: Optional[Config] = None, self_path: Optional[str] = None) -> None:
        self.cfg = cfg or Config()
        self.self_path = self_path

    def resolver_for(self, root: Path) -> IgnoreResolver:
        # one rule cache per run: ignore files are assumed not to change mid-export
        return IgnoreResolver(
            root,
            self.cfg.ignore_patterns,
            self.cfg.use_gitignore,
            self_path=self.self_path,
            cache=RuleSetCache(),
        )

    def list_entries(self, dir_path: Path, resolver: IgnoreResolver) -> list[Path]:
        # directory listing order, deliberately unsorted
        with os.scandir(dir_path) as it:
            entries = [Path(e.path) for e in it]
        out = []
        for p in entries:
            if p.is_symlink() and not self.cfg.follow_symlinks:
                continue
            if resolver.is_ignored(p):
                continue
            out.append(p)
        return out

    def iter_files(self, root: Path, resolver: Optional[IgnoreResolver] = None) -> list[Path]:
        resolver = resolver or self.resolver_for(root)
        files: list[Path] = []

        def rec(cur: Path) -> None:
            try:
                entries = self.list_entries(cur, resolver)
            except OSError as e:
                logger.warning("Warning: Could not read directory %s (%s)", cur, e.strerror or e)
                return
            for p in entries:
                if p.is_dir():
                    rec(p)
                elif p.is_file() and os.access(p, os.R_OK):
                    files.append(p)

        rec(root)
        return files

def build_output(root: Path, cfg: Optional[Config] = None,
                 classifier: Optional[ContentClassifier] = None,
                 walker: Optional[Walker] = None) -> str:
    walker = walker or Walker(cfg)
    cfg = walker.cfg
    classifier = classifier or default_classifier()
    out = DumpBuilder()
    for p in walker.iter_files(root):
        rel = p.relative_to(root).as_posix()
        try:
            if classifier.is_binary(p):
                logger.info("Skipping binary file: %s", rel)
                continue
            content = read_text(p, cfg)
        except OSError as e:
            logger.warning("Warning: Could not read file %s (%s)", rel, e.strerror or e)
            continue
        out.add_file(rel, classifier.mime_type(p), content)
    return out.build()
