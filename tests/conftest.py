from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sample_project_tree(tmp_path: Path) -> Path:
    """
    Small project used by the walker/formatter/cli tests:
        tmp_path/
          proj/
            .gitignore          (*.log, build/)
            README.md
            app.log
            build/out.txt
            src/main.py
            src/utils/helpers.py
            .git/HEAD
    Returns the path to 'proj'.
    """
    proj = tmp_path / "proj"
    src = proj / "src" / "utils"
    src.mkdir(parents=True, exist_ok=True)
    (proj / "README.md").write_text("# Sample project\n", encoding="utf-8")
    (proj / ".gitignore").write_text("*.log\nbuild/\n", encoding="utf-8")
    (proj / "app.log").write_text("noise\n", encoding="utf-8")
    (proj / "build").mkdir()
    (proj / "build" / "out.txt").write_text("artifact\n", encoding="utf-8")
    (proj / "src" / "main.py").write_text("print('hello')\n", encoding="utf-8")
    (src / "helpers.py").write_text("def add(a, b): return a + b\n", encoding="utf-8")
    (proj / ".git").mkdir()
    (proj / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    return proj


@pytest.fixture
def write_tree(tmp_path: Path):
    """Create files from a {relative path: content} mapping under tmp_path/root."""
    root = tmp_path / "root"
    root.mkdir()

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content, encoding="utf-8")
        return root

    return _write
