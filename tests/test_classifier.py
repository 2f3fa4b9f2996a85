from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from llm_format import classifier as classifier_mod
from llm_format.classifier import (
    DEFAULT_MIME,
    FallbackClassifier,
    FileCommandClassifier,
    default_classifier,
)


def _completed(stdout: str, returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


def test_fallback_detects_null_byte(tmp_path: Path) -> None:
    text = tmp_path / "a.txt"
    text.write_text("hello world\njust ascii", encoding="utf-8")
    binary = tmp_path / "a.dat"
    binary.write_bytes(b"hello\x00world")
    c = FallbackClassifier()
    assert c.is_binary(text) is False
    assert c.is_binary(binary) is True


def test_fallback_only_scans_leading_bytes(tmp_path: Path) -> None:
    p = tmp_path / "late.dat"
    p.write_bytes(b"a" * 100 + b"\x00")
    assert FallbackClassifier(sample_size=50).is_binary(p) is False
    assert FallbackClassifier().is_binary(p) is True


def test_fallback_mime_type(tmp_path: Path) -> None:
    c = FallbackClassifier()
    assert c.mime_type(tmp_path / "page.html") == "text/html"
    assert c.mime_type(tmp_path / "Makefile") == DEFAULT_MIME


def test_file_command_output_is_used(tmp_path: Path, monkeypatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return _completed("binary\n" if "--mime-encoding" in cmd else "image/png\n")

    monkeypatch.setattr(classifier_mod.subprocess, "run", fake_run)
    c = FileCommandClassifier()
    p = tmp_path / "x.png"
    assert c.is_binary(p) is True
    assert c.mime_type(p) == "image/png"
    assert calls[0] == ["file", "-b", "--mime-encoding", str(p)]


def test_file_command_text_encoding(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(classifier_mod.subprocess, "run", lambda cmd, **kw: _completed("us-ascii\n"))
    assert FileCommandClassifier().is_binary(tmp_path / "x") is False


@pytest.mark.parametrize("failure", ["missing", "nonzero", "empty"])
def test_file_command_failure_uses_fallback(tmp_path: Path, monkeypatch, failure: str) -> None:
    def fake_run(cmd, **kwargs):
        if failure == "missing":
            raise FileNotFoundError(cmd[0])
        if failure == "nonzero":
            return _completed("", returncode=1)
        return _completed("  \n")

    monkeypatch.setattr(classifier_mod.subprocess, "run", fake_run)
    p = tmp_path / "data.json"
    p.write_bytes(b'{"a":\x00}')
    c = FileCommandClassifier()
    assert c.is_binary(p) is True
    assert c.mime_type(p) == "application/json"


def test_default_classifier_depends_on_path(monkeypatch) -> None:
    monkeypatch.setattr(classifier_mod.shutil, "which", lambda name: None)
    assert isinstance(default_classifier(), FallbackClassifier)
    monkeypatch.setattr(classifier_mod.shutil, "which", lambda name: "/usr/bin/file")
    assert isinstance(default_classifier(), FileCommandClassifier)
