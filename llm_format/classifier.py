"""
Binary / MIME classification.

The default classifier asks the ``file`` utility; when it is missing or fails
the pure fallback looks for a null byte in the first bytes of the file and
guesses the MIME type from the extension.
"""
from __future__ import annotations

import logging
import mimetypes
import os
import shutil
import subprocess
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"
SAMPLE_SIZE = 8192


class ContentClassifier(Protocol):
    def is_binary(self, path: str | os.PathLike[str]) -> bool: ...

    def mime_type(self, path: str | os.PathLike[str]) -> str: ...


class FallbackClassifier:
    def __init__(self, sample_size: int = SAMPLE_SIZE) -> None:
        self.sample_size = sample_size

    def is_binary(self, path: str | os.PathLike[str]) -> bool:
        with open(path, "rb") as fh:
            return b"\x00" in fh.read(self.sample_size)

    def mime_type(self, path: str | os.PathLike[str]) -> str:
        mime, _ = mimetypes.guess_type(os.fspath(path))
        return mime or DEFAULT_MIME


class FileCommandClassifier:
    def __init__(self, command: str = "file", fallback: Optional[ContentClassifier] = None) -> None:
        self.command = command
        self.fallback = fallback or FallbackClassifier()

    def _query(self, flag: str, path: str | os.PathLike[str]) -> Optional[str]:
        try:
            proc = subprocess.run(
                [self.command, "-b", flag, os.fspath(path)],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.debug("%s unavailable: %s", self.command, e)
            return None
        if proc.returncode != 0:
            return None
        return proc.stdout.strip() or None

    def is_binary(self, path: str | os.PathLike[str]) -> bool:
        encoding = self._query("--mime-encoding", path)
        if encoding is None:
            return self.fallback.is_binary(path)
        return encoding == "binary"

    def mime_type(self, path: str | os.PathLike[str]) -> str:
        return self._query("--mime-type", path) or self.fallback.mime_type(path)


def default_classifier() -> ContentClassifier:
    if shutil.which("file"):
        return FileCommandClassifier()
    logger.debug("'file' not found on PATH, using null-byte detection")
    return FallbackClassifier()
