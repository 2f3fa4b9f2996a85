from __future__ import annotations
import io

from .classifier import DEFAULT_MIME

BEGIN = "--- BEGIN FILE: {path} (MIME: {mime}) ---\n"
END = "\n--- END FILE: {path} ---\n\n"

class DumpBuilder:
    def __init__(self) -> None:
        self.buf = io.StringIO()
        self._cur: str | None = None
        self.files: list[str] = []

    def start_file(self, relpath: str, mime: str = DEFAULT_MIME) -> None:
        if self._cur is not None:
            self.end_file()
        self._cur = relpath
        self.files.append(relpath)
        self.buf.write(BEGIN.format(path=relpath, mime=mime or DEFAULT_MIME))

    def add_chunk(self, s: str) -> None:
        self.buf.write(s)

    def end_file(self) -> None:
        if self._cur is None:
            return
        self.buf.write(END.format(path=self._cur))
        self._cur = None

    def add_file(self, relpath: str, mime: str, content: str) -> None:
        self.start_file(relpath, mime)
        self.add_chunk(content)
        self.end_file()

    def build(self) -> str:
        self.end_file()
        return self.buf.getvalue()
