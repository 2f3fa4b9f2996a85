from __future__ import annotations
import codecs
from pathlib import Path
from typing import Iterable

from charset_normalizer import from_bytes

from .config import Config

def read_text_streaming(p: Path, cfg: Config, chunk_size: int = 1024 * 64) -> Iterable[str]:
    size = p.stat().st_size
    if cfg.max_file_size and size > cfg.max_file_size:
        yield f"[SKIPPED: size {size} bytes > limit {cfg.max_file_size}]"
        return
    with p.open("rb") as fh:
        data = fh.read(chunk_size)
        # configured encoding first, detection only when it fails strictly
        decoder = codecs.getincrementaldecoder(cfg.encoding)("strict")
        try:
            yield decoder.decode(data, final=len(data) < chunk_size)
            decoder.errors = cfg.errors_policy
        except UnicodeDecodeError:
            enc = cfg.encoding
            if cfg.detect_encoding:
                best = from_bytes(data).best()
                if best is not None:
                    enc = best.encoding
            decoder = codecs.getincrementaldecoder(enc)(cfg.errors_policy)
            yield decoder.decode(data)
        while True:
            chunk = fh.read(chunk_size)
            if not chunk:
                break
            yield decoder.decode(chunk)
        yield decoder.decode(b"", final=True)

def read_text(p: Path, cfg: Config) -> str:
    return "".join(read_text_streaming(p, cfg))
