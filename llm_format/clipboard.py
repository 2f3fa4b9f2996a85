"""Clipboard transfer through the OSC 52 terminal escape sequence."""
from __future__ import annotations

import base64
import sys
from typing import Optional, TextIO

OSC52 = "\033]52;c;{payload}\a"


def osc52(text: str) -> str:
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return OSC52.format(payload=payload)


def copy_to_clipboard(text: str, stream: Optional[TextIO] = None) -> None:
    # needs a terminal that honours OSC 52 (kitty, WezTerm, iTerm2, Windows Terminal)
    out = stream or sys.stdout
    out.write(osc52(text))
    out.flush()
