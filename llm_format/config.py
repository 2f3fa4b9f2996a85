from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional
import json

from .errors import ConfigFileError

RC_PATH = Path.home() / ".llm_format.json"

@dataclass(slots=True)
class Config:
    # glob patterns applied before any .gitignore, no negation
    ignore_patterns: tuple[str, ...] = ()
    use_gitignore: bool = False
    copy_to_clipboard: bool = False
    encoding: str = "utf-8"
    errors_policy: str = "replace"
    detect_encoding: bool = True
    max_file_size: int = 0  # 0 = no limit
    follow_symlinks: bool = False

def _from_dict(data: dict[str, object]) -> Config:
    cfg = Config()
    names = {f.name for f in fields(Config)}
    for k, v in data.items():
        if k in names:
            setattr(cfg, k, tuple(v) if k == "ignore_patterns" else v)
    return cfg

def load_defaults(path: Optional[Path] = None) -> Config:
    """Read the rc file; a broken default rc file silently yields defaults.

    An explicitly passed ``path`` must exist and parse.
    """
    if path is not None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigFileError(f"Could not read config file '{path}': {e}") from e
        if not isinstance(data, dict):
            raise ConfigFileError(f"Config file '{path}' must contain a JSON object")
        return _from_dict(data)
    if RC_PATH.exists():
        try:
            data = json.loads(RC_PATH.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return _from_dict(data)
        except (OSError, ValueError):
            pass
    return Config()

def save_defaults(cfg: Config, path: Optional[Path] = None) -> None:
    (path or RC_PATH).write_text(json.dumps(asdict(cfg), ensure_ascii=False, indent=2), encoding="utf-8")
