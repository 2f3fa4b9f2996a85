"""
CLI entrypoint for llm_format.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .clipboard import copy_to_clipboard
from .config import Config, load_defaults
from .errors import LlmFormatError
from .walker import Walker, build_output, resolve_root

logger = logging.getLogger("llm_format")

EPILOG = 'Example:\n  llm-format -d ./my-project -g -i "dist/*,*.env" -c'


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="llm-format",
        description="Formats the contents of a directory for consumption by an LLM.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-d", "--dir", default=".", help="The directory to process (default: current directory)")
    p.add_argument(
        "-g",
        "--use-gitignore",
        action="store_true",
        help="Exclude files and directories specified by any found .gitignore files",
    )
    p.add_argument(
        "-i",
        "--ignore",
        default="",
        help='A comma-separated list of glob patterns to ignore (e.g. "*.log,build/*,vendor")',
    )
    p.add_argument(
        "-c",
        "--copy",
        action="store_true",
        help="Copy the output to the system clipboard instead of printing it",
    )
    p.add_argument("--config", type=Path, help="Read defaults from this JSON file instead of ~/.llm_format.json")
    p.add_argument("--no-config", action="store_true", help="Ignore the defaults file")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def parse_ignore_list(value: str) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(p for p in (part.strip() for part in value.split(",")) if p)


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_config(ns: argparse.Namespace) -> Config:
    cfg = Config() if ns.no_config else load_defaults(ns.config)
    cfg.ignore_patterns = tuple(cfg.ignore_patterns) + parse_ignore_list(ns.ignore)
    cfg.use_gitignore = cfg.use_gitignore or ns.use_gitignore
    cfg.copy_to_clipboard = cfg.copy_to_clipboard or ns.copy
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = _parse_args(argv)
    setup_logging(ns.verbose)
    try:
        cfg = build_config(ns)
        root = resolve_root(ns.dir)
        logger.debug("Scanning %s", root)
        output = build_output(root, walker=Walker(cfg))

        if not output.strip():
            print("No files were found to process with the given criteria.", file=sys.stderr)
            return 0

        if cfg.copy_to_clipboard:
            copy_to_clipboard(output)
            print("Formatted content has been copied to the clipboard.", file=sys.stderr)
        else:
            sys.stdout.write(output)
        return 0
    except LlmFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
