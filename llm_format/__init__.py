"""
llm_format - formats a project tree into one text block for LLM ingestion.

Files are filtered by layered .gitignore rules and command line globs,
binary files are skipped, and the result goes to stdout or the clipboard.
"""

__version__ = "0.1.0"
