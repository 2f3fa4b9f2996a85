"""Exceptions raised by llm_format."""

from __future__ import annotations


class LlmFormatError(Exception):
    """Base exception for llm_format."""


class InvalidRootError(LlmFormatError):
    """Raised when the export root is missing or not a directory."""


class PathOutsideRootError(LlmFormatError, ValueError):
    """Raised when a candidate path is not below the export root."""


class ConfigFileError(LlmFormatError):
    """Raised when an explicitly requested config file cannot be read."""
