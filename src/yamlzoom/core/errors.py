#!/usr/bin/env python3
"""
YAMLZOOM ERRORS
---------------
Every failure the engine can surface to a user. Each error carries the
severity it should be shown with, so the operation boundary in the engine
can convert it to a notification without inspecting its type.

Author: YamlZoom Team
Date: 2026-10-19
"""

from typing import Optional

from yamlzoom.core.models import Severity


class YamlZoomError(Exception):
    """Base class for all user-facing YamlZoom failures."""

    severity = Severity.ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoActiveSource(YamlZoomError):
    """No source document was available when an operation started."""

    def __init__(self, message: str = "No active editor!"):
        super().__init__(message)


class PathNotFound(YamlZoomError):
    """The requested path does not exist (or cannot be created) in the tree."""

    def __init__(self, path: str, reason: Optional[str] = None):
        message = f"Field not found in YAML {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path


class PathInferenceFailed(YamlZoomError):
    """No path could be inferred from the cursor position."""

    severity = Severity.WARNING

    def __init__(self, fragment: str):
        super().__init__(f'Could not determine path for value "{fragment}".')
        self.fragment = fragment


class ParseFailure(YamlZoomError):
    """The source text is not valid YAML."""

    def __init__(self, detail: str, line: Optional[int] = None, column: Optional[int] = None):
        location = f" (line {line + 1}, column {column + 1})" if line is not None and column is not None else ""
        super().__init__(f"Invalid YAML{location}: {detail}")
        self.detail = detail
        self.line = line
        self.column = column


class SerializeFailure(YamlZoomError):
    """The mutated tree could not be turned back into text."""

    def __init__(self, detail: str):
        super().__init__(f"Unable to serialize updated YAML: {detail}")
        self.detail = detail


class ConfigError(YamlZoomError):
    """The configuration is malformed or names an unknown option."""
