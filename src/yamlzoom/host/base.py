#!/usr/bin/env python3
"""
YAMLZOOM EDITOR HOST - Interface Boundary
-----------------------------------------
Everything the engine needs from the editor it is embedded in: documents,
cursor, side buffers, change/close notifications, prompts and messages.
The engine never touches windows or rendering itself.

Author: YamlZoom Team
Date: 2026-10-19
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Union

from yamlzoom.core.models import Severity

# Returned by the subscription methods; calling it removes the listener
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class DocumentHandle:
    """Opaque identity of a source document inside the host."""
    uri: str


@dataclass(frozen=True)
class BufferHandle:
    """Opaque identity of a materialized editing buffer inside the host."""
    uri: str


Handle = Union[DocumentHandle, BufferHandle]


class EditorHost(ABC):
    """The editor-side collaborator of ZoomEngine."""

    # --- Source documents ---
    @abstractmethod
    def active_document(self) -> Optional[DocumentHandle]:
        """The document the user is focused on, or None."""

    @abstractmethod
    def document_text(self, document: DocumentHandle) -> str:
        ...

    @abstractmethod
    def document_eol(self, document: DocumentHandle) -> str:
        """Detected line ending style of the document: '\\n' or '\\r\\n'."""

    @abstractmethod
    def cursor_line(self, document: DocumentHandle) -> int:
        """0-based line of the primary cursor."""

    @abstractmethod
    def line_text(self, document: DocumentHandle, line: int) -> str:
        ...

    @abstractmethod
    def apply_full_document_replace(self, document: DocumentHandle, text: str):
        """Replaces the entire content of `document` with `text`."""

    # --- Materialized buffers ---
    @abstractmethod
    def open_editable_buffer(self, content: str, language: str,
                             beside: Optional[DocumentHandle] = None) -> BufferHandle:
        """Opens a new untitled buffer, shown next to `beside`."""

    @abstractmethod
    def buffer_text(self, buffer: BufferHandle) -> str:
        ...

    @abstractmethod
    def reveal_line(self, buffer: BufferHandle, line: int):
        """Scrolls to `line` and places the cursor at column 0."""

    def highlight_line(self, buffer: BufferHandle, line: int):
        """Decorates a whole line. Hosts without decorations ignore it."""

    # --- Events ---
    @abstractmethod
    def on_buffer_changed(self, buffer: BufferHandle,
                          callback: Callable[[Handle], None]) -> Unsubscribe:
        """
        Calls `callback` with the handle of whatever changed. Hosts with a
        workspace-wide change stream may also report other documents,
        including the engine's own replace of the source.
        """

    @abstractmethod
    def on_buffer_closed(self, buffer: BufferHandle,
                         callback: Callable[[BufferHandle], None]) -> Unsubscribe:
        """Fires once, when the buffer is closed by the user."""

    # --- User interaction ---
    @abstractmethod
    def prompt_user_for_text(self, message: str) -> Optional[str]:
        """Returns the entered text, or None when the prompt was cancelled."""

    def registered_content_type_patterns(self) -> Dict[str, Sequence[str]]:
        """Content type -> regexes used as a language-detection fallback."""
        return {}

    @abstractmethod
    def notify_user(self, message: str, severity: Severity = Severity.INFO):
        ...

    @abstractmethod
    def log(self, message: str):
        ...
