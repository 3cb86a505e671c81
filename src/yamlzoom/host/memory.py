#!/usr/bin/env python3
"""
YAMLZOOM MEMORY HOST - In-Process Editor
----------------------------------------
A complete EditorHost backed by plain Python objects. Used by the test
suite and by programs that drive the engine without a real editor.

Like a real editor's workspace-wide change stream, every text change (the
engine's own replace of the source included) is reported to every change
listener, synchronously, before the mutating call returns.

Author: YamlZoom Team
Date: 2026-10-19
"""

import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from yamlzoom.core.models import Severity
from yamlzoom.host.base import BufferHandle, DocumentHandle, EditorHost, Handle, Unsubscribe
from yamlzoom.host.formatter import ZoomFormatter


@dataclass
class MemoryDocument:
    """Text plus cursor of one open document or buffer."""
    text: str
    language: str = "yaml"
    cursor_line: int = 0
    highlighted: List[int] = field(default_factory=list)

    @property
    def eol(self) -> str:
        return "\r\n" if "\r\n" in self.text else "\n"


class MemoryHost(EditorHost):
    """In-memory editor: documents, buffers, events and recorded messages."""

    def __init__(self, formatter: Optional[ZoomFormatter] = None,
                 content_type_patterns: Optional[Dict[str, Sequence[str]]] = None,
                 prompt_answers: Optional[List[Optional[str]]] = None):
        self.formatter = formatter
        self.content_type_patterns = content_type_patterns or {}
        self.prompt_answers = list(prompt_answers or [])

        self.documents: Dict[DocumentHandle, MemoryDocument] = {}
        self.buffers: Dict[BufferHandle, MemoryDocument] = {}
        self.active: Optional[DocumentHandle] = None

        self.notifications: List[Tuple[Severity, str]] = []
        self.log_lines: List[str] = []
        self.prompts: List[str] = []
        self.replace_count = 0

        self._change_listeners: List[Tuple[int, Callable[[Handle], None]]] = []
        self._close_listeners: Dict[BufferHandle, List[Tuple[int, Callable[[BufferHandle], None]]]] = {}
        self._ids = itertools.count(1)

    # --- Test / embedding helpers ---
    def open_document(self, uri: str, text: str, cursor_line: int = 0, activate: bool = True) -> DocumentHandle:
        handle = DocumentHandle(uri)
        self.documents[handle] = MemoryDocument(text=text, cursor_line=cursor_line)
        if activate:
            self.active = handle
        return handle

    def set_cursor(self, document: DocumentHandle, line: int):
        self.documents[document].cursor_line = line

    def edit_buffer(self, buffer: BufferHandle, text: str):
        """Simulates the user typing into a buffer."""
        self.buffers[buffer].text = text
        self._fire_change(buffer)

    def close_buffer(self, buffer: BufferHandle):
        """Simulates the user closing a buffer. Close listeners fire once."""
        self.buffers.pop(buffer, None)
        for _, callback in self._close_listeners.pop(buffer, []):
            callback(buffer)

    # --- EditorHost ---
    def active_document(self) -> Optional[DocumentHandle]:
        return self.active

    def document_text(self, document: DocumentHandle) -> str:
        return self.documents[document].text

    def document_eol(self, document: DocumentHandle) -> str:
        return self.documents[document].eol

    def cursor_line(self, document: DocumentHandle) -> int:
        return self.documents[document].cursor_line

    def line_text(self, document: DocumentHandle, line: int) -> str:
        lines = self.documents[document].text.splitlines()
        return lines[line] if 0 <= line < len(lines) else ""

    def apply_full_document_replace(self, document: DocumentHandle, text: str):
        old_text = self.documents[document].text
        self.documents[document].text = text
        self.replace_count += 1
        if self.formatter:
            self.formatter.show_write_back(document.uri, old_text, text)
        self._fire_change(document)

    def open_editable_buffer(self, content: str, language: str,
                             beside: Optional[DocumentHandle] = None) -> BufferHandle:
        handle = BufferHandle(f"untitled:zoom-{next(self._ids)}")
        self.buffers[handle] = MemoryDocument(text=content, language=language)
        if self.formatter:
            self.formatter.show_buffer(handle.uri, content, language)
        return handle

    def buffer_text(self, buffer: BufferHandle) -> str:
        return self.buffers[buffer].text

    def reveal_line(self, buffer: BufferHandle, line: int):
        self.buffers[buffer].cursor_line = line

    def highlight_line(self, buffer: BufferHandle, line: int):
        self.buffers[buffer].highlighted.append(line)

    def on_buffer_changed(self, buffer: BufferHandle,
                          callback: Callable[[Handle], None]) -> Unsubscribe:
        token = next(self._ids)
        self._change_listeners.append((token, callback))

        def unsubscribe():
            self._change_listeners = [(t, cb) for t, cb in self._change_listeners if t != token]
        return unsubscribe

    def on_buffer_closed(self, buffer: BufferHandle,
                         callback: Callable[[BufferHandle], None]) -> Unsubscribe:
        token = next(self._ids)
        self._close_listeners.setdefault(buffer, []).append((token, callback))

        def unsubscribe():
            # A closed buffer's listeners are already gone
            if buffer in self._close_listeners:
                listeners = self._close_listeners[buffer]
                self._close_listeners[buffer] = [(t, cb) for t, cb in listeners if t != token]
        return unsubscribe

    def prompt_user_for_text(self, message: str) -> Optional[str]:
        self.prompts.append(message)
        if not self.prompt_answers:
            return None
        return self.prompt_answers.pop(0)

    def registered_content_type_patterns(self) -> Dict[str, Sequence[str]]:
        return self.content_type_patterns

    def notify_user(self, message: str, severity: Severity = Severity.INFO):
        self.notifications.append((severity, message))
        if self.formatter:
            self.formatter.show_notification(message, severity)

    def log(self, message: str):
        self.log_lines.append(message)
        if self.formatter:
            self.formatter.show_log(message)

    def _fire_change(self, handle: Handle):
        for _, callback in list(self._change_listeners):
            callback(handle)
