#!/usr/bin/env python3
"""
YAMLZOOM SESSION STATE
----------------------
Tracks the single live zoom session (source document, field path,
materialized buffer) and owns the write-back re-entrancy guard.

Lifecycle: Idle -> Active (start) -> Idle (buffer closed / deactivate).
Only one session is tracked; starting a second one replaces the first.

Author: YamlZoom Team
Date: 2026-10-19
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional

from yamlzoom.core.models import FieldPath
from yamlzoom.host.base import BufferHandle, DocumentHandle

logger = logging.getLogger("yamlzoom.session")


@dataclass
class Session:
    """The live association of a source document, a path and its buffer."""
    source: DocumentHandle
    path: FieldPath
    buffer: BufferHandle
    language: str = "plaintext"
    eol: str = "\n"
    # Listener removers registered with the host for this session
    disposers: List[Callable[[], None]] = field(default_factory=list, repr=False)

    def dispose(self):
        for dispose in self.disposers:
            dispose()
        self.disposers.clear()


class SessionManager:
    """
    Holds at most one Session plus the `is_updating` guard. The guard is a
    single boolean, only ever held through `updating()`.
    """

    def __init__(self):
        self._session: Optional[Session] = None
        self._updating = False

    @property
    def active(self) -> Optional[Session]:
        return self._session

    @property
    def is_updating(self) -> bool:
        return self._updating

    def start(self, session: Session) -> Session:
        if self._session is not None:
            logger.warning(f"Replacing active session on {self._session.path} with {session.path}")
            self._session.dispose()
        self._session = session
        logger.info(f"Session started: {session.path} -> {session.buffer.uri}")
        return session

    def end(self, buffer: BufferHandle) -> bool:
        """Clears the session if `buffer` is the one it edits."""
        if self._session is None or self._session.buffer != buffer:
            return False
        logger.info(f"Session ended: {self._session.path}")
        self._session.dispose()
        self._session = None
        return True

    def deactivate(self):
        if self._session is not None:
            self._session.dispose()
        self._session = None
        self._updating = False

    @contextmanager
    def updating(self) -> Iterator[None]:
        """Holds the write-back guard for the duration of the block."""
        self._updating = True
        try:
            yield
        finally:
            self._updating = False
