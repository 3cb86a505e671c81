#!/usr/bin/env python3
"""
YAMLZOOM ENGINE - The Orchestrator
----------------------------------
The ZoomEngine is the operation boundary between an Editor Host and the
field engine. It runs the three user-visible operations:

  1. zoom_field   - resolve a path, open the field in its own buffer
  2. activate_key - infer the path from the cursor, then zoom
  3. write_back   - push every buffer edit back into the source document

Every failure is caught here and turned into a host notification plus a
diagnostic log entry; nothing propagates into the host.

Author: YamlZoom Team
Date: 2026-10-19
"""

import json
import logging
import traceback
from typing import Any, Optional, Union

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.errors import NoActiveSource, PathInferenceFailed, PathNotFound, YamlZoomError
from yamlzoom.core.models import HEADER_LINES, CursorHint, FieldPath, Severity
from yamlzoom.core.session import Session, SessionManager
from yamlzoom.field.correlator import LineCorrelator
from yamlzoom.field.document import YamlDocument
from yamlzoom.field.inference import build_inference
from yamlzoom.field.materializer import FieldMaterializer
from yamlzoom.field.paths import format_path, parse_path
from yamlzoom.field.resolver import PathResolver
from yamlzoom.field.writer import FieldWriter
from yamlzoom.host.base import BufferHandle, DocumentHandle, EditorHost, Handle

logger = logging.getLogger("yamlzoom.engine")


class ZoomEngine:
    """
    Principal orchestrator for one editor integration. Holds the session
    manager and the field engine components, all built from one config.
    """

    def __init__(self, host: EditorHost, config: Optional[ZoomConfig] = None):
        self.host = host
        self.config = config or ZoomConfig()
        logging.getLogger("yamlzoom").setLevel(self.config.log_level.upper())

        self.document = YamlDocument(self.config)
        self.resolver = PathResolver()
        self.inference = build_inference(self.config)
        self.materializer = FieldMaterializer(self.config, self.document)
        self.writer = FieldWriter(self.config, self.document)
        self.correlator = LineCorrelator()
        self.sessions = SessionManager()

        # Number of write-back cycles actually executed (echoes excluded)
        self.write_back_count = 0

    # --- Operations ---
    def zoom_field(self, path: Optional[Union[str, FieldPath]] = None) -> Optional[Session]:
        """
        Opens the field at `path` in a new buffer. Without a path the user is
        prompted for one; a cancelled prompt is a silent no-op.
        """
        try:
            return self._zoom(path)
        except YamlZoomError as e:
            self._report(e)
        except Exception as e:
            self._report_unexpected(e)
        return None

    def activate_key(self) -> Optional[Session]:
        """Infers the path under the cursor and zooms into it."""
        try:
            return self._activate_key()
        except YamlZoomError as e:
            self._report(e)
        except Exception as e:
            self._report_unexpected(e)
        return None

    def write_back(self, session: Optional[Session] = None) -> bool:
        """
        Stores the buffer's text at the session path and replaces the source
        document. Returns True when the source was changed. The guard is held
        for the whole cycle so the replace's own change event is ignored.
        """
        session = session or self.sessions.active
        if session is None:
            return False

        with self.sessions.updating():
            try:
                return self._write_back(session)
            except YamlZoomError as e:
                self._report(e)
            except Exception as e:
                self._report_unexpected(e)
        return False

    def deactivate(self):
        """Drops every tracked session; called when the integration unloads."""
        self.sessions.deactivate()

    # --- Implementation ---
    def _require_source(self) -> DocumentHandle:
        source = self.host.active_document()
        if source is None:
            raise NoActiveSource()
        return source

    def _zoom(self, path: Optional[Union[str, FieldPath]]) -> Optional[Session]:
        source = self._require_source()

        if path is None:
            path = self.host.prompt_user_for_text(self.config.prompt_message)
            if not path:
                logger.info("Zoom cancelled: no path entered")
                return None

        field_path = parse_path(path)
        rendered = format_path(field_path)
        self.host.log(f"yamlPath {rendered}")
        if not field_path:
            raise PathNotFound(rendered, "the path is empty")

        source_text = self.host.document_text(source)
        eol = self.host.document_eol(source)
        tree = self.document.parse(source_text)
        value = self.resolver.resolve(tree, field_path)
        field = self.materializer.materialize(value, self.host.registered_content_type_patterns())

        cursor = self.host.cursor_line(source)
        zoomed_line = self.correlator.correlate(self.host.line_text(source, cursor), field.text)

        content = self.materializer.render_buffer(rendered, field.text, eol)
        buffer = self.host.open_editable_buffer(content, field.language, beside=source)
        self.host.log(f"zoomedLineNumber {zoomed_line}")
        if zoomed_line is not None:
            self.host.reveal_line(buffer, zoomed_line + HEADER_LINES)
        self.host.highlight_line(buffer, 0)

        session = self.sessions.start(Session(
            source=source, path=field_path, buffer=buffer,
            language=field.language, eol=eol,
        ))
        session.disposers.append(self.host.on_buffer_changed(buffer, self._on_changed))
        session.disposers.append(self.host.on_buffer_closed(buffer, self._on_closed))
        return session

    def _activate_key(self) -> Optional[Session]:
        source = self._require_source()
        cursor = self.host.cursor_line(source)
        line_text = self.host.line_text(source, cursor)
        if not line_text.strip():
            return None

        tree = self.document.parse(self.host.document_text(source))
        self.host.log(f"trying to find key for value containing value {line_text}")
        found = self.inference.infer(tree, CursorHint(line=cursor, text=line_text))
        if found is None:
            raise PathInferenceFailed(line_text.strip())

        value = self.resolver.resolve(tree, found)
        self.host.notify_user(f"Activated key: {found}, Value: {self._preview(value)}", Severity.INFO)
        return self._zoom(found)

    def _write_back(self, session: Session) -> bool:
        self.write_back_count += 1
        buffer_text = self.host.buffer_text(session.buffer)
        if not buffer_text:
            return False

        source_text = self.host.document_text(session.source)
        updated = self.writer.apply(source_text, session.path, buffer_text)
        if session.eol != "\n":
            updated = updated.replace("\n", session.eol)
        if updated == source_text:
            return False

        self.host.apply_full_document_replace(session.source, updated)
        logger.debug(f"Wrote {session.path} back to {session.source.uri}")
        return True

    def _on_changed(self, handle: Handle):
        if self.sessions.is_updating:
            logger.debug(f"Ignoring change on {handle.uri} during write-back")
            return
        session = self.sessions.active
        if session is None or handle != session.buffer:
            return
        self.write_back(session)

    def _on_closed(self, buffer: BufferHandle):
        self.sessions.end(buffer)

    @staticmethod
    def _preview(value: Any) -> str:
        return json.dumps(value, default=str)

    def _report(self, error: YamlZoomError):
        self.host.log(f"Error: {error.message}")
        self.host.notify_user(error.message, error.severity)
        if error.severity is Severity.WARNING:
            logger.warning(error.message)
        else:
            logger.error(error.message)

    def _report_unexpected(self, error: Exception):
        self.host.log(f"An unexpected error occurred: {error}")
        self.host.log(traceback.format_exc())
        self.host.notify_user("An unexpected error occurred", Severity.ERROR)
        logger.exception("Unexpected failure at the operation boundary")
