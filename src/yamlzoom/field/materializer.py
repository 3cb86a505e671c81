#!/usr/bin/env python3
"""
YAMLZOOM FIELD MATERIALIZER
---------------------------
Turns a resolved value into the text of a standalone editing buffer and
guesses the language that buffer should be highlighted as.

Buffer layout (the Field Writer relies on it being bit-exact):

    # YAML Path: .spec.containers[0].command<EOL>
    <EOL>
    <field content>

Author: YamlZoom Team
Date: 2026-10-19
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Pattern, Tuple

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.models import MaterializedField, NodeKind
from yamlzoom.field.document import YamlDocument, node_kind, scalar_text

logger = logging.getLogger("yamlzoom.materializer")

# Interpreter markers checked against the first line of the content
SHEBANG_LANGUAGES: List[Tuple[Pattern, str]] = [
    (re.compile(r'^#!\s*/bin/(ba)?sh\b'), "shellscript"),
    (re.compile(r'^#!\s*/usr/bin/env\s+(ba)?sh\b'), "shellscript"),
    (re.compile(r'^#!\s*/usr/bin/env\s+python'), "python"),
    (re.compile(r'^#!\s*/(usr/)?bin/python'), "python"),
    (re.compile(r'^#!\s*/usr/libexec/platform-python'), "python"),
    (re.compile(r'^#!\s*/usr/bin/env\s+node\b'), "javascript"),
    (re.compile(r'^#!\s*/bin/node\b'), "javascript"),
    (re.compile(r'^#!\s*/usr/bin/env\s+pwsh\b'), "powershell"),
]


def detect_language(text: str,
                    patterns: Optional[Dict[str, Iterable[str]]] = None,
                    default: str = "plaintext") -> str:
    """
    Guesses a content language from the text alone: shebang first, then the
    host's registered content-type patterns, then `default`.
    """
    first_line = text.lstrip("\ufeff").split("\n", 1)[0].rstrip("\r")
    for marker, language in SHEBANG_LANGUAGES:
        if marker.match(first_line):
            return language

    for content_type, regexes in (patterns or {}).items():
        for regex in regexes:
            try:
                if re.search(regex, text, re.MULTILINE):
                    return content_type
            except re.error as e:
                logger.debug(f"Ignoring invalid pattern {regex!r} for {content_type}: {e}")
    return default


class FieldMaterializer:
    """Renders resolved values as editable text."""

    def __init__(self, config: Optional[ZoomConfig] = None, document: Optional[YamlDocument] = None):
        self.config = config or ZoomConfig()
        self.document = document or YamlDocument(self.config)

    def to_text(self, value: Any) -> str:
        if isinstance(value, str):
            return str(value)
        if node_kind(value) is NodeKind.SCALAR:
            return scalar_text(value)
        return self.document.dump_fragment(value)

    def materialize(self, value: Any,
                    patterns: Optional[Dict[str, Iterable[str]]] = None) -> MaterializedField:
        text = self.to_text(value)
        language = detect_language(text, patterns, self.config.default_language)
        logger.debug(f"Materialized {len(text)} chars as {language}")
        return MaterializedField(text=text, language=language)

    def render_buffer(self, path: str, content: str, eol: str = "\n") -> str:
        """Builds the full buffer text: header line, blank line, content."""
        return f"{self.config.header_prefix}{path}{eol}{eol}{content}"
