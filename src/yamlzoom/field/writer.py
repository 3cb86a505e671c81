#!/usr/bin/env python3
"""
YAMLZOOM FIELD WRITER - Write-Back Surgery
------------------------------------------
Takes the text of an editing buffer, removes the header the materializer
added, stores the remaining text at the session's path and re-serializes
the whole document.

The stored value is always a string. A value that looks like a number or a
boolean is written back quoted; the writer never guesses at a type change.

Author: YamlZoom Team
Date: 2026-10-19
"""

import logging
import re
from typing import Any, Optional, Union

from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import LiteralScalarString, ScalarString, preserve_literal

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.errors import PathNotFound
from yamlzoom.core.models import FieldPath, NodeKind, PathSegment
from yamlzoom.field.document import YamlDocument, node_kind
from yamlzoom.field.paths import format_path, parse_path
from yamlzoom.field.resolver import lookup_key

logger = logging.getLogger("yamlzoom.writer")


class FieldWriter:
    """Write side of the path grammar: header strip, mutate, serialize."""

    def __init__(self, config: Optional[ZoomConfig] = None, document: Optional[YamlDocument] = None):
        self.config = config or ZoomConfig()
        self.document = document or YamlDocument(self.config)
        # Header line plus the blank separator, either line ending style
        self.header_pattern = re.compile(
            r'^' + re.escape(self.config.header_prefix.rstrip()) + r'.*\r?\n\r?\n'
        )

    def strip_header(self, buffer_text: str) -> str:
        """Inverts FieldMaterializer.render_buffer; text without a header is returned as is."""
        return self.header_pattern.sub('', buffer_text, count=1)

    def write(self, tree: Any, path: Union[str, FieldPath], text: str) -> Any:
        """Stores `text` at `path`, creating missing parents. Mutates `tree`."""
        field_path = parse_path(path)
        rendered = format_path(field_path)
        if not field_path:
            raise PathNotFound(rendered, "cannot replace the document root")

        logger.debug(f"Setting nested value for path: {rendered}")
        segments = field_path.segments
        current = tree

        for position, segment in enumerate(segments[:-1]):
            following = segments[position + 1]
            current = self._descend(current, segment, following, rendered)

        self._assign(current, segments[-1], text, rendered)
        logger.debug("Nested value set")
        return tree

    def serialize(self, tree: Any) -> str:
        return self.document.serialize(tree)

    def apply(self, source_text: str, path: Union[str, FieldPath], buffer_text: str) -> str:
        """Full write-back cycle on text: parse, strip, write, serialize."""
        tree = self.document.parse(source_text)
        self.write(tree, path, self.strip_header(buffer_text))
        return self.serialize(tree)

    @staticmethod
    def _empty_for(following: PathSegment) -> Any:
        """The container a missing parent should become, judged by the next step."""
        if following.is_index:
            return CommentedSeq()
        return CommentedMap()

    @classmethod
    def _needs_container(cls, value: Any, following: PathSegment) -> bool:
        """Missing, null or empty-but-wrong-shape parents are replaced."""
        if value is None:
            return True
        return not value and node_kind(value) is not node_kind(cls._empty_for(following))

    @staticmethod
    def _pad(sequence: Any, index: int):
        # Slots skipped over by a bracket write become empty mappings
        while len(sequence) <= index:
            sequence.append(CommentedMap())

    def _descend(self, node: Any, segment: PathSegment, following: PathSegment, rendered: str) -> Any:
        kind = node_kind(node)

        if kind is NodeKind.SEQUENCE:
            index = segment.as_index()
            if index is None:
                raise PathNotFound(rendered, f"'{segment.key}' is not a sequence index")
            self._pad(node, index)
            if self._needs_container(node[index], following):
                node[index] = self._empty_for(following)
            return node[index]

        if kind is NodeKind.MAPPING:
            if segment.is_index:
                raise PathNotFound(rendered, f"[{segment.index}] applied to a mapping")
            try:
                key = lookup_key(node, segment)
            except KeyError:
                key = segment.key
            if self._needs_container(node.get(key), following):
                node[key] = self._empty_for(following)
            return node[key]

        raise PathNotFound(rendered, "cannot descend into a scalar")

    def _assign(self, node: Any, segment: PathSegment, text: str, rendered: str):
        kind = node_kind(node)

        if kind is NodeKind.SEQUENCE:
            index = segment.as_index()
            if index is None:
                raise PathNotFound(rendered, f"'{segment.key}' is not a sequence index")
            self._pad(node, index)
            node[index] = self._styled(node[index], text)
            return

        if kind is NodeKind.MAPPING:
            if segment.is_index:
                raise PathNotFound(rendered, f"[{segment.index}] applied to a mapping")
            try:
                key = lookup_key(node, segment)
            except KeyError:
                key = segment.key
            node[key] = self._styled(node.get(key), text)
            return

        raise PathNotFound(rendered, "cannot assign into a scalar")

    @staticmethod
    def _styled(previous: Any, text: str) -> str:
        """
        Wraps the new text so it is emitted the way the old value was:
        multi-line text becomes a literal block, otherwise a quoted or block
        string keeps its original wrapper class.
        """
        if "\n" in text or "\r" in text:
            return preserve_literal(text)
        if isinstance(previous, ScalarString) and not isinstance(previous, LiteralScalarString):
            return type(previous)(text)
        return text
