#!/usr/bin/env python3
"""
YAMLZOOM DOCUMENT CODEC - Round-Trip Parse & Serialize
------------------------------------------------------
Wraps ruamel.yaml's round-trip mode so that a source document can be
parsed, mutated in a single place and written back while every other
field keeps its quoting and block layout.

Serialization rules:
  * no line folding (width is effectively unbounded)
  * no anchors or aliases: every alias becomes an independent copy at
    parse time, so editing one copy never reaches the others
  * block style for collections that were block style in the source
  * the source's own indentation and `---` marker are reproduced; the
    configured indents only apply to text that shows none

Author: YamlZoom Team
Date: 2026-10-19
"""

import copy
import io
import logging
import textwrap
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Optional

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.anchor import Anchor
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.representer import RoundTripRepresenter
from ruamel.yaml.scalarbool import ScalarBoolean
from ruamel.yaml.util import load_yaml_guess_indent

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.errors import ParseFailure, SerializeFailure
from yamlzoom.core.models import NodeKind

logger = logging.getLogger("yamlzoom.document")


class ExpandingRepresenter(RoundTripRepresenter):
    """Round-trip representer that never emits an alias."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


@dataclass(frozen=True)
class DocumentLayout:
    """Indentation and document-start style used when dumping a tree."""
    mapping: int
    sequence: int
    offset: int
    explicit_start: bool = False

    @classmethod
    def from_config(cls, config: ZoomConfig) -> "DocumentLayout":
        return cls(
            mapping=config.mapping_indent,
            sequence=config.sequence_indent,
            offset=config.sequence_dash_offset,
        )


def node_kind(value: Any) -> NodeKind:
    """Tags a Document Tree node. The only place traversal probes types."""
    if isinstance(value, Mapping):
        return NodeKind.MAPPING
    if isinstance(value, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


def scalar_text(value: Any) -> str:
    """The canonical string form of a scalar, spelled the way YAML spells it."""
    if value is None:
        return "null"
    if isinstance(value, (bool, ScalarBoolean)):
        return "true" if value else "false"
    return str(value)


def has_explicit_start(text: str) -> bool:
    """True when the first line that is not blank, a comment or a directive is `---`."""
    for line in text.lstrip("\ufeff").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(('#', '%')):
            continue
        return stripped == '---' or stripped.startswith(('--- ', '---\t'))
    return False


def guess_mapping_indent(text: str) -> Optional[int]:
    """
    Step between a `key:` line and the first nested key below it. Sequence
    lines are skipped; their indentation is measured separately.
    """
    parent = None
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            continue
        indent = len(line) - len(line.lstrip(' '))
        is_item = stripped == '-' or stripped.startswith('- ')
        if parent is not None and indent > parent and not is_item:
            return indent - parent
        parent = indent if stripped.endswith(':') and not is_item else None
    return None


def detect_layout(text: str, fallback: DocumentLayout) -> DocumentLayout:
    """
    Reads the indentation and document-start style a source text already
    uses. Whatever the text does not show keeps the fallback value.
    """
    mapping = guess_mapping_indent(text)
    if mapping is None or not 1 < mapping < 10:
        mapping = fallback.mapping

    sequence, offset = fallback.sequence, fallback.offset
    try:
        _, indent, dash_offset = load_yaml_guess_indent(text)
    except IndexError as e:
        # The guesser indexes past the end of some dash-only lines
        logger.debug(f"Could not guess sequence indentation: {e!r}")
    else:
        if indent is not None and dash_offset is not None and 0 <= dash_offset and dash_offset + 2 <= indent < 10:
            sequence, offset = indent, dash_offset

    return DocumentLayout(mapping, sequence, offset, has_explicit_start(text))


def unshare(value: Any, _seen: Optional[set] = None) -> Any:
    """
    Replaces every repeated occurrence of a container (an alias) with an
    independent deep copy, in place. Merged keys are left to their merge.
    """
    seen = _seen if _seen is not None else set()
    kind = node_kind(value)
    if kind is NodeKind.SCALAR:
        return value
    seen.add(id(value))

    if kind is NodeKind.MAPPING:
        own_items = getattr(value, 'non_merged_items', value.items)
        slots = [key for key, _ in own_items()]
    else:
        slots = range(len(value))

    for slot in slots:
        item = value[slot]
        if node_kind(item) is NodeKind.SCALAR:
            continue
        if id(item) in seen:
            item = copy.deepcopy(item)
            value[slot] = item
        unshare(item, seen)
    return value


def strip_anchors(value: Any, _seen: Optional[set] = None) -> Any:
    """
    Clears every anchor in the tree in place so the emitter never writes
    `&name`. Shared nodes are visited once.
    """
    seen = _seen if _seen is not None else set()
    if id(value) in seen:
        return value
    seen.add(id(value))

    anchor = getattr(value, Anchor.attrib, None)
    if anchor is not None:
        anchor.value = None
        anchor.always_dump = False

    kind = node_kind(value)
    if kind is NodeKind.MAPPING:
        for item in value.values():
            strip_anchors(item, seen)
    elif kind is NodeKind.SEQUENCE:
        for item in value:
            strip_anchors(item, seen)
    return value


def block_copy(value: Any) -> Any:
    """
    Deep-copies the containers of a subtree, forcing block style. Scalars
    are shared with the source tree.
    """
    kind = node_kind(value)
    if kind is NodeKind.MAPPING:
        clone = CommentedMap()
        clone.fa.set_block_style()
        for key, item in value.items():
            clone[key] = block_copy(item)
        return clone
    if kind is NodeKind.SEQUENCE:
        clone = CommentedSeq()
        clone.fa.set_block_style()
        for item in value:
            clone.append(block_copy(item))
        return clone
    return value


class YamlDocument:
    """
    The codec used for every parse/serialize cycle. Besides configuration
    it remembers the layout of the text it parsed last, which the following
    serialize reproduces. It never holds a tree.
    """

    def __init__(self, config: Optional[ZoomConfig] = None):
        self.config = config or ZoomConfig()
        self.default_layout = DocumentLayout.from_config(self.config)
        self.layout = self.default_layout
        self.yaml = self._build_yaml()

    def _build_yaml(self) -> YAML:
        yaml = YAML(typ='rt')
        yaml.Representer = ExpandingRepresenter
        yaml.preserve_quotes = True
        yaml.width = self.config.width
        return yaml

    def parse(self, text: str) -> Any:
        """
        Parses source text into a round-trip tree with aliases unshared. An
        empty document parses to an empty mapping so that writes can still
        create structure.
        """
        try:
            tree = self.yaml.load(text)
        except YAMLError as e:
            mark = getattr(e, 'problem_mark', None)
            problem = getattr(e, 'problem', None) or str(e)
            if mark is not None:
                raise ParseFailure(problem, mark.line, mark.column) from e
            raise ParseFailure(problem) from e

        self.layout = detect_layout(text, self.default_layout)
        logger.debug(f"Source layout: {self.layout}")
        if tree is None:
            return CommentedMap()
        try:
            return unshare(tree)
        except RecursionError as e:
            raise ParseFailure("an alias refers to a node that contains it") from e

    def serialize(self, tree: Any) -> str:
        """Dumps a full tree back to text in the layout of the last parse."""
        return self._dump(strip_anchors(tree), self.layout)

    def dump_fragment(self, value: Any) -> str:
        """
        Renders a mapping or sequence on its own, in block style. A root
        level sequence is dedented so its dashes start at column 0.
        """
        layout = replace(self.layout, explicit_start=False)
        text = self._dump(strip_anchors(block_copy(value)), layout)
        if node_kind(value) is NodeKind.SEQUENCE:
            text = textwrap.dedent(text)
        return text

    def roundtrip(self, text: str) -> str:
        return self.serialize(self.parse(text))

    def _dump(self, tree: Any, layout: DocumentLayout) -> str:
        self.yaml.indent(mapping=layout.mapping, sequence=layout.sequence, offset=layout.offset)
        self.yaml.explicit_start = layout.explicit_start
        stream = io.StringIO()
        try:
            self.yaml.dump(tree, stream)
        except (YAMLError, RecursionError, TypeError, ValueError) as e:
            raise SerializeFailure(str(e)) from e
        return stream.getvalue()
