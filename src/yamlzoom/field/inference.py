#!/usr/bin/env python3
"""
YAMLZOOM PATH INFERENCE - Cursor to Path
----------------------------------------
Recovers the FieldPath the user is pointing at when no path was given
explicitly. Three interchangeable strategies share one contract,
`infer(tree, hint) -> FieldPath | None`:

  * PositionInference - exact, driven by the line marks ruamel.yaml records
                        for every key and sequence item (default)
  * ValueInference    - first scalar whose text contains the cursor line's
                        value fragment (first match wins)
  * LineInference     - replays an approximate line layout of the tree and
                        matches key name plus line number

Paths produced here always use bracket indices for sequence entries so they
resolve with PathResolver unchanged.

Author: YamlZoom Team
Date: 2026-10-19
"""

import logging
from typing import Any, Iterator, List, Optional, Tuple

from yamlzoom.core.config import ZoomConfig
from yamlzoom.core.errors import ConfigError
from yamlzoom.core.models import CursorHint, FieldPath, NodeKind, PathSegment
from yamlzoom.field.document import node_kind, scalar_text

logger = logging.getLogger("yamlzoom.inference")


def iter_children(node: Any, path: FieldPath) -> Iterator[Tuple[FieldPath, Any]]:
    """Yields (child path, child value) in mapping order, then index order."""
    kind = node_kind(node)
    if kind is NodeKind.MAPPING:
        for key, value in node.items():
            yield path.child(PathSegment(key=scalar_text(key))), value
    elif kind is NodeKind.SEQUENCE:
        for index, value in enumerate(node):
            yield path.child(PathSegment(index=index)), value


def split_line(text: str) -> Tuple[Optional[str], str]:
    """
    Breaks a source line into (key, value) after removing a sequence dash.
    `  - name: web` -> ("name", "web"); `  - web` -> (None, "web").
    """
    data = text.strip()
    if data.startswith("- "):
        data = data[2:].strip()
    elif data == "-":
        data = ""
    if ":" in data:
        key, _, value = data.partition(":")
        return key.strip().strip("'\""), value.strip()
    return None, data


class InferenceStrategy:
    """Base class for the pluggable cursor-to-path strategies."""

    name = "base"

    def infer(self, tree: Any, hint: CursorHint) -> Optional[FieldPath]:
        raise NotImplementedError


class ValueInference(InferenceStrategy):
    """
    Value-driven search. Tries the trimmed line, then the line without its
    `- ` marker, then only the text after the first ':'. This is a heuristic:
    when several fields share a substring the first one in document order
    wins.
    """

    name = "value"

    @staticmethod
    def fragments(line_text: str) -> List[str]:
        data = line_text.strip()
        candidates = [data]
        if data.startswith("- "):
            data = data[2:].strip()
            candidates.append(data)
        if ":" in data:
            data = data[data.index(":") + 1:].strip()
            candidates.append(data)
        # An empty fragment is a substring of everything
        return [c for c in dict.fromkeys(candidates) if c]

    def infer(self, tree: Any, hint: CursorHint) -> Optional[FieldPath]:
        for fragment in self.fragments(hint.text):
            logger.debug(f"Looking for a field containing value '{fragment}'")
            found = self._search(tree, FieldPath(), fragment)
            if found is not None:
                return found
        return None

    def _search(self, node: Any, path: FieldPath, fragment: str) -> Optional[FieldPath]:
        for child_path, value in iter_children(node, path):
            if node_kind(value) is NodeKind.SCALAR:
                if value is not None and fragment in scalar_text(value):
                    return child_path
                continue
            found = self._search(value, child_path, fragment)
            if found is not None:
                return found
        return None


class _LineWalker:
    """Running line counter used by LineInference for a single search."""

    def __init__(self, target_key: Optional[str], target_line: int):
        self.target_key = target_key
        self.target_line = target_line
        self.counter = 0

    @staticmethod
    def extra_lines(value: Any) -> int:
        """Lines a scalar occupies below its key line (literal block body)."""
        if isinstance(value, str) and "\n" in value:
            return len(value.rstrip("\n").split("\n"))
        return 0

    def _scalar_hit(self, line: int, value: Any) -> bool:
        return line <= self.target_line <= line + self.extra_lines(value)

    def walk(self, node: Any, path: FieldPath) -> Optional[FieldPath]:
        kind = node_kind(node)
        if kind is NodeKind.MAPPING:
            return self._walk_mapping(node, path)
        if kind is NodeKind.SEQUENCE:
            return self._walk_sequence(node, path)
        return None

    def _walk_mapping(self, mapping: Any, path: FieldPath) -> Optional[FieldPath]:
        for child_path, value in iter_children(mapping, path):
            line = self.counter
            key = child_path.segments[-1].key
            if key == self.target_key and line == self.target_line:
                return child_path

            if node_kind(value) is NodeKind.SCALAR:
                if self._scalar_hit(line, value):
                    return child_path
                self.counter += 1 + self.extra_lines(value)
                continue

            self.counter += 1
            if not value:
                # Empty collections render inline: `key: {}`
                continue
            found = self.walk(value, child_path)
            if found is not None:
                return found
        return None

    def _walk_sequence(self, sequence: Any, path: FieldPath) -> Optional[FieldPath]:
        for child_path, value in iter_children(sequence, path):
            if node_kind(value) is NodeKind.SCALAR:
                line = self.counter
                if self._scalar_hit(line, value):
                    return child_path
                self.counter += 1 + self.extra_lines(value)
                continue

            if not value:
                self.counter += 1
                continue
            # `- name: x` puts the first child on the dash line
            found = self.walk(value, child_path)
            if found is not None:
                return found
        return None


class LineInference(InferenceStrategy):
    """
    Line-driven search: matches the key named on the cursor line at the
    counted line number. The count approximates block-style output and is
    not exact for flow collections or folded scalars.
    """

    name = "line"

    def infer(self, tree: Any, hint: CursorHint) -> Optional[FieldPath]:
        key, _ = split_line(hint.text)
        logger.debug(f"Looking for key '{key}' at line {hint.line}")
        return _LineWalker(key, hint.line).walk(tree, FieldPath())


class PositionInference(InferenceStrategy):
    """
    Exact search over the line marks recorded by the round-trip parser.
    A child owns every line from its own start to the line before its next
    sibling; the deepest owner of the cursor line wins.
    """

    name = "position"

    def infer(self, tree: Any, hint: CursorHint) -> Optional[FieldPath]:
        if node_kind(tree) is NodeKind.SCALAR:
            return None
        found = self._locate(tree, FieldPath(), hint.line)
        return found or None

    @staticmethod
    def _is_flow(node: Any) -> bool:
        fa = getattr(node, 'fa', None)
        return bool(fa is not None and fa.flow_style())

    @staticmethod
    def _start_line(node: Any) -> Optional[int]:
        lc = getattr(node, 'lc', None)
        return getattr(lc, 'line', None) if lc is not None else None

    def _child_starts(self, node: Any, path: FieldPath) -> List[Tuple[FieldPath, Any, int]]:
        lc = getattr(node, 'lc', None)
        marks = (getattr(lc, 'data', None) if lc is not None else None) or {}
        kind = node_kind(node)
        starts = []
        if kind is NodeKind.MAPPING:
            for key, value in node.items():
                # Keys pulled in through merge keys carry no marks
                if key in marks:
                    segment = PathSegment(key=scalar_text(key))
                    starts.append((path.child(segment), value, marks[key][0]))
        elif kind is NodeKind.SEQUENCE:
            for index, value in enumerate(node):
                if index in marks:
                    starts.append((path.child(PathSegment(index=index)), value, marks[index][0]))
        return starts

    def _locate(self, node: Any, path: FieldPath, line: int) -> FieldPath:
        if self._is_flow(node):
            return path

        starts = self._child_starts(node, path)
        owner = None
        for position, (_, _, start) in enumerate(starts):
            if start > line:
                break
            owner = position
        if owner is None:
            return path

        child_path, value, start = starts[owner]
        if node_kind(value) is NodeKind.SCALAR:
            return child_path

        value_start = self._start_line(value)
        if node_kind(node) is NodeKind.MAPPING and line == start and value_start is not None and value_start > start:
            # Cursor on `key:` of a block collection selects the collection
            return child_path

        return self._locate(value, child_path, line)


class FallbackInference(InferenceStrategy):
    """Runs a primary strategy and consults a second one when it finds nothing."""

    def __init__(self, primary: InferenceStrategy, fallback: InferenceStrategy):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"

    def infer(self, tree: Any, hint: CursorHint) -> Optional[FieldPath]:
        found = self.primary.infer(tree, hint)
        if found is None:
            logger.debug(f"{self.primary.name} inference found nothing, trying {self.fallback.name}")
            found = self.fallback.infer(tree, hint)
        return found


STRATEGIES = {
    PositionInference.name: PositionInference,
    ValueInference.name: ValueInference,
    LineInference.name: LineInference,
}


def make_strategy(name: str) -> InferenceStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ConfigError(f"Unknown inference strategy '{name}'.")


def build_inference(config: ZoomConfig) -> InferenceStrategy:
    """The strategy chain described by the configuration."""
    primary = make_strategy(config.inference)
    if config.fallback_inference and config.fallback_inference != config.inference:
        return FallbackInference(primary, make_strategy(config.fallback_inference))
    return primary
