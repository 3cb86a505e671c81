#!/usr/bin/env python3
"""
YAMLZOOM PATH RESOLVER
----------------------
Walks a parsed Document Tree along a FieldPath and returns the node found
there. Bracket indices (`containers[0]`) and bare digit segments
(`containers.0`) are both accepted.

Author: YamlZoom Team
Date: 2026-10-19
"""

from typing import Any, Union

from ruamel.yaml.scalarstring import ScalarString

from yamlzoom.core.errors import PathNotFound
from yamlzoom.core.models import FieldPath, NodeKind, PathSegment
from yamlzoom.field.document import node_kind
from yamlzoom.field.paths import format_path, parse_path


def lookup_key(mapping: Any, segment: PathSegment) -> Any:
    """
    Finds the actual key object in a mapping for a key segment. YAML keys
    are not always strings, so `.ports.80` also matches an integer key 80.
    Raises KeyError when absent.
    """
    if segment.key in mapping:
        return segment.key
    index = segment.as_index()
    if index is not None and index in mapping:
        return index
    raise KeyError(segment.key)


class PathResolver:
    """Read side of the path grammar."""

    def resolve(self, tree: Any, path: Union[str, FieldPath]) -> Any:
        """
        Returns the value at `path`. Wrapper string types produced by the
        parser (literal blocks, quoted strings) come back as plain `str`.
        """
        field_path = parse_path(path)
        current = tree

        for segment in field_path.segments:
            current = self._step(current, segment, field_path)

        if isinstance(current, ScalarString):
            return str(current)
        return current

    def exists(self, tree: Any, path: Union[str, FieldPath]) -> bool:
        try:
            self.resolve(tree, path)
        except PathNotFound:
            return False
        return True

    def _step(self, node: Any, segment: PathSegment, path: FieldPath) -> Any:
        kind = node_kind(node)

        if kind is NodeKind.SEQUENCE:
            index = segment.as_index()
            if index is None:
                raise PathNotFound(format_path(path), f"'{segment.key}' is not a sequence index")
            if index >= len(node):
                raise PathNotFound(format_path(path), f"index {index} is out of range")
            return node[index]

        if kind is NodeKind.MAPPING:
            if segment.is_index:
                raise PathNotFound(format_path(path), f"[{segment.index}] applied to a mapping")
            try:
                return node[lookup_key(node, segment)]
            except KeyError:
                raise PathNotFound(format_path(path))

        raise PathNotFound(format_path(path), "cannot descend into a scalar")
