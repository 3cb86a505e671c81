#!/usr/bin/env python3
"""
YAMLZOOM PATH GRAMMAR
---------------------
Parses and formats the dotted/bracketed field paths shared by the
resolver, the writer and the inference strategies.

    .spec.containers[0].env[0].value
    .items.1.x           (bare digits address a sequence slot)
    .matrix[0][1]        (consecutive indices)

Author: YamlZoom Team
Date: 2026-10-19
"""

import re
from typing import List, Union

from yamlzoom.core.models import FieldPath, PathSegment

# Group 1: key (may be empty for '[0]' at the root), Group 2: trailing indices
SEGMENT_PATTERN = re.compile(r'^(.*?)((?:\[\d+\])*)$')
INDEX_PATTERN = re.compile(r'\[(\d+)\]')


def parse_path(path: Union[str, FieldPath]) -> FieldPath:
    """
    Splits a path on '.', discarding empty parts so that the leading dot is
    optional, then peels any trailing `[K]` indices off each part.
    """
    if isinstance(path, FieldPath):
        return path

    segments: List[PathSegment] = []
    for part in path.strip().split('.'):
        if not part:
            continue
        match = SEGMENT_PATTERN.match(part)
        key, indices = match.group(1), match.group(2)
        if key:
            segments.append(PathSegment(key=key))
        for index in INDEX_PATTERN.findall(indices):
            segments.append(PathSegment(index=int(index)))
    return FieldPath(tuple(segments))


def format_path(path: FieldPath) -> str:
    """Renders the canonical form: always a leading '.', indices as brackets."""
    rendered = ""
    previous = None
    for segment in path.segments:
        if segment.is_index:
            if previous is None:
                rendered += f".{segment.index}"
            else:
                rendered += f"[{segment.index}]"
        else:
            rendered += f".{segment.key}"
        previous = segment
    return rendered or "."


def normalize_path(path: str) -> str:
    """Canonicalizes user input such as `a.b[0]` into `.a.b[0]`."""
    return format_path(parse_path(path))
