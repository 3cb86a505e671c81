#!/usr/bin/env python3
"""
YAMLZOOM CORE MODELS
--------------------
Defines the fundamental data structures used across the YamlZoom engine.
These models describe paths into a YAML tree and the editable text that is
produced for a single field.

Author: YamlZoom Team
Date: 2026-10-19
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# The materialized buffer always starts with a path comment and a blank line
HEADER_LINES = 2


class NodeKind(Enum):
    """The three shapes a Document Tree node can take."""
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class Severity(Enum):
    """Levels used when a message is surfaced to the user."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class PathSegment:
    """
    A single step into the Document Tree.

    Exactly one of `key` or `index` is set. A key made only of digits
    (e.g. `.items.1`) still addresses a sequence slot when the node being
    walked is a sequence.
    """
    key: Optional[str] = None
    index: Optional[int] = None

    @property
    def is_index(self) -> bool:
        return self.index is not None

    def as_index(self) -> Optional[int]:
        """Returns the sequence index this segment can address, if any."""
        if self.index is not None:
            return self.index
        if self.key is not None and self.key.isdigit():
            return int(self.key)
        return None


@dataclass(frozen=True)
class FieldPath:
    """
    An ordered sequence of PathSegments. Only meaningful against the
    Document Tree snapshot it was built from.
    """
    segments: Tuple[PathSegment, ...] = ()

    def child(self, segment: PathSegment) -> "FieldPath":
        return FieldPath(self.segments + (segment,))

    def __len__(self) -> int:
        return len(self.segments)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def __str__(self) -> str:
        # Imported lazily, the grammar module depends on these models
        from yamlzoom.field.paths import format_path
        return format_path(self)


@dataclass(frozen=True)
class CursorHint:
    """Where the user's cursor sits in the source document."""
    line: int               # 0-based line index in the source document
    text: str = ""          # The raw text of that line


@dataclass
class MaterializedField:
    """The editable rendition of one resolved field."""
    text: str
    language: str = "plaintext"
