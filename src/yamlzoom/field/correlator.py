#!/usr/bin/env python3
"""
YAMLZOOM LINE CORRELATOR
------------------------
Maps the line the cursor sat on in the source document to the matching
line of the materialized field, so the new buffer opens at the same spot.

Author: YamlZoom Team
Date: 2026-10-19
"""

import re
from typing import Optional

LINE_SPLIT = re.compile(r'\r?\n')


def normalize_fragment(source_line: str) -> str:
    """`  - image: nginx:1.25` -> `nginx:1.25`"""
    data = source_line.strip()
    if data.startswith('- '):
        data = data[2:].strip()
    if ':' in data:
        data = data[data.index(':') + 1:].strip()
    return data


class LineCorrelator:
    """Finds the first materialized line containing the source line's value."""

    def correlate(self, source_line: str, materialized_text: str) -> Optional[int]:
        fragment = normalize_fragment(source_line)
        for index, line in enumerate(LINE_SPLIT.split(materialized_text)):
            if fragment in line.strip():
                return index
        return None
