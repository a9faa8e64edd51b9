from __future__ import annotations

from html import unescape
import re
from typing import List


def normalize_label(value: str) -> str:
    """Unescape HTML entities and collapse inner whitespace.

    Preserves original casing but trims leading/trailing spaces
    and converts sequences of whitespace to a single space.
    """
    if not value:
        return ""
    text = unescape(value).strip()
    # Collapse multiple whitespace to single space
    text = re.sub(r"\s+", " ", text)
    return text


def append_unique(values: List[str], label: str) -> List[str]:
    """Append ``label`` to ``values`` unless it is already present."""
    if label and label not in values:
        values.append(label)
    return values

