"""Decide whether a diagram text is written in this notation."""

from __future__ import annotations

import re
from typing import Any, Final

DIAGRAM_KEYWORDS: Final[tuple[str, ...]] = ("music", "score", "notation")

_MUSICAL_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"clef\s*:\s*(treble|bass|alto|tenor)", re.IGNORECASE),
    re.compile(r"time\s*:\s*\d+/\d+", re.IGNORECASE),
    re.compile(r"\b[A-G][#b]?\d+\s+[whqes]\b", re.IGNORECASE),
    re.compile(r"\|\s*[A-G]", re.IGNORECASE),
)


def has_musical_patterns(text: str) -> bool:
    return any(pattern.search(text) for pattern in _MUSICAL_PATTERNS)


def detect_music_diagram(text: Any) -> bool:
    """True when *text* names a diagram keyword or contains recognisable notation."""
    if not isinstance(text, str) or not text:
        return False

    normalized = text.lower().strip()
    if any(keyword in normalized for keyword in DIAGRAM_KEYWORDS):
        return True
    return has_musical_patterns(normalized)


def extract_diagram_content(text: str) -> str:
    """Return *text* from the first line mentioning a diagram keyword; all of it if none does."""
    lines = text.split("\n")
    for index, line in enumerate(lines):
        lowered = line.lower().strip()
        if any(keyword in lowered for keyword in DIAGRAM_KEYWORDS):
            return "\n".join(lines[index:])
    return text
