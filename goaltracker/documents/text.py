"""
Text Splitting: Turn decoded document text into parser input.

The parsers work on lines, never on raw text: blank lines are dropped
and every kept line is trimmed. Transcript lines also remember how far
the raw line was indented, since indentation marks sub-bullets.
"""

import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptLine:
    """A trimmed, non-blank transcript line plus its raw indentation width."""
    text: str
    indent: int = 0


def _clean(text: str) -> str:
    text = unicodedata.normalize("NFC", text or "")
    # Word exports use NBSP and BOM freely
    return text.replace("\ufeff", "").replace("\u00a0", " ")


def split_lines(text: str) -> list[str]:
    """Split text into trimmed, non-blank lines, preserving order."""
    lines = []
    for raw in _clean(text).splitlines():
        line = raw.strip()
        if line:
            lines.append(line)
    return lines


def split_transcript_lines(text: str) -> list[TranscriptLine]:
    """Split transcript text into trimmed, non-blank lines with indentation."""
    lines = []
    for raw in _clean(text).expandtabs(4).splitlines():
        line = raw.strip()
        if not line:
            continue
        indent = len(raw) - len(raw.lstrip())
        lines.append(TranscriptLine(text=line, indent=indent))
    return lines


def normalize_rows(rows: list[list[str]]) -> list[list[str]]:
    """Trim every cell; drop rows with no non-empty cell."""
    normalized = []
    for row in rows:
        cells = [_clean("" if cell is None else str(cell)).strip() for cell in row]
        if any(cells):
            normalized.append(cells)
    return normalized
