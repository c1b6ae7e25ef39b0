"""Documents: Input loading and line splitting at the pipeline boundary."""

from goaltracker.documents.loaders import (
    DocumentSource,
    load_grid,
    load_text,
    parse_grid_text,
    require,
)
from goaltracker.documents.text import (
    TranscriptLine,
    normalize_rows,
    split_lines,
    split_transcript_lines,
)

__all__ = [
    "DocumentSource",
    "TranscriptLine",
    "load_grid",
    "load_text",
    "normalize_rows",
    "parse_grid_text",
    "require",
    "split_lines",
    "split_transcript_lines",
]
