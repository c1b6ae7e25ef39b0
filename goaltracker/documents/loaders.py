"""
Document Loaders: Resolve each input document to text or rows.

A document arrives either as inline text (pasted) or as a file path.
Only plain-text formats are read here; decoding word-processor or
spreadsheet payloads is the caller's job. Every failure is reported as a
DocumentConversionError naming the document, and nothing is parsed
until all documents have loaded.
"""

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from goaltracker.core.errors import DocumentConversionError, MissingDocumentError
from goaltracker.core.logging import get_logger, LogChannel

log = get_logger(LogChannel.SYSTEM)

TEXT_SUFFIXES = {".txt", ".md", ".text", ""}
GRID_SUFFIXES = {".csv", ".tsv", ".txt", ".text", ""}


@dataclass
class DocumentSource:
    """
    One input document: inline text or a path, plus a display name.

    The name is what error messages show ("1:1 Transcript", or the file
    name when loaded from disk).
    """
    name: str
    text: Optional[str] = None
    path: Optional[Path] = None

    @classmethod
    def from_text(cls, name: str, text: str) -> "DocumentSource":
        return cls(name=name, text=text)

    @classmethod
    def from_path(cls, path: Union[str, Path], name: Optional[str] = None) -> "DocumentSource":
        path = Path(path)
        return cls(name=name or path.name, path=path)

    def is_provided(self) -> bool:
        if self.path is not None:
            return True
        return bool(self.text and self.text.strip())


def require(source: Optional[DocumentSource], name: str) -> DocumentSource:
    """Raise MissingDocumentError unless the document was provided."""
    if source is None or not source.is_provided():
        raise MissingDocumentError(name)
    return source


def _read_file(source: DocumentSource, allowed: set[str]) -> str:
    path = source.path
    suffix = path.suffix.lower()
    if suffix not in allowed:
        raise DocumentConversionError(
            source.name,
            f"unsupported file type '{suffix}' (convert it to plain text first)",
        )
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentConversionError(source.name, f"not UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise DocumentConversionError(source.name, e.strerror or str(e)) from e


def load_text(source: DocumentSource) -> str:
    """Load a free-text document (transcript or goal info)."""
    if source.path is None:
        return source.text or ""

    text = _read_file(source, TEXT_SUFFIXES)
    log.verbose("document_loaded", document=source.name, chars=len(text))
    return text


def parse_grid_text(text: str, delimiter: Optional[str] = None) -> list[list[str]]:
    """
    Split table text into rows of trimmed cells.

    Without an explicit delimiter each line is split on tabs, or on '|'
    for pasted markdown-style tables. Blank lines are dropped.
    """
    if delimiter is not None:
        reader = csv.reader(io.StringIO(text), delimiter=delimiter)
        return [[cell.strip() for cell in row] for row in reader if any(c.strip() for c in row)]

    rows: list[list[str]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        if "\t" in line:
            cells = line.split("\t")
        elif "|" in line:
            cells = line.strip().strip("|").split("|")
        else:
            cells = [line]
        rows.append([cell.strip() for cell in cells])
    return rows


def load_grid(source: DocumentSource) -> list[list[str]]:
    """Load the tracker grid as rows of cells."""
    if source.path is None:
        return parse_grid_text(source.text or "")

    text = _read_file(source, GRID_SUFFIXES)
    suffix = source.path.suffix.lower()
    try:
        if suffix == ".csv":
            rows = parse_grid_text(text, delimiter=",")
        elif suffix == ".tsv":
            rows = parse_grid_text(text, delimiter="\t")
        else:
            rows = parse_grid_text(text)
    except csv.Error as e:
        raise DocumentConversionError(source.name, str(e)) from e

    log.verbose("grid_loaded", document=source.name, rows=len(rows))
    return rows
