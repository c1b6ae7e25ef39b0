"""
JSON output for the CLI ``--format json`` mode and ``goaltracker parse``.
"""

import json

from pydantic import BaseModel

from goaltracker.ir.schema import ReportResult


def to_json(result: ReportResult, indent: int = 2) -> str:
    return result.model_dump_json(indent=indent)


def from_json(json_str: str) -> ReportResult:
    return ReportResult.model_validate_json(json_str)


def record_to_json(record: BaseModel, indent: int = 2) -> str:
    """Dump one parsed record; non-ASCII text is kept as-is."""
    return json.dumps(record.model_dump(mode="json"), indent=indent, ensure_ascii=False)
