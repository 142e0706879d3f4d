"""
Minimal CSV encoder for the export endpoints.
Header comes from the first record; a cell is quoted only when it
contains a comma, a double quote, or a newline.
"""

from datetime import date, datetime
from typing import Any, Mapping, Sequence

_NEEDS_QUOTING = (",", '"', "\n")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (datetime, date)):
        text = value.isoformat()
    else:
        text = str(value)

    if any(ch in text for ch in _NEEDS_QUOTING):
        text = '"' + text.replace('"', '""') + '"'
    return text


def to_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """Encode uniform records as CSV text. Empty input gives an empty string."""
    if not records:
        return ""

    headers = list(records[0].keys())
    lines = [",".join(headers)]
    for record in records:
        lines.append(",".join(_cell(record.get(h)) for h in headers))
    return "\n".join(lines)
