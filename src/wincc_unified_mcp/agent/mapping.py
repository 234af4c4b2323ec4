"""Response mappers: GraphQL results to tool text content."""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any

from wincc_unified_mcp.errors import BackendError
from wincc_unified_mcp.types import BackendResult

NO_DATA = "No data available."
LOGGED_TAG_COLUMNS = ("Logging Tag Name", "Timestamp", "Value")

_MISSING: Any = object()

ResultMapper = Callable[[BackendResult], str]


def require_field(result: BackendResult, field: str) -> Any:
    data = result.data
    if not isinstance(data, dict) or data.get(field) is None:
        raise BackendError(
            f"Received an unexpected response structure from GraphQL server "
            f"(missing data.{field})."
        )
    return data[field]


def passthrough(
    field: str, *, indent: int | None = None, default: Any = _MISSING
) -> ResultMapper:
    """Serialize `data[field]` as JSON, optionally tolerating its absence."""

    def _map(result: BackendResult) -> str:
        if default is not _MISSING:
            value = (result.data or {}).get(field)
            if value is None:
                value = default
        else:
            value = require_field(result, field)
        return json.dumps(value, indent=indent)

    return _map


def logged_tag_rows(entries: Sequence[dict[str, Any]]) -> list[list[Any]]:
    rows: list[list[Any]] = []
    for entry in entries:
        tag_name = entry.get("loggingTagName")
        values = entry.get("values") or []
        if not values:
            rows.append([tag_name, None, None])
            continue
        for logged in values:
            value = logged.get("value") if isinstance(logged, dict) else None
            if not isinstance(value, dict):
                continue
            raw = value.get("value")
            rows.append(
                [
                    tag_name,
                    value.get("timestamp") or None,
                    _cell_text(raw) if raw is not None else None,
                ]
            )
    return rows


def format_table(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render rows as a fixed-width text table.

    Every column is as wide as its longest cell or header. `None` cells are
    rendered empty.
    """
    if not rows:
        return NO_DATA

    widths = [len(name) for name in columns]
    text_rows = [[_cell_text(cell) for cell in row] for row in rows]
    for row in text_rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    lines = [" | ".join(name.ljust(width) for name, width in zip(columns, widths))]
    lines.append("-+-".join("-" * width for width in widths))
    for row in text_rows:
        lines.append(" | ".join(cell.ljust(width) for cell, width in zip(row, widths)))
    return "\n".join(lines) + "\n"


def map_logged_tag_values(result: BackendResult) -> str:
    entries = require_field(result, "loggedTagValues")
    return format_table(LOGGED_TAG_COLUMNS, logged_tag_rows(entries))


def _cell_text(cell: Any) -> str:
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    if isinstance(cell, (dict, list)):
        return json.dumps(cell)
    return str(cell)
