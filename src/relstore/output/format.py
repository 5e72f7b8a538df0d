"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

from rich.table import Table

from ..db.records import Record, Value

FORMATS = ("toon", "json", "text")


def _plain(payload: Any) -> Any:
    """Copy of payload that JSON can hold; BLOB cells become hex text."""
    if isinstance(payload, bytes):
        return payload.hex()
    if isinstance(payload, dict):
        return {key: _plain(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_plain(value) for value in payload]
    return payload


def _toon(payload: Any) -> str:
    # toon_format is an optional extra
    try:
        import toon_format  # type: ignore
    except ImportError:
        return json.dumps(payload, separators=(",", ":"))
    return toon_format.encode(payload)


def _cell(value: Value) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bytes):
        return f"x'{value.hex()}'"
    return str(value)


def records_table(records: list[Record], title: Optional[str] = None) -> Table:
    """Render records as a rich table, one column per key of the first record."""
    table = Table(title=title)
    columns = list(records[0].keys()) if records else []
    for name in columns:
        table.add_column(name)
    for record in records:
        table.add_row(*[_cell(record.get(name)) for name in columns])
    return table


def format_response(
    payload: Any,
    output_format: str = "toon",
    text_renderer: Optional[Callable[[Any], Any]] = None,
) -> dict:
    """Wrap a service response as {"format", "content"} for printing.

    Args:
        payload: Service response
        output_format: "toon", "json", or "text"
        text_renderer: Turns the payload into a rich renderable for text output

    Raises:
        ValueError: unknown output format
    """
    output_format = (output_format or "toon").lower()
    if output_format not in FORMATS:
        raise ValueError(f"Unknown output format {output_format!r}, expected one of: {', '.join(FORMATS)}")

    if output_format == "text" and text_renderer:
        return {"format": "text", "content": text_renderer(payload)}
    if output_format == "text":
        return {"format": "text", "content": json.dumps(_plain(payload), indent=2)}
    if output_format == "json":
        return {"format": "json", "content": _plain(payload)}
    return {"format": "toon", "content": _toon(_plain(payload))}


def render_cli(response: dict) -> Union[str, Table]:
    """Render a formatted response into something rich can print."""
    content = response.get("content")
    if response.get("format") == "json":
        return json.dumps(content, indent=2)
    if isinstance(content, Table):
        return content
    return str(content)
