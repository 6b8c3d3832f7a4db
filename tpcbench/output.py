"""Rendering of result rows as plain text, tables or JSON."""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any, Sequence, TextIO

from tabulate import tabulate


class OutputStyle(str, Enum):
    """How statistics are printed."""

    PLAIN = "plain"
    TABLE = "table"
    JSON = "json"


def _stream(out: TextIO | None) -> TextIO:
    return sys.stdout if out is None else out


def _format_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    return tabulate(
        [list(row) for row in rows],
        headers=[str(h).upper() for h in headers],
        tablefmt="pretty",
        stralign="left",
        disable_numparse=True,
    )


def render_string(
    fmt: str,
    headers: Sequence[str] | None,
    values: Sequence[Sequence[str]],
    out: TextIO | None = None,
) -> None:
    """Write each row through a ``%``-style format string.

    Without headers every row supplies the format's arguments directly. With
    headers the first two columns are passed as they are and the remaining
    ones are joined as ``header: value`` pairs into the third argument.
    """
    if not values:
        return
    stream = _stream(out)
    if not headers:
        for value in values:
            stream.write(fmt % tuple(value))
        return
    parts = []
    for value in values:
        pairs = ", ".join(
            f"{header}: {cell}" for header, cell in zip(headers[2:], value[2:])
        )
        parts.append(fmt % (value[0], value[1], pairs))
    stream.write("".join(parts))


def render_table(
    headers: Sequence[str],
    values: Sequence[Sequence[str]],
    out: TextIO | None = None,
) -> None:
    """Write the rows as a bordered text table."""
    if not values:
        return
    _stream(out).write(_format_table(headers, values) + "\n")


def render_json(
    headers: Sequence[str],
    values: Sequence[Sequence[str]],
    out: TextIO | None = None,
) -> None:
    """Write the rows as a compact JSON array of objects keyed by header."""
    if not values:
        return
    data = [dict(zip(headers, value)) for value in values]
    text = json.dumps(data, sort_keys=True, separators=(",", ":"))
    _stream(out).write(text + "\n")


def render(
    style: OutputStyle | str,
    fmt: str,
    headers: Sequence[str] | None,
    values: Sequence[Sequence[str]],
    out: TextIO | None = None,
) -> None:
    """Write the rows in the given style; unknown styles write nothing."""
    try:
        chosen = OutputStyle(style)
    except ValueError:
        return
    if chosen is OutputStyle.PLAIN:
        render_string(fmt, headers, values, out)
    elif chosen is OutputStyle.TABLE:
        render_table(headers or [], values, out)
    else:
        render_json(headers or [], values, out)


def int_to_string(i: int) -> str:
    """Format an integer in decimal."""
    return "%d" % i


def float_to_one_string(f: float) -> str:
    """Format a float with one decimal place."""
    return "%.1f" % f


def float_to_two_string(f: float) -> str:
    """Format a float with two decimal places."""
    return "%.2f" % f


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def render_explain_analyze(cursor: Any) -> str:
    """Render the rows of an executed DB-API cursor as a text table."""
    columns = [column[0] for column in cursor.description or ()]
    rows = [[_cell_text(cell) for cell in row] for row in cursor.fetchall()]
    return _format_table(columns, rows)