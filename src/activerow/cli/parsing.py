"""Input parsing utilities for CLI commands."""

import json
from typing import Any


def parse_value(raw: str) -> Any:
    """Parse a command line value.

    JSON scalars are decoded ("12" -> 12, "null" -> None, "true" -> True);
    anything else is kept as the raw string.
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(value, (dict, list)):
        return raw
    return value


def parse_assignment(text: str) -> tuple[str, Any]:
    """Parse a ``column=value`` pair.

    Examples:
        "price=12" → ("price", 12)
        "name=Hex Bolt" → ("name", "Hex Bolt")

    Raises:
        ValueError: If text has no '=' or an empty column name
    """
    if "=" not in text:
        raise ValueError(f"Invalid assignment: '{text}'. Expected format: column=value")
    column, raw = text.split("=", 1)
    column = column.strip()
    if not column:
        raise ValueError(f"Invalid assignment: '{text}'. Column name is empty")
    return column, parse_value(raw)


def parse_assignments(items: list[str] | None) -> dict[str, Any]:
    """Parse repeated ``column=value`` options into an ordered dict."""
    result: dict[str, Any] = {}
    for text in items or []:
        column, value = parse_assignment(text)
        result[column] = value
    return result
