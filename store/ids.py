"""
Sequential, zero-padded, prefixed identifiers for workers and tasks.
"""
import re
from typing import Optional

ID_PREFIXES = {"worker": "W", "task": "T"}


def format_id(prefix: str, counter: int, width: int = 3) -> str:
    """
    Render an identifier such as ``W001``.

    Args:
        prefix: Letter identifying the entity kind
        counter: Sequential number, starting at 1
        width: Minimum number of digits; larger counters simply grow

    Returns:
        str: The identifier
    """
    if counter < 1:
        raise ValueError(f"Identifier counter must be positive, got {counter}")
    return f"{prefix}{counter:0{width}d}"


def parse_id_number(value: str, prefix: str) -> Optional[int]:
    """Return the numeric part of ``value`` if it has the given prefix, else None."""
    match = re.fullmatch(rf"{re.escape(prefix)}(\d+)", value or "")
    if match is None:
        return None
    return int(match.group(1))


def prefix_for(kind: str) -> str:
    try:
        return ID_PREFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown identifier kind: {kind!r}") from None
