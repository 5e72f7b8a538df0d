"""Limit / offset windows over result sets."""

from __future__ import annotations

from typing import Any, Optional, Sequence


def paginate(items: Sequence[Any], limit: Optional[int] = None, offset: int = 0) -> tuple[list[Any], dict]:
    """Cut one window out of a result set.

    Args:
        items: Full result set
        limit: Largest window size; None keeps every item from offset on
        offset: Items to skip

    Returns:
        The window and its metadata (total_count, limit, offset, returned,
        has_more, next_offset)

    Raises:
        ValueError: negative limit or offset
    """
    if offset < 0 or (limit is not None and limit < 0):
        raise ValueError("limit and offset must not be negative")

    total_count = len(items)
    end = total_count if limit is None else min(offset + limit, total_count)
    window = list(items[offset:end])
    next_offset = end if offset < end < total_count else None

    return window, {
        "total_count": total_count,
        "limit": limit,
        "offset": offset,
        "returned": len(window),
        "has_more": next_offset is not None,
        "next_offset": next_offset,
    }
