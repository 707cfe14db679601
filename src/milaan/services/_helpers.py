"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import ValidationError


def now_iso() -> str:
    """Current UTC time as ISO 8601 with a ``Z`` suffix (entity timestamps)."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def matches_query(query: str, *fields: str) -> bool:
    """Case-insensitive substring match of *query* against any of *fields*.

    Examples:
        >>> matches_query("flood", "Urgent: flood relief", "disaster")
        True
        >>> matches_query("LIBRARY", "community library")
        True
        >>> matches_query("x", "abc")
        False
    """
    needle = query.strip().lower()
    return any(needle in value.lower() for value in fields)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into ``field: message`` pairs joined by ``; ``."""
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
