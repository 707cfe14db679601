"""ID prefixes and sequence parsing.

All entities use sequential IDs: ``{prefix}{n}`` where *n* is a
per-prefix counter owned by the session (see
:mod:`milaan.infrastructure.counters`).

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

TYPE_PREFIXES: dict[str, str] = {
    "user": "user_",
    "problem": "problem_",
    "comment": "comment_",
    "notification": "notif_",
}


def sequence_number(entity_id: str, prefix: str) -> int | None:
    """Return the numeric suffix of *entity_id*, or None if it has another shape.

    Only ASCII digits count as a suffix.

    Examples:
        >>> sequence_number("problem_12", "problem_")
        12
        >>> sequence_number("problem_x", "problem_") is None
        True
    """
    if not entity_id.startswith(prefix):
        return None
    suffix = entity_id[len(prefix) :]
    if not (suffix.isascii() and suffix.isdigit()):
        return None
    return int(suffix)
