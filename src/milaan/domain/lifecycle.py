"""Problem status lifecycle.

Status is driven by the domain manager, never set directly by callers:
- ``open -> in-progress`` when the first helper is assigned.
- ``open | in-progress -> solved`` when the owner marks a solution.

``solved`` is terminal.
"""

from __future__ import annotations

from enum import StrEnum


class ProblemStatus(StrEnum):
    """Lifecycle status of a problem."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    SOLVED = "solved"


PROBLEM_TRANSITIONS: dict[str, list[str]] = {
    "open": ["in-progress", "solved"],
    "in-progress": ["solved"],
    "solved": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = PROBLEM_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def status_after_help(current: str) -> ProblemStatus:
    """Status a problem takes once a helper joins it.

    Only an ``open`` problem advances; any other status is kept.
    """
    if current == ProblemStatus.OPEN:
        return ProblemStatus.IN_PROGRESS
    return ProblemStatus(current)
