"""Rich/JSON output helpers.

The CLI renders a ServiceResult for humans (Rich tables and panels),
for scripts (``--quiet``: IDs only) or for machines (``--json``). This
module picks the mode; :mod:`milaan.output.renderers` does the drawing.

It also holds the small display formatters shared by the renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from milaan.services.result import ServiceResult

# Longest unit first; the first unit with a non-zero count wins.
_TIME_UNITS: tuple[tuple[str, int], ...] = (
    ("year", 31_536_000),
    ("month", 2_592_000),
    ("week", 604_800),
    ("day", 86_400),
    ("hour", 3_600),
    ("minute", 60),
    ("second", 1),
)


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be presented."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON takes precedence over quiet, quiet over the Rich renderers.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    from milaan.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)


def format_time_ago(timestamp: str, *, now: datetime | None = None) -> str:
    """Relative age of an ISO-8601 timestamp.

    Examples:
        >>> ref = datetime(2024, 1, 10, tzinfo=UTC)
        >>> format_time_ago("2024-01-07T00:00:00Z", now=ref)
        '3 days ago'
        >>> format_time_ago("2024-01-09T23:00:00Z", now=ref)
        '1 hour ago'
        >>> format_time_ago("2024-01-10T00:00:00Z", now=ref)
        'just now'
    """
    moment = datetime.fromisoformat(timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    elapsed = int(((now or datetime.now(UTC)) - moment).total_seconds())
    for unit, seconds in _TIME_UNITS:
        count = elapsed // seconds
        if count > 0:
            return f"{count} {unit}{'' if count == 1 else 's'} ago"
    return "just now"


def format_date(timestamp: str) -> str:
    """Long-form calendar date, e.g. ``June 15, 2023``."""
    moment = datetime.fromisoformat(timestamp)
    return f"{moment:%B} {moment.day}, {moment.year}"


def format_number(value: int | float) -> str:
    """Thousands-separated number.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
        >>> format_number(42)
        '42'
    """
    return f"{value:,}"
