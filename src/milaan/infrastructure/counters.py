"""Sequential ID generation for session entities.

Each prefix (``user_``, ``problem_``, ``comment_``, ``notif_``) has its
own counter. Seeded or restored records are *observed* so that new IDs
always land past the highest one already in use.

The counters are part of the session snapshot taken by
:meth:`SessionStore.transaction`, so a rolled-back operation does not
leave a gap.
"""

from __future__ import annotations

from milaan.domain.ids import TYPE_PREFIXES, sequence_number

_VALID_PREFIXES = frozenset(TYPE_PREFIXES.values())


class IdCounters:
    """Per-prefix sequential counters."""

    def __init__(self) -> None:
        self._next: dict[str, int] = {prefix: 1 for prefix in _VALID_PREFIXES}

    def next_id(self, prefix: str) -> str:
        """Claim the next ID for *prefix* (e.g. ``"problem_6"``).

        Raises:
            ValueError: If *prefix* is not a known entity prefix.
        """
        self._check(prefix)
        value = self._next[prefix]
        self._next[prefix] = value + 1
        return f"{prefix}{value}"

    def observe(self, entity_id: str, prefix: str) -> None:
        """Advance the counter for *prefix* past an existing *entity_id*."""
        self._check(prefix)
        number = sequence_number(entity_id, prefix)
        if number is not None and number >= self._next[prefix]:
            self._next[prefix] = number + 1

    def snapshot(self) -> dict[str, int]:
        return dict(self._next)

    def restore(self, state: dict[str, int]) -> None:
        self._next = dict(state)

    @staticmethod
    def _check(prefix: str) -> None:
        if prefix not in _VALID_PREFIXES:
            msg = f"Unknown ID prefix: {prefix!r}. Expected one of {sorted(_VALID_PREFIXES)}"
            raise ValueError(msg)
