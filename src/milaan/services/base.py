"""BaseService — abstract foundation for all milaan services.

Every service receives the session's :class:`SessionStore` at
construction time. Services own their atomicity via
``self._store.transaction()`` and resolve the acting user through
:meth:`_require_actor`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from milaan.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from milaan.domain.models import User
    from milaan.infrastructure.session import SessionStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class ProblemService(BaseService):
            def upvote_problem(self, problem_id: str, acting_user_id: str | None) -> ServiceResult:
                with self._store.transaction() as store:
                    ...
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def _require_actor(self, op: str, user_id: str | None) -> User | ServiceResult:
        """Resolve *user_id* to a directory user, or an UNAUTHORIZED result."""
        if user_id is None:
            return failure(op, ErrorCode.UNAUTHORIZED, "You must be logged in")
        user = self._store.get_user(user_id)
        if user is None:
            return failure(
                op,
                ErrorCode.UNAUTHORIZED,
                f"Unknown acting user: {user_id}",
                user_id=user_id,
            )
        return user

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Announce a committed change to plugins. No-op before ``init_plugins()``.

        A failing plugin adds a warning to *warnings*; the operation still succeeds.
        """
        pm = self._store.plugin_manager
        if pm is None:
            return
        try:
            pm.dispatch(hook_name, **payload)
        except Exception:
            logger.warning("Plugin hook %s raised", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
