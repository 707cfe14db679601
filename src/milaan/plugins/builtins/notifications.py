"""Built-in notification plugin.

Turns lifecycle events into inbox entries:

- comment, upvote, offer_help: the problem's owner is told.
- mark_solution: the author of the accepted comment is told.

Nobody is notified about their own action.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from milaan.domain.types import NotificationType
from milaan.plugins.hookspecs import hookimpl
from milaan.services.notifications import NotificationService

if TYPE_CHECKING:
    from milaan.infrastructure.session import SessionStore

logger = logging.getLogger(__name__)


class NotificationPlugin:
    """Records notifications in the session's inbox."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._service = NotificationService(store)

    def _display_name(self, user_id: str) -> str:
        user = self._store.get_user(user_id)
        return user.name if user is not None else "Someone"

    def _notify_owner(
        self,
        problem_id: str,
        actor_id: str,
        kind: NotificationType,
        action: str,
    ) -> None:
        problem = self._store.get_problem(problem_id)
        if problem is None or problem.user_id == actor_id:
            return
        content = f'{self._display_name(actor_id)} {action} "{problem.title}"'
        result = self._service.notify(problem.user_id, kind, content, problem_id)
        if not result.ok:
            logger.warning("Notification for %s dropped: %s", problem_id, result.error)

    # ------------------------------------------------------------------
    # Lifecycle hooks
    # ------------------------------------------------------------------

    @hookimpl
    def post_comment(self, comment_id: str, problem_id: str, user_id: str) -> None:
        self._notify_owner(problem_id, user_id, NotificationType.COMMENT, "commented on")

    @hookimpl
    def post_upvote(self, problem_id: str, user_id: str) -> None:
        self._notify_owner(problem_id, user_id, NotificationType.UPVOTE, "upvoted")

    @hookimpl
    def post_offer_help(self, problem_id: str, helper_id: str, status: str) -> None:
        self._notify_owner(problem_id, helper_id, NotificationType.HELPER, "offered to help with")

    @hookimpl
    def post_mark_solution(self, problem_id: str, comment_id: str, user_id: str) -> None:
        comment = self._store.get_comment(comment_id)
        problem = self._store.get_problem(problem_id)
        if comment is None or problem is None or comment.user_id == user_id:
            return
        content = f'Your comment was accepted as the solution to "{problem.title}"'
        result = self._service.notify(
            comment.user_id, NotificationType.SOLUTION, content, problem_id
        )
        if not result.ok:
            logger.warning("Notification for %s dropped: %s", problem_id, result.error)
