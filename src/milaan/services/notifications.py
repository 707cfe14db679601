"""NotificationService — per-user inbox of activity on their problems.

Notifications are produced by the built-in notification plugin in
response to lifecycle events and read back here.
"""

from __future__ import annotations

import structlog

from milaan.domain.models import Notification
from milaan.domain.types import NotificationType
from milaan.services._helpers import now_iso
from milaan.services.base import BaseService
from milaan.services.contracts import NotificationListData, dump_validated
from milaan.services.result import ErrorCode, ServiceResult, failure

log = structlog.get_logger(__name__)


class NotificationService(BaseService):
    """Records and reads notifications."""

    def notify(
        self,
        recipient_id: str,
        kind: NotificationType,
        content: str,
        related_id: str,
    ) -> ServiceResult:
        """Record a notification for *recipient_id* about *related_id*."""
        op = "notify"
        with self._store.transaction() as store:
            if store.get_user(recipient_id) is None:
                return failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No user found with ID: {recipient_id}",
                    user_id=recipient_id,
                )
            notification = Notification(
                id=store.next_id("notification"),
                type=kind,
                content=content,
                read=False,
                user_id=recipient_id,
                related_id=related_id,
                created_at=now_iso(),
            )
            store.add_notification(notification)

        log.debug("notification.recorded", notification_id=notification.id, type=str(kind))
        return ServiceResult(ok=True, op=op, data=notification.model_dump(mode="json"))

    def list_notifications(self, user_id: str, *, unread_only: bool = False) -> ServiceResult:
        """Inbox for *user_id*, newest first."""
        inbox = self._store.notifications_for(user_id)
        unread = sum(1 for n in inbox if not n.read)
        if unread_only:
            inbox = [n for n in inbox if not n.read]
        data = dump_validated(
            NotificationListData,
            {"user_id": user_id, "count": len(inbox), "unread": unread, "items": inbox},
        )
        return ServiceResult(ok=True, op="list_notifications", data=data)

    def mark_read(self, notification_id: str, acting_user_id: str | None) -> ServiceResult:
        """Mark one notification read. Only its recipient may do this."""
        op = "mark_read"
        with self._store.transaction() as store:
            actor = self._require_actor(op, acting_user_id)
            if isinstance(actor, ServiceResult):
                return actor

            notification = store.get_notification(notification_id)
            if notification is None:
                return failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No notification found with ID: {notification_id}",
                )
            if notification.user_id != actor.id:
                return failure(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    "Notifications can only be marked read by their recipient",
                )
            if not notification.read:
                store.put_notification(notification.model_copy(update={"read": True}))

        return ServiceResult(ok=True, op=op, data={"id": notification_id, "read": True})

    def mark_all_read(self, user_id: str) -> ServiceResult:
        """Mark every unread notification for *user_id* read."""
        with self._store.transaction() as store:
            pending = [n for n in store.notifications_for(user_id) if not n.read]
            for notification in pending:
                store.put_notification(notification.model_copy(update={"read": True}))

        return ServiceResult(
            ok=True,
            op="mark_all_read",
            data={"user_id": user_id, "marked": len(pending)},
        )
