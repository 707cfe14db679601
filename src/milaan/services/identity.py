"""IdentityService — who is acting in this session.

Holds zero or one current user. The current user is persisted to the
session's identity slot so it survives into the next session.

``login`` resolves the email against the user directory and does not
check the password. That shortcut belongs to the demo directory only;
there is no credential store behind it.
"""

from __future__ import annotations

from typing import Any

import anyio
import structlog
from pydantic import ValidationError

from milaan.config.logging import bind_actor
from milaan.domain.models import User
from milaan.domain.types import UserRole
from milaan.services._helpers import describe_validation_error, now_iso
from milaan.services.base import BaseService
from milaan.services.result import ErrorCode, ServiceResult, failure

log = structlog.get_logger(__name__)


class IdentityService(BaseService):
    """Login, registration, logout, and self-service profile edits."""

    def current_user(self) -> User | None:
        return self._store.current_user

    def whoami(self) -> ServiceResult:
        """Report the current user, or UNAUTHORIZED if nobody is logged in."""
        user = self._store.current_user
        if user is None:
            return failure("whoami", ErrorCode.UNAUTHORIZED, "Nobody is logged in")
        return ServiceResult(ok=True, op="whoami", data=user.model_dump(mode="json"))

    async def login(self, email: str, password: str) -> ServiceResult:
        """Adopt the directory user registered under *email*.

        *password* is accepted for interface compatibility and ignored.
        """
        op = "login"
        await anyio.sleep(self._store.settings.latency.seconds("login"))

        user = self._store.find_user_by_email(email)
        if user is None:
            log.info("login.failed", email=email)
            return failure(op, ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")

        with self._store.transaction() as store:
            store.set_current_user(user)
        bind_actor(user.id)
        log.info("login.succeeded", user_id=user.id)
        return ServiceResult(ok=True, op=op, data=user.model_dump(mode="json"))

    def register(self, profile: dict[str, Any], password: str) -> ServiceResult:
        """Create a new user from *profile* and adopt it as the current user.

        Role-conditional counters start at zero: ``help_count`` for
        helpers, ``problem_count`` for askers.
        """
        op = "register"
        warnings: list[str] = []

        vr = User.validate_create(profile)
        if not vr.valid:
            return failure(op, ErrorCode.VALIDATION_FAILED, "; ".join(vr.errors))

        role = UserRole(profile["role"])
        counters: dict[str, Any] = (
            {"help_count": 0} if role == UserRole.HELPER else {"problem_count": 0}
        )
        try:
            candidate = User.model_validate(
                {**counters, **profile, "id": "", "created_at": now_iso()}
            )
        except ValidationError as exc:
            return failure(op, ErrorCode.VALIDATION_FAILED, describe_validation_error(exc))

        with self._store.transaction() as store:
            user = candidate.model_copy(update={"id": store.next_id("user")})
            store.put_user(user)
            store.set_current_user(user)

        bind_actor(user.id)
        log.info("user.registered", user_id=user.id, role=str(user.role))
        self._dispatch_event(
            "post_register",
            {"user_id": user.id, "role": str(user.role)},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=user.model_dump(mode="json"), warnings=warnings)

    def logout(self) -> ServiceResult:
        """Forget the current user. Succeeds even if nobody was logged in."""
        previous = self._store.current_user
        self._store.set_current_user(None)
        bind_actor(None)
        if previous is not None:
            log.info("logout", user_id=previous.id)
        return ServiceResult(
            ok=True,
            op="logout",
            data={"user_id": previous.id if previous is not None else None},
        )

    def update_user(self, changes: dict[str, Any]) -> ServiceResult:
        """Merge *changes* into the current user's own record.

        ``id``, ``created_at`` and ``role`` are skipped with a warning.
        """
        op = "update_user"

        with self._store.transaction() as store:
            user = store.current_user
            if user is None:
                return failure(op, ErrorCode.UNAUTHORIZED, "You must be logged in")

            vr = User.validate_update(changes)
            if not vr.valid:
                return failure(op, ErrorCode.VALIDATION_FAILED, "; ".join(vr.errors))

            editable = {k: v for k, v in changes.items() if k not in User.IMMUTABLE_FIELDS}
            try:
                updated = User.model_validate({**user.model_dump(), **editable})
            except ValidationError as exc:
                return failure(op, ErrorCode.VALIDATION_FAILED, describe_validation_error(exc))
            store.put_user(updated)

        fields_changed = sorted(editable)
        log.info("user.updated", user_id=updated.id, fields=fields_changed)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": updated.id,
                "fields_changed": fields_changed,
                "user": updated.model_dump(mode="json"),
            },
            warnings=list(vr.warnings),
        )
