"""ProblemService — problem and comment lifecycle.

The single writer of problems and comments during a session. Each
public method follows the same pipeline inside one store transaction:

VALIDATE → APPLY → PROPAGATE → RESPOND, then EVENT once committed.

PROPAGATE covers the derived state another record owns: the parent
problem's ``comment_count``, and the author's ``problem_count`` /
helper's ``help_count`` reputation counters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from milaan.domain.lifecycle import ProblemStatus, is_valid_transition, status_after_help
from milaan.domain.models import Comment, Problem, ProblemDraft, User
from milaan.domain.types import UserRole
from milaan.services._helpers import describe_validation_error, now_iso
from milaan.services.base import BaseService
from milaan.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from milaan.infrastructure.session import SessionStore

log = structlog.get_logger(__name__)


class ProblemService(BaseService):
    """Creates, edits, and advances problems and their comments."""

    # ------------------------------------------------------------------
    # Problems
    # ------------------------------------------------------------------

    def create_problem(self, draft: dict[str, Any], author_id: str | None) -> ServiceResult:
        """Post a new problem on behalf of *author_id*.

        The problem starts ``open`` with no upvotes, comments, or helpers,
        and goes to the front of the collection.
        """
        op = "create_problem"
        warnings: list[str] = []

        with self._store.transaction() as store:
            author = self._require_actor(op, author_id)
            if isinstance(author, ServiceResult):
                return author

            parsed, vr = ProblemDraft.validate_create(draft)
            if parsed is None:
                return failure(op, ErrorCode.VALIDATION_FAILED, "; ".join(vr.errors))

            now = now_iso()
            problem = Problem(
                id=store.next_id("problem"),
                user_id=author.id,
                status=ProblemStatus.OPEN,
                created_at=now,
                updated_at=now,
                upvotes=0,
                comment_count=0,
                helper_ids=[],
                **parsed.model_dump(),
            )
            store.insert_problem(problem)
            _bump_counter(store, author, "problem_count", +1)

        log.info("problem.created", problem_id=problem.id, author_id=author.id)
        self._dispatch_event(
            "post_problem_create",
            {
                "problem_id": problem.id,
                "user_id": author.id,
                "title": problem.title,
                "category": str(problem.category),
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=problem.model_dump(mode="json"),
            warnings=warnings,
        )

    def update_problem(self, problem_id: str, changes: dict[str, Any]) -> ServiceResult:
        """Merge *changes* into a problem and refresh ``updated_at``.

        Fields the manager owns (status, helpers, counters, identity and
        creation time) are skipped with a warning.
        """
        op = "update_problem"

        with self._store.transaction() as store:
            problem = store.get_problem(problem_id)
            if problem is None:
                return failure(
                    op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}"
                )

            vr = Problem.validate_update(changes)
            if not vr.valid:
                return failure(op, ErrorCode.VALIDATION_FAILED, "; ".join(vr.errors))
            warnings = list(vr.warnings)

            editable = {k: v for k, v in changes.items() if k not in Problem.MANAGED_FIELDS}
            merged = {**problem.model_dump(), **editable, "updated_at": now_iso()}
            try:
                updated = Problem.model_validate(merged)
            except ValidationError as exc:
                return failure(op, ErrorCode.VALIDATION_FAILED, describe_validation_error(exc))
            store.put_problem(updated)

        fields_changed = sorted(editable)
        log.info("problem.updated", problem_id=problem_id, fields=fields_changed)
        self._dispatch_event(
            "post_problem_update",
            {"problem_id": problem_id, "fields_changed": fields_changed},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": problem_id,
                "fields_changed": fields_changed,
                "problem": updated.model_dump(mode="json"),
            },
            warnings=warnings,
        )

    def delete_problem(self, problem_id: str) -> ServiceResult:
        """Remove a problem and its comments. Deleting an absent problem succeeds."""
        op = "delete_problem"
        warnings: list[str] = []

        with self._store.transaction() as store:
            removed = store.remove_problem(problem_id)
            if removed is None:
                return ServiceResult(
                    ok=True,
                    op=op,
                    data={"id": problem_id, "deleted": False, "comments_removed": 0},
                )
            comments_removed = store.remove_comments_for(problem_id)
            owner = store.get_user(removed.user_id)
            if owner is not None:
                _bump_counter(store, owner, "problem_count", -1)

        log.info("problem.deleted", problem_id=problem_id, comments_removed=comments_removed)
        self._dispatch_event(
            "post_problem_delete",
            {"problem_id": problem_id, "user_id": removed.user_id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": problem_id, "deleted": True, "comments_removed": comments_removed},
            warnings=warnings,
        )

    def upvote_problem(self, problem_id: str, acting_user_id: str | None) -> ServiceResult:
        """Add one upvote. Repeat upvotes from the same user all count."""
        op = "upvote_problem"
        warnings: list[str] = []

        with self._store.transaction() as store:
            actor = self._require_actor(op, acting_user_id)
            if isinstance(actor, ServiceResult):
                return actor

            problem = store.get_problem(problem_id)
            if problem is None:
                return failure(
                    op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}"
                )

            updated = problem.model_copy(update={"upvotes": problem.upvotes + 1})
            store.put_problem(updated)

        log.info("problem.upvoted", problem_id=problem_id, upvotes=updated.upvotes)
        self._dispatch_event(
            "post_upvote",
            {"problem_id": problem_id, "user_id": actor.id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": problem_id, "upvotes": updated.upvotes},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(
        self,
        content: str,
        problem_id: str,
        author_id: str | None,
        *,
        parent_id: str | None = None,
    ) -> ServiceResult:
        """Post a comment under a problem and bump its ``comment_count``."""
        op = "add_comment"
        warnings: list[str] = []

        with self._store.transaction() as store:
            author = self._require_actor(op, author_id)
            if isinstance(author, ServiceResult):
                return author

            if not content or not content.strip():
                return failure(op, ErrorCode.VALIDATION_FAILED, "Comment cannot be empty")

            problem = store.get_problem(problem_id)
            if problem is None:
                return failure(
                    op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}"
                )

            if parent_id is not None:
                parent = store.get_comment(parent_id)
                if parent is None or parent.problem_id != problem_id:
                    return failure(
                        op,
                        ErrorCode.NOT_FOUND,
                        f"No comment {parent_id} under problem {problem_id}",
                        parent_id=parent_id,
                    )

            comment = Comment(
                id=store.next_id("comment"),
                content=content.strip(),
                problem_id=problem_id,
                user_id=author.id,
                created_at=now_iso(),
                parent_id=parent_id,
                is_solution=False,
            )
            store.add_comment(comment)
            updated = problem.model_copy(update={"comment_count": problem.comment_count + 1})
            store.put_problem(updated)

        log.info("comment.added", comment_id=comment.id, problem_id=problem_id)
        self._dispatch_event(
            "post_comment",
            {"comment_id": comment.id, "problem_id": problem_id, "user_id": author.id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={**comment.model_dump(mode="json"), "comment_count": updated.comment_count},
            warnings=warnings,
        )

    def mark_as_solution(
        self,
        comment_id: str,
        problem_id: str,
        acting_user_id: str | None,
    ) -> ServiceResult:
        """Accept a comment as the solution and mark its problem solved.

        Only the problem's owner may do this, and only once per problem:
        the flag and the status change are applied together.
        """
        op = "mark_as_solution"
        warnings: list[str] = []

        with self._store.transaction() as store:
            actor = self._require_actor(op, acting_user_id)
            if isinstance(actor, ServiceResult):
                return actor

            problem = store.get_problem(problem_id)
            if problem is None:
                return failure(
                    op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}"
                )
            if problem.user_id != actor.id:
                return failure(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    "Only the problem's owner can mark a solution",
                    owner_id=problem.user_id,
                )

            comment = store.get_comment(comment_id)
            if comment is None or comment.problem_id != problem_id:
                return failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"No comment {comment_id} under problem {problem_id}",
                    comment_id=comment_id,
                )

            if problem.status == ProblemStatus.SOLVED:
                return failure(
                    op,
                    ErrorCode.CONFLICT,
                    f"Problem {problem_id} already has an accepted solution",
                )
            if not is_valid_transition(problem.status, ProblemStatus.SOLVED):
                return failure(
                    op,
                    ErrorCode.INVALID_TRANSITION,
                    f"Invalid status transition: {problem.status} -> solved",
                )

            store.put_comment(comment.model_copy(update={"is_solution": True}))
            store.put_problem(
                problem.model_copy(
                    update={"status": ProblemStatus.SOLVED, "updated_at": now_iso()}
                )
            )

        log.info("solution.marked", problem_id=problem_id, comment_id=comment_id)
        self._dispatch_event(
            "post_mark_solution",
            {"problem_id": problem_id, "comment_id": comment_id, "user_id": actor.id},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "problem_id": problem_id,
                "comment_id": comment_id,
                "status": str(ProblemStatus.SOLVED),
                "is_solution": True,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def offer_help(self, problem_id: str, acting_user_id: str | None) -> ServiceResult:
        """Join a problem as a helper; an ``open`` problem becomes ``in-progress``."""
        op = "offer_help"
        warnings: list[str] = []

        with self._store.transaction() as store:
            actor = self._require_actor(op, acting_user_id)
            if isinstance(actor, ServiceResult):
                return actor
            if not actor.is_helper:
                return failure(
                    op,
                    ErrorCode.UNAUTHORIZED,
                    "Only helpers can offer help",
                    role=str(actor.role),
                )

            problem = store.get_problem(problem_id)
            if problem is None:
                return failure(
                    op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}"
                )
            if problem.has_helper(actor.id):
                return failure(
                    op,
                    ErrorCode.CONFLICT,
                    "You are already helping with this problem",
                    user_id=actor.id,
                )

            updated = problem.model_copy(
                update={
                    "helper_ids": [*problem.helper_ids, actor.id],
                    "status": status_after_help(problem.status),
                    "updated_at": now_iso(),
                }
            )
            store.put_problem(updated)
            _bump_counter(store, actor, "help_count", +1)

        log.info("help.offered", problem_id=problem_id, helper_id=actor.id, status=updated.status)
        self._dispatch_event(
            "post_offer_help",
            {"problem_id": problem_id, "helper_id": actor.id, "status": str(updated.status)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": problem_id,
                "status": str(updated.status),
                "helper_ids": list(updated.helper_ids),
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Synchronous reads of session state
    # ------------------------------------------------------------------

    def get_problem_record(self, problem_id: str) -> ServiceResult:
        """Return the stored problem without denormalization."""
        op = "get_problem_record"
        problem = self._store.get_problem(problem_id)
        if problem is None:
            return failure(op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}")
        return ServiceResult(ok=True, op=op, data=problem.model_dump(mode="json"))

    def list_problem_records(self) -> ServiceResult:
        """Return every stored problem, most recent first."""
        items = [p.model_dump(mode="json") for p in self._store.list_problems()]
        return ServiceResult(
            ok=True,
            op="list_problem_records",
            data={"count": len(items), "items": items},
        )


_COUNTER_ROLES: dict[str, UserRole] = {
    "problem_count": UserRole.ASKER,
    "help_count": UserRole.HELPER,
}


def _bump_counter(store: SessionStore, user: User, counter: str, delta: int) -> None:
    """Adjust a user's reputation counter, never below zero.

    Counters are role-conditional: a counter the user has never had is
    only started for the role it belongs to.
    """
    current = getattr(user, counter)
    if current is None and user.role != _COUNTER_ROLES[counter]:
        return
    store.put_user(user.model_copy(update={counter: max(0, (current or 0) + delta)}))
