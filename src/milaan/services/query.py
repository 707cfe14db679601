"""QueryService — async, read-only views over the session state.

Each read awaits the simulated round-trip configured under ``[latency]``
before touching the store, then builds its view at read time:

- get_problem: problem + author + helpers
- get_comments: comments oldest-first, each + author
- get_user / get_users_by_role / search_users / top_helpers
- list_problems / search_problems / get_problems_by_user / get_problems_by_helper

A referenced user that no longer resolves fails the whole read with
NOT_FOUND rather than dropping the reference.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

import anyio
import structlog

from milaan.domain.lifecycle import ProblemStatus
from milaan.domain.types import CATEGORY_LABELS, Category, ProblemSort, UserRole
from milaan.services._helpers import matches_query
from milaan.services.base import BaseService
from milaan.services.contracts import (
    CommentListData,
    CommentView,
    ProblemListData,
    ProblemView,
    UserListData,
    dump_validated,
)
from milaan.services.result import ErrorCode, ServiceResult, failure

if TYPE_CHECKING:
    from milaan.domain.models import Problem, User

log = structlog.get_logger(__name__)


class _MissingUser(LookupError):
    def __init__(self, user_id: str) -> None:
        super().__init__(user_id)
        self.user_id = user_id


class QueryService(BaseService):
    """Simulated-latency reads returning denormalized views."""

    async def _latency(self, name: str) -> None:
        await anyio.sleep(self._store.settings.latency.seconds(name))

    def _resolve(self, user_id: str) -> User:
        user = self._store.get_user(user_id)
        if user is None:
            raise _MissingUser(user_id)
        return user

    # ------------------------------------------------------------------
    # Problems
    # ------------------------------------------------------------------

    async def get_problem(self, problem_id: str) -> ServiceResult:
        """Problem by ID with ``user`` (author) and ``helpers`` attached."""
        op = "get_problem"
        await self._latency("problem_detail")

        problem = self._store.get_problem(problem_id)
        if problem is None:
            return failure(op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}")

        try:
            author = self._resolve(problem.user_id)
            helpers = [self._resolve(hid) for hid in problem.helper_ids]
        except _MissingUser as exc:
            return _missing_user(op, exc)

        view = dump_validated(
            ProblemView,
            {**problem.model_dump(), "user": author, "helpers": helpers},
        )
        return ServiceResult(ok=True, op=op, data=view)

    async def get_comments(self, problem_id: str) -> ServiceResult:
        """Comments under a problem, oldest first, each with its ``user``."""
        op = "get_comments"
        await self._latency("comments")

        if self._store.get_problem(problem_id) is None:
            return failure(op, ErrorCode.NOT_FOUND, f"No problem found with ID: {problem_id}")

        try:
            items = [
                {**c.model_dump(), "user": self._resolve(c.user_id)}
                for c in self._store.comments_for(problem_id)
            ]
        except _MissingUser as exc:
            return _missing_user(op, exc)

        data = dump_validated(
            CommentListData,
            {"problem_id": problem_id, "count": len(items), "items": items},
        )
        return ServiceResult(ok=True, op=op, data=data)

    async def list_problems(
        self,
        *,
        query: str | None = None,
        category: str | None = None,
        status: str | None = None,
        sort: str = "recent",
    ) -> ServiceResult:
        """Filtered, sorted problem listing.

        Args:
            query: Substring matched against title, description and address.
            category: Only problems in this ``Category``.
            status: Only problems with this status.
            sort: ``recent`` (newest first), ``popular`` (most upvotes) or
                ``comments`` (most comments).
        """
        op = "list_problems"
        invalid = (
            _check_choice("category", category, Category)
            or _check_choice("status", status, ProblemStatus)
            or _check_choice("sort", sort, ProblemSort)
        )
        if invalid is not None:
            return failure(op, ErrorCode.VALIDATION_FAILED, invalid)

        await self._latency("problem_list")

        problems = self._store.list_problems()
        if query:
            problems = [
                p
                for p in problems
                if matches_query(query, p.title, p.description, p.location.address)
            ]
        if category:
            problems = [p for p in problems if p.category == category]
        if status:
            problems = [p for p in problems if p.status == status]
        problems = _sorted(problems, ProblemSort(sort))

        return _problem_list(op, problems, filters={"query": query, "sort": sort})

    async def search_problems(self, query: str) -> ServiceResult:
        """Problems whose title, description, category or address contains *query*."""
        op = "search_problems"
        await self._latency("problem_search")
        matches = [
            p
            for p in self._store.list_problems()
            if matches_query(query, p.title, p.description, p.category, p.location.address)
        ]
        log.debug("problems.searched", query=query, count=len(matches))
        return _problem_list(op, matches, filters={"query": query})

    async def get_problems_by_user(self, user_id: str) -> ServiceResult:
        """Problems posted by *user_id*."""
        await self._latency("problem_search")
        owned = [p for p in self._store.list_problems() if p.user_id == user_id]
        return _problem_list("get_problems_by_user", owned, filters={"user_id": user_id})

    async def get_problems_by_helper(self, helper_id: str) -> ServiceResult:
        """Problems *helper_id* has offered help on."""
        await self._latency("problem_search")
        helping = [p for p in self._store.list_problems() if p.has_helper(helper_id)]
        return _problem_list("get_problems_by_helper", helping, filters={"helper_id": helper_id})

    def categories(self) -> ServiceResult:
        """Every problem category with its display label."""
        items = [{"value": str(c), "label": CATEGORY_LABELS[c]} for c in Category]
        return ServiceResult(ok=True, op="categories", data={"count": len(items), "items": items})

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id: str) -> ServiceResult:
        op = "get_user"
        await self._latency("user_lookup")
        try:
            user = self._resolve(user_id)
        except _MissingUser as exc:
            return _missing_user(op, exc)
        return ServiceResult(ok=True, op=op, data=user.model_dump(mode="json"))

    async def get_users_by_role(self, role: str) -> ServiceResult:
        op = "get_users_by_role"
        invalid = _check_choice("role", role, UserRole)
        if invalid is not None:
            return failure(op, ErrorCode.VALIDATION_FAILED, invalid)
        await self._latency("user_search")
        users = [u for u in self._store.list_users() if u.role == role]
        return _user_list(op, users)

    async def search_users(self, query: str) -> ServiceResult:
        """Users whose name, email or bio contains *query*."""
        await self._latency("user_search")
        users = [
            u for u in self._store.list_users() if matches_query(query, u.name, u.email, u.bio)
        ]
        return _user_list("search_users", users)

    async def top_helpers(self, limit: int = 5) -> ServiceResult:
        """Helpers ranked by rating, unrated helpers last."""
        await self._latency("user_search")
        helpers = [u for u in self._store.list_users() if u.is_helper]
        helpers.sort(key=lambda u: u.rating or 0.0, reverse=True)
        return _user_list("top_helpers", helpers[: max(limit, 0)])


def _missing_user(op: str, exc: _MissingUser) -> ServiceResult:
    log.warning("user.unresolved", op=op, user_id=exc.user_id)
    return failure(
        op,
        ErrorCode.NOT_FOUND,
        f"No user found with ID: {exc.user_id}",
        user_id=exc.user_id,
    )


def _check_choice(field: str, value: str | None, choices: type[StrEnum]) -> str | None:
    if value is None or value in choices.__members__.values():
        return None
    allowed = ", ".join(str(v) for v in choices.__members__.values())
    return f"Unknown {field} '{value}' (expected one of: {allowed})"


def _created(problem: Problem) -> datetime:
    return datetime.fromisoformat(problem.created_at)


def _sorted(problems: list[Problem], sort: ProblemSort) -> list[Problem]:
    if sort == ProblemSort.POPULAR:
        return sorted(problems, key=lambda p: p.upvotes, reverse=True)
    if sort == ProblemSort.COMMENTS:
        return sorted(problems, key=lambda p: p.comment_count, reverse=True)
    return sorted(problems, key=_created, reverse=True)


def _problem_list(
    op: str, problems: list[Problem], *, filters: dict[str, str | None]
) -> ServiceResult:
    data = dump_validated(
        ProblemListData,
        {"count": len(problems), "items": problems, **filters},
    )
    return ServiceResult(ok=True, op=op, data=data)


def _user_list(op: str, users: list[User]) -> ServiceResult:
    data = dump_validated(UserListData, {"count": len(users), "items": users})
    return ServiceResult(ok=True, op=op, data=data)
