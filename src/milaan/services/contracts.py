"""Typed payload contracts for the denormalized read views.

Query payloads are validated against these models before they leave the
service layer, so a view that loses its ``user`` or grows an unexpected
shape fails in tests rather than in a renderer.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from milaan.domain.models import Comment, Notification, Problem, User

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a JSON-safe payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json")


class ProblemView(Problem):
    """A problem joined with its author and the users helping with it."""

    user: User
    helpers: list[User]


class CommentView(Comment):
    """A comment joined with its author."""

    user: User


class ProblemListData(BaseModel):
    """Payload contract for problem listings (``list_problems``, ``search_problems``, ...)."""

    model_config = ConfigDict(extra="allow")

    count: int
    items: list[Problem]


class CommentListData(BaseModel):
    """Payload contract for ``QueryService.get_comments``."""

    problem_id: str
    count: int
    items: list[CommentView]


class UserListData(BaseModel):
    """Payload contract for user listings (``search_users``, ``top_helpers``, ...)."""

    model_config = ConfigDict(extra="allow")

    count: int
    items: list[User]


class NotificationListData(BaseModel):
    """Payload contract for ``NotificationService.list_notifications``."""

    user_id: str
    count: int
    unread: int
    items: list[Notification]
