"""Pluggy hook specifications for milaan lifecycle events.

One hook per successful mutation, called synchronously after the
mutation's transaction has committed. Argument names match the payload
each service dispatches.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("milaan")
hookimpl = pluggy.HookimplMarker("milaan")


class MilaanHookSpec:
    """Hook specifications for the milaan plugin system."""

    @hookspec
    def post_problem_create(
        self,
        problem_id: str,
        user_id: str,
        title: str,
        category: str,
    ) -> None:
        """Called after a problem is posted."""

    @hookspec
    def post_problem_update(self, problem_id: str, fields_changed: list[str]) -> None:
        """Called after a problem is edited."""

    @hookspec
    def post_problem_delete(self, problem_id: str, user_id: str) -> None:
        """Called after a problem (and its comments) is removed."""

    @hookspec
    def post_comment(self, comment_id: str, problem_id: str, user_id: str) -> None:
        """Called after a comment is added."""

    @hookspec
    def post_upvote(self, problem_id: str, user_id: str) -> None:
        """Called after a problem is upvoted."""

    @hookspec
    def post_offer_help(self, problem_id: str, helper_id: str, status: str) -> None:
        """Called after a helper joins a problem."""

    @hookspec
    def post_mark_solution(self, problem_id: str, comment_id: str, user_id: str) -> None:
        """Called after the owner accepts a solution."""

    @hookspec
    def post_register(self, user_id: str, role: str) -> None:
        """Called after a new user registers."""
