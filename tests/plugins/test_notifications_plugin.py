"""Tests for the built-in NotificationPlugin hooks, called directly."""

from __future__ import annotations

import logging

import pytest

from milaan.infrastructure.session import SessionStore
from milaan.plugins.builtins.notifications import NotificationPlugin
from tests.conftest import ASKER_ID, HELPER_ID, SECOND_ASKER_ID, SECOND_HELPER_ID


@pytest.fixture
def plugin(bare_store: SessionStore) -> NotificationPlugin:
    return NotificationPlugin(bare_store)


class TestOwnerNotifications:
    def test_comment_content(self, plugin: NotificationPlugin, bare_store: SessionStore) -> None:
        plugin.post_comment(comment_id="comment_9", problem_id="problem_4", user_id=HELPER_ID)
        (note,) = bare_store.notifications_for(ASKER_ID)
        assert note.type == "comment"
        assert note.content == (
            'John Helper commented on "Seeking mentorship for underprivileged children"'
        )
        assert note.related_id == "problem_4"

    def test_offer_help(self, plugin: NotificationPlugin, bare_store: SessionStore) -> None:
        plugin.post_offer_help(problem_id="problem_1", helper_id=HELPER_ID, status="in-progress")
        (note,) = bare_store.notifications_for(SECOND_ASKER_ID)
        assert note.type == "helper"
        assert "offered to help with" in note.content

    def test_owner_acting_is_silent(
        self, plugin: NotificationPlugin, bare_store: SessionStore
    ) -> None:
        plugin.post_upvote(problem_id="problem_4", user_id=ASKER_ID)
        assert bare_store.notifications_for(ASKER_ID) == []

    def test_absent_problem_is_silent(
        self, plugin: NotificationPlugin, bare_store: SessionStore
    ) -> None:
        plugin.post_upvote(problem_id="problem_404", user_id=HELPER_ID)
        assert bare_store.notifications_for(ASKER_ID) == []

    def test_unknown_actor_named_someone(
        self, plugin: NotificationPlugin, bare_store: SessionStore
    ) -> None:
        plugin.post_upvote(problem_id="problem_4", user_id="user_gone")
        (note,) = bare_store.notifications_for(ASKER_ID)
        assert note.content.startswith("Someone upvoted")


class TestSolutionNotifications:
    def test_comment_author_told(
        self, plugin: NotificationPlugin, bare_store: SessionStore
    ) -> None:
        plugin.post_mark_solution(
            problem_id="problem_1", comment_id="comment_2", user_id=SECOND_ASKER_ID
        )
        (note,) = bare_store.notifications_for(SECOND_HELPER_ID)
        assert note.type == "solution"
        assert note.content.startswith("Your comment was accepted")

    def test_own_comment_is_silent(
        self, plugin: NotificationPlugin, bare_store: SessionStore
    ) -> None:
        plugin.post_mark_solution(
            problem_id="problem_1", comment_id="comment_2", user_id=SECOND_HELPER_ID
        )
        assert bare_store.notifications_for(SECOND_HELPER_ID) == []


class TestDroppedNotifications:
    def test_missing_owner_logged(
        self,
        plugin: NotificationPlugin,
        bare_store: SessionStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        problem = bare_store.get_problem("problem_4")
        assert problem is not None
        bare_store.put_problem(problem.model_copy(update={"user_id": "user_gone"}))

        with caplog.at_level(logging.WARNING, logger="milaan.plugins.builtins.notifications"):
            plugin.post_comment(comment_id="comment_9", problem_id="problem_4", user_id=HELPER_ID)

        assert "dropped" in caplog.text
