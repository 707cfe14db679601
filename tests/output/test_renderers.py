"""Tests for the op-dispatched Rich renderers."""

from __future__ import annotations

import pytest

from milaan.infrastructure.session import SessionStore
from milaan.output.console import create_console, get_output, style_for_role, style_for_status
from milaan.output.renderers import render_quiet, render_result
from milaan.services.query import QueryService
from milaan.services.result import ErrorCode, ServiceResult, failure


class TestRenderQuiet:
    def test_single_id(self) -> None:
        result = ServiceResult(ok=True, op="get_user", data={"id": "user_3", "name": "Amit"})
        assert render_quiet(result) == "user_3"

    def test_no_id(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="logout", data={"user_id": None})) == (
            "OK: logout"
        )

    def test_error(self) -> None:
        out = render_quiet(failure("whoami", ErrorCode.UNAUTHORIZED, "Not logged in"))
        assert out.startswith("ERROR: whoami")
        assert "Not logged in" in out


class TestRenderErrors:
    def test_detail_only_when_verbose(self) -> None:
        result = failure("get_user", ErrorCode.NOT_FOUND, "No user", user_id="user_9")
        assert "user_9" not in render_result(result)
        assert "user_id: user_9" in render_result(result, verbose=True)


@pytest.mark.anyio
class TestRenderViews:
    async def test_problem_panel(self, bare_store: SessionStore) -> None:
        result = await QueryService(bare_store).get_problem("problem_2")
        out = render_result(result)
        assert "problem_2" in out
        assert "(urgent)" in out
        assert "Disaster Relief" in out
        assert "Sara Needy" in out
        assert "John Helper" in out
        assert "June 15, 2023" in out

    async def test_problem_table(self, bare_store: SessionStore) -> None:
        out = render_result(await QueryService(bare_store).list_problems())
        for problem_id in ("problem_1", "problem_5"):
            assert problem_id in out
        assert "5 problems" in out

    async def test_comments(self, bare_store: SessionStore) -> None:
        out = render_result(await QueryService(bare_store).get_comments("problem_3"))
        assert "Amit Volunteer" in out
        assert "solution" in out
        assert "1 comments" in out

    async def test_no_comments(self, bare_store: SessionStore) -> None:
        out = render_result(await QueryService(bare_store).get_comments("problem_4"))
        assert out == "No comments on problem_4"

    async def test_user_panel(self, bare_store: SessionStore) -> None:
        out = render_result(await QueryService(bare_store).get_user("user_3"))
        assert "Amit Volunteer" in out
        assert "rating: 4.9 / 5" in out
        assert "problems helped: 42" in out

    async def test_user_table(self, bare_store: SessionStore) -> None:
        out = render_result(await QueryService(bare_store).top_helpers())
        assert out.index("user_3") < out.index("user_1")
        assert "2 users" in out

    async def test_markup_in_user_text_is_literal(self, bare_store: SessionStore) -> None:
        problem = bare_store.get_problem("problem_4")
        assert problem is not None
        bare_store.put_problem(problem.model_copy(update={"description": "[bold]help[/bold]"}))
        out = render_result(await QueryService(bare_store).get_problem("problem_4"))
        assert "[bold]help[/bold]" in out


class TestRenderMisc:
    def test_categories(self, bare_store: SessionStore) -> None:
        out = render_result(QueryService(bare_store).categories())
        assert "Healthcare & Medical" in out

    def test_logout(self) -> None:
        out = render_result(ServiceResult(ok=True, op="logout", data={"user_id": None}))
        assert "Nobody was logged in" in out

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="mark_all_read", data={"user_id": "user_2", "marked": 3})
        out = render_result(result)
        assert out.startswith("OK")
        assert "marked: 3" in out

    def test_meta_when_verbose(self) -> None:
        result = ServiceResult(ok=True, op="noop", meta={"elapsed_ms": 12})
        assert "elapsed_ms: 12" in render_result(result, verbose=True)


class TestConsole:
    def test_buffered_output(self) -> None:
        console = create_console(no_color=True, width=40)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_style_lookup(self) -> None:
        assert style_for_status("in-progress") == "milaan.status.in-progress"
        assert style_for_status("archived") == ""
        assert style_for_role("helper") == "milaan.role.helper"
        assert style_for_role("admin") == ""
