"""Command group: browse problems and their comments."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import click

from milaan.commands._base import MilaanGroup
from milaan.domain.lifecycle import ProblemStatus
from milaan.domain.types import Category, ProblemSort
from milaan.services.query import QueryService
from milaan.services.result import ErrorCode, failure

if TYPE_CHECKING:
    from milaan.commands._context import AppContext

_PROBLEMS_EXAMPLES = """\
  milaan problems list
  milaan problems list --category disaster --sort popular
  milaan problems list --status open --query mumbai
  milaan problems show problem_2
  milaan problems comments problem_1
  milaan problems mine"""


@click.group(cls=MilaanGroup, examples=_PROBLEMS_EXAMPLES)
@click.pass_obj
def problems(app: AppContext) -> None:
    """List, search, and inspect problems."""


@problems.command(
    name="list",
    examples="""\
  milaan problems list --sort comments
  milaan problems list --category health --status in-progress
  milaan --quiet problems list --query library""",
)
@click.option("--query", "query_text", default=None, help="Match title, description or address.")
@click.option(
    "--category",
    type=click.Choice([str(c) for c in Category]),
    default=None,
    help="Filter by category.",
)
@click.option(
    "--status",
    type=click.Choice([str(s) for s in ProblemStatus]),
    default=None,
    help="Filter by status.",
)
@click.option(
    "--sort",
    type=click.Choice([str(s) for s in ProblemSort]),
    default=str(ProblemSort.RECENT),
    help="Sort order.",
)
@click.pass_obj
def list_cmd(
    app: AppContext,
    query_text: str | None,
    category: str | None,
    status: str | None,
    sort: str,
) -> None:
    """List problems, newest first by default."""
    list_problems = partial(
        QueryService(app.store).list_problems,
        query=query_text,
        category=category,
        status=status,
        sort=sort,
    )
    app.emit(app.run(list_problems))


@problems.command()
@click.argument("problem_id")
@click.pass_obj
def show(app: AppContext, problem_id: str) -> None:
    """Show one problem with its author and helpers."""
    app.emit(app.run(QueryService(app.store).get_problem, problem_id))


@problems.command()
@click.argument("problem_id")
@click.pass_obj
def comments(app: AppContext, problem_id: str) -> None:
    """Show the comments on a problem, oldest first."""
    app.emit(app.run(QueryService(app.store).get_comments, problem_id))


@problems.command()
@click.pass_obj
def mine(app: AppContext) -> None:
    """Problems you posted (askers) or are helping with (helpers)."""
    user = app.store.current_user
    if user is None:
        app.emit(failure("problems_mine", ErrorCode.UNAUTHORIZED, "You must be logged in"))
        return
    svc = QueryService(app.store)
    if user.is_helper:
        app.emit(app.run(svc.get_problems_by_helper, user.id))
    else:
        app.emit(app.run(svc.get_problems_by_user, user.id))
