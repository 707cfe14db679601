"""Command group: user profiles and helper rankings. Also ``categories``."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from milaan.commands._base import MilaanGroup
from milaan.services.query import QueryService

if TYPE_CHECKING:
    from milaan.commands._context import AppContext

_USERS_EXAMPLES = """\
  milaan users show user_1
  milaan users helpers
  milaan users helpers --limit 3"""


@click.group(cls=MilaanGroup, examples=_USERS_EXAMPLES)
@click.pass_obj
def users(app: AppContext) -> None:
    """Look up user profiles."""


@users.command()
@click.argument("user_id")
@click.pass_obj
def show(app: AppContext, user_id: str) -> None:
    """Show a user's profile."""
    app.emit(app.run(QueryService(app.store).get_user, user_id))


@users.command()
@click.option("--limit", default=5, type=click.IntRange(min=1), help="How many helpers.")
@click.pass_obj
def helpers(app: AppContext, limit: int) -> None:
    """Top-rated helpers."""
    app.emit(app.run(QueryService(app.store).top_helpers, limit))


@click.command()
@click.pass_obj
def categories(app: AppContext) -> None:
    """List problem categories."""
    app.emit(QueryService(app.store).categories())
