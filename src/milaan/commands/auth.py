"""Identity commands: login, logout, whoami, register.

The current user is kept in the session's identity slot, so a login
carries over to later invocations until ``logout``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from milaan.commands._base import MilaanCommand
from milaan.domain.types import UserRole
from milaan.services.identity import IdentityService

if TYPE_CHECKING:
    from milaan.commands._context import AppContext


@click.command(
    cls=MilaanCommand,
    examples="""\
  milaan login helper@example.com
  milaan login asker@example.com --password secret
  milaan --json login amit@example.com""",
)
@click.argument("email")
@click.option("--password", default="", help="Accepted for compatibility; not checked.")
@click.pass_obj
def login(app: AppContext, email: str, password: str) -> None:
    """Log in as the directory user registered under EMAIL."""
    app.emit(app.run(IdentityService(app.store).login, email, password))


@click.command()
@click.pass_obj
def logout(app: AppContext) -> None:
    """Forget the current user."""
    app.emit(IdentityService(app.store).logout())


@click.command()
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Show the current user."""
    app.emit(IdentityService(app.store).whoami())


@click.command(
    cls=MilaanCommand,
    examples="""\
  milaan register --name "Asha Rao" --email asha@example.com --role helper
  milaan register --name Ravi --email ravi@example.com --role asker --address Pune""",
)
@click.option("--name", required=True, help="Display name.")
@click.option("--email", required=True, help="Email address (used to log in).")
@click.option(
    "--role",
    type=click.Choice([str(r) for r in UserRole]),
    required=True,
    help="Helpers offer help; askers post problems.",
)
@click.option("--bio", default=None, help="Short profile text.")
@click.option("--address", default=None, help="Where you are based.")
@click.option("--password", default="", help="Accepted for compatibility; not checked.")
@click.pass_obj
def register(
    app: AppContext,
    name: str,
    email: str,
    role: str,
    bio: str | None,
    address: str | None,
    password: str,
) -> None:
    """Create a new user and log in as them."""
    profile: dict[str, Any] = {"name": name, "email": email, "role": role}
    if bio is not None:
        profile["bio"] = bio
    if address is not None:
        profile["location"] = {"address": address}
    app.emit(IdentityService(app.store).register(profile, password))
