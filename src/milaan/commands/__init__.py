"""Subcommand modules for milaan.

Provides register_commands(), which imports command modules only when
the CLI is assembled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from milaan.commands.problems import problems
    from milaan.commands.users import users

    cli.add_command(problems)
    cli.add_command(users)

    # --- Standalone commands ---
    from milaan.commands.auth import login, logout, register, whoami
    from milaan.commands.users import categories

    cli.add_command(login)
    cli.add_command(logout)
    cli.add_command(whoami)
    cli.add_command(register)
    cli.add_command(categories)
