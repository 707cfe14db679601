"""AppContext — what every command receives through ``@click.pass_obj``.

Holds the resolved settings, opens the session store on first use,
drives async service calls with anyio, and prints results.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import anyio
import click

from milaan.config.logging import bind_actor, configure_logging
from milaan.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from milaan.config.settings import MilaanSettings
    from milaan.infrastructure.session import SessionStore
    from milaan.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by the command tree.

    ``--help`` and ``--version`` never touch :attr:`store`, so they do not
    seed data or read the identity slot.
    """

    def __init__(self, settings: MilaanSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._store: SessionStore | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> SessionStore:
        if self._store is None:
            from milaan.infrastructure.session import SessionStore

            store = SessionStore(self.settings)
            store.init_plugins()
            current = store.current_user
            bind_actor(current.id if current is not None else None)
            self._store = store
        return self._store

    def run(self, func: Callable[..., Awaitable[ServiceResult]], *args: Any) -> ServiceResult:
        """Run an async service method to completion on a fresh event loop."""
        return anyio.run(func, *args)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result goes to stderr and exits with status 1.

        Warnings are echoed to stderr after a successful human-readable
        result. JSON output already carries them in the payload.
        """
        text = format_result(result, settings=self.output)
        click.echo(text, err=not result.ok)
        if not result.ok:
            raise SystemExit(1)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
