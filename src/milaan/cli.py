"""The ``milaan`` command: global options, then the subcommands from :mod:`milaan.commands`."""

from __future__ import annotations

import click

from milaan import __version__
from milaan.commands import register_commands
from milaan.commands._context import AppContext
from milaan.config.settings import MilaanSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="milaan")
@click.option("--json", "json_output", is_flag=True, help="Print the raw result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only IDs.")
@click.option("-v", "--verbose", is_flag=True, help="Show error details and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Use this milaan.toml instead of searching for one.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Browse community problems, helpers and your own activity."""
    settings = MilaanSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
