"""sqlgrid CLI entrypoint."""

from __future__ import annotations

from collections.abc import Iterable

import click

from sqlgrid.shared.cli import (
    CLIContext,
    common_cli_options,
    display_options,
    handle_cli_errors,
    pass_cli_context,
)
from sqlgrid.shared.config import AppConfig

from . import executor, render


@click.group(help="Run SQL and print the result as an aligned grid.")
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for sqlgrid commands."""
    cli_ctx.logger.debug(f"sqlgrid initialised (database: {cli_ctx.db_path}).")


@cli.command("sql")
@click.argument("query", type=str)
@click.option(
    "-p",
    "--param",
    "params",
    multiple=True,
    metavar="KEY=VALUE",
    help="Bind a named parameter for the SQL query.",
)
@click.option("--table", type=str, help="Source table used for column types and primary keys.")
@pass_cli_context
@display_options
@handle_cli_errors
def run_sql(
    cli_ctx: CLIContext,
    query: str,
    params: Iterable[str],
    table: str | None,
    command_config: AppConfig,
) -> None:
    """Execute SQL against the database and print the rows."""
    cli_ctx.logger.debug("sqlgrid sql invoked")
    if not query.strip():
        raise click.ClickException("Query text must not be empty.")

    try:
        bound_params = _parse_params(params)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    with executor.run_query(
        config=command_config,
        query=query,
        params=bound_params,
        table=table,
        logger=cli_ctx.logger,
    ) as source:
        render.render_rows(source, logger=cli_ctx.logger)


def _parse_params(pairs: Iterable[str]) -> dict[str, str]:
    """Convert KEY=VALUE CLI options into a dictionary."""
    parsed: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Parameter '{pair}' must be in KEY=VALUE format.")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Parameter keys cannot be empty.")
        parsed[key] = value
    return parsed


def main() -> None:
    """Entry point for console_scripts."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
