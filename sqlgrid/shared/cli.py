"""Shared CLI helpers and decorators."""

from __future__ import annotations

import functools
import locale
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar

import click

from .config import AppConfig, load_config
from .exceptions import ConfigurationError, DataAccessError, QueryError, SqlGridError
from .logging import Logger, get_logger

F = TypeVar("F", bound=Callable[..., Any])

EXIT_CONFIGURATION = 3
EXIT_QUERY = 4
EXIT_DATA_ACCESS = 5


class CommandError(click.ClickException):
    """ClickException carrying an exit code per failure kind."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLIContext:
    """Runtime context shared across CLI invocations."""

    config: AppConfig
    db_path: Path
    verbose: bool
    logger: Logger

    def command_config(
        self,
        *,
        db_override: str | None = None,
        incremental: bool | None = None,
        number_format: str | None = None,
        no_lob: bool = False,
    ) -> AppConfig:
        """Return the config with one command's display options applied.

        Unset options keep the loaded values; the result is validated again.
        """
        config = self.config
        if db_override:
            config = config.with_database_path(db_override)

        changes: dict[str, Any] = {}
        if incremental is not None:
            changes["incremental"] = incremental
        if number_format is not None:
            changes["number_format"] = number_format
        if no_lob:
            changes["read_lob_fields"] = False
        if changes:
            config = config.with_display(**changes)
        return config


pass_cli_context = click.make_pass_decorator(CLIContext)


def common_cli_options(func: F) -> F:
    """Decorator injecting shared CLI options and context creation."""

    @click.option("--config", "config_path", type=click.Path(path_type=str), help="Path to config file.")
    @click.option("--db", "db_path", type=click.Path(path_type=str), help="Override database path.")
    @click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
    @click.pass_context
    @functools.wraps(func)
    def wrapper(
        ctx: click.Context,
        *args: Any,
        config_path: str | None = None,
        db_path: str | None = None,
        verbose: bool = False,
        **kwargs: Any,
    ) -> Any:
        try:
            app_config = load_config(config_path)
        except ConfigurationError as exc:
            raise CommandError(f"Configuration error: {exc}", EXIT_CONFIGURATION) from exc

        logger = get_logger(verbose=verbose)
        use_environment_locale(logger)
        if db_path:
            app_config = app_config.with_database_path(db_path)

        cli_ctx = CLIContext(
            config=app_config,
            db_path=app_config.database.path,
            verbose=verbose,
            logger=logger,
        )
        ctx.obj = cli_ctx
        kwargs["cli_ctx"] = cli_ctx
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def display_options(func: F) -> F:
    """Decorator adding per-command display overrides.

    The wrapped command receives ``command_config``, the effective AppConfig.
    It must sit below ``pass_cli_context`` so ``cli_ctx`` is available.
    """

    @click.option(
        "--incremental/--buffered",
        default=None,
        help="Stream rows with running widths instead of buffering the whole result.",
    )
    @click.option("--number-format", type=str, help="Python format spec for numbers, or 'default'.")
    @click.option("--no-lob", is_flag=True, help="Skip reading CLOB/BLOB columns.")
    @click.option(
        "--db",
        "db_override",
        type=click.Path(path_type=str),
        help="Use an alternate database path just for this command.",
    )
    @functools.wraps(func)
    def wrapper(
        cli_ctx: CLIContext,
        *args: Any,
        incremental: bool | None = None,
        number_format: str | None = None,
        no_lob: bool = False,
        db_override: str | None = None,
        **kwargs: Any,
    ) -> Any:
        if db_override:
            cli_ctx.logger.debug(f"Database override for this command: {db_override}")
        try:
            command_config = cli_ctx.command_config(
                db_override=db_override,
                incremental=incremental,
                number_format=number_format,
                no_lob=no_lob,
            )
        except ConfigurationError as exc:
            raise CommandError(f"Configuration error: {exc}", EXIT_CONFIGURATION) from exc
        return func(cli_ctx, *args, command_config=command_config, **kwargs)

    return wrapper  # type: ignore[return-value]


def use_environment_locale(logger: Logger) -> None:
    """Adopt the environment's LC_NUMERIC so the ``"n"`` number format groups digits."""
    try:
        locale.setlocale(locale.LC_NUMERIC, "")
    except locale.Error as exc:
        logger.debug(f"Keeping the default numeric locale: {exc}")


def handle_cli_errors(func: F) -> F:
    """Convert project exceptions into Click-friendly errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigurationError as exc:
            raise CommandError(f"Configuration error: {exc}", EXIT_CONFIGURATION) from exc
        except QueryError as exc:
            raise CommandError(f"Query failed: {exc}", EXIT_QUERY) from exc
        except DataAccessError as exc:
            raise CommandError(f"Error while reading results: {exc}", EXIT_DATA_ACCESS) from exc
        except SqlGridError as exc:
            raise CommandError(str(exc)) from exc
        except click.ClickException:
            raise
        except Exception as exc:  # pragma: no cover
            raise CommandError(f"Unexpected error: {exc}") from exc

    return wrapper  # type: ignore[return-value]
