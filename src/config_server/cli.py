"""CLI adapter for ``config_server`` built on ``lib_cli_exit_tools``.

Purpose
-------
Boot the greeting service and expose the configuration search to operators so
they can see which file would be used without starting the listener.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command; runs ``serve`` when no subcommand is given.
* :func:`cli_serve` – logging → resolve config → bind → serve.
* :func:`cli_paths` – lists candidate paths and whether they exist.
* :func:`cli_show` – resolves the configuration and prints it as JSON.
* :func:`cli_info` – prints distribution metadata.
* :func:`main` – entry point used by the ``config-server`` console script.

System Role
-----------
Outermost layer. Every fatal startup or serving failure is printed to stderr
and turned into exit code 1 here; inner layers only raise domain errors.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from typing import Final, NoReturn, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.path_resolvers.default import DefaultPathResolver
from .core import load_config_from
from .domain.config import ServerConfig
from .domain.errors import ConfigError, ServerError
from .observability import configure_logging
from .server import serve

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
DIST_NAME: Final[str] = "config-server"
PROG_NAME: Final[str] = "config-server"
EXIT_FAILURE: Final[int] = 1
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Serve a configured greeting over HTTP",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=PROG_NAME,
    message="config-server version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Without a subcommand the service starts, matching a bare
    ``config-server`` invocation.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    if ctx.invoked_subcommand is None:
        ctx.invoke(cli_serve)


@cli.command("serve", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_serve() -> None:
    """Load the configuration and serve it on 0.0.0.0:<port>.

    Exits with status 1 when the configuration cannot be loaded, the port
    cannot be bound, or the server fails while running.
    """

    configure_logging()
    config = _load_or_exit()
    try:
        serve(config)
    except ServerError as exc:
        _fail(str(exc))


@cli.command("paths", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_paths() -> None:
    """List configuration candidates in priority order and whether each exists."""

    for path in DefaultPathResolver().candidates():
        status = "found" if path.exists() else "missing"
        click.echo(f"{status:<8}{path}")


@cli.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--source/--no-source",
    default=False,
    help="Wrap the output with the path the configuration was loaded from",
)
def cli_show(indent: Optional[int], source: bool) -> None:
    """Resolve the configuration and print it as JSON without serving it."""

    try:
        config, path = load_config_from(DefaultPathResolver().candidates())
    except ConfigError as exc:
        _fail(f"Failed to load config: {exc}")
    if source:
        payload = {"config": config.as_dict(), "source": str(path)}
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False))
        return
    click.echo(config.to_json(indent=indent))


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(DIST_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{DIST_NAME} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', DIST_NAME)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


def _load_or_exit() -> ServerConfig:
    """Resolve the configuration from the running process or exit with status 1."""

    try:
        config, _ = load_config_from(DefaultPathResolver().candidates())
    except ConfigError as exc:
        _fail(f"Failed to load config: {exc}")
    return config


def _fail(message: str) -> NoReturn:
    """Print *message* to stderr and terminate with :data:`EXIT_FAILURE`."""

    click.echo(message, err=True)
    raise SystemExit(EXIT_FAILURE)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=PROG_NAME,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
