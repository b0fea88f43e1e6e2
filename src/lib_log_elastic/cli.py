"""Command-line interface for inspecting and exercising the log shipper.

Purpose
-------
Offer operators a quick way to check which index a configuration writes to,
to print the index mapping, and to push sample records through the full
pipeline (or a dry run of it).

Contents
--------
* :func:`cli` - rich-click group with the global options.
* ``info``, ``index-name``, ``schema``, ``logdemo`` subcommands.
* :func:`main` - entry point wrapped by :func:`lib_cli_exit_tools.run_cli`.

System Role
-----------
Outermost adapter. Configuration precedence matches the library: explicit
options beat ``LOG_ELASTIC_*`` variables, which beat defaults.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Sequence

import lib_cli_exit_tools
import rich_click as click
from rich.console import Console
from rich.table import Table

from . import __init__conf__
from . import config as log_config
from . import summary_info
from .adapters.console import RichConsoleAdapter
from .adapters.memory import InMemoryStorageAdapter
from .config import LoggerSettings, build_settings
from .domain.schema import LOG_INDEX_SCHEMA
from .elastic_logger import ElasticSearchLogger

CLICK_CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

DEMO_CORRELATION_ID = "logdemo"


def _settings_from_options(options: dict[str, Any]) -> LoggerSettings:
    """Apply environment overrides first, then the explicitly given options."""

    given = {key: value for key, value in options.items() if value is not None}
    try:
        return build_settings(given, base=build_settings(), environ={})
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


def _parse_instant(value: str | None) -> datetime:
    """Parse ``--at``; naive values are taken as UTC."""

    if value is None:
        return datetime.now(timezone.utc)
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as exc:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value!r}", param_hint="--at") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env before reading configuration (env toggle: {log_config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool | None) -> None:
    """Root command storing global flags."""

    if log_config.should_use_dotenv(explicit=use_dotenv, env_value=os.environ.get(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("index-name", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--index", default=None, help="Base index name (default: log).")
@click.option("--daily/--no-daily", default=None, help="Append the formatted UTC date to the base name.")
@click.option("--date-format", default=None, help="LDML date pattern used for rotation (default: yyyyMMdd).")
@click.option("--at", "at", default=None, help="ISO-8601 instant to resolve for (default: now).")
def cli_index_name(index: str | None, daily: bool | None, date_format: str | None, at: str | None) -> None:
    """Print the index a flush at ``--at`` would write to."""

    settings = _settings_from_options({"index": index, "daily": daily, "date_format": date_format})
    click.echo(settings.index_descriptor().resolve(_parse_instant(at)))


@cli.command("schema", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--index-message/--no-index-message", default=False, help="Index the message field for full-text search.")
def cli_schema(index_message: bool) -> None:
    """Print the create-index request body as JSON."""

    Console(soft_wrap=True).print_json(data=LOG_INDEX_SCHEMA.to_body(index_message=index_message))


def _emit_demo_records(es_logger: ElasticSearchLogger) -> int:
    """Log one record per level plus an error carrying an exception."""

    es_logger.fatal(DEMO_CORRELATION_ID, None, "Fatal error message")
    es_logger.error(DEMO_CORRELATION_ID, None, "Error message")
    es_logger.warn(DEMO_CORRELATION_ID, "Warning message")
    es_logger.info(DEMO_CORRELATION_ID, "Information message")
    es_logger.debug(DEMO_CORRELATION_ID, "Debug message")
    es_logger.trace(DEMO_CORRELATION_ID, "Trace message")
    try:
        raise RuntimeError("Sample failure")
    except RuntimeError as exc:
        es_logger.error(DEMO_CORRELATION_ID, exc, "Operation %s failed", "demo")
    return es_logger.pending


def _render_documents(console: Console, index: str | None, documents: list[dict[str, Any]]) -> None:
    table = Table(title=f"Documents written to {index}")
    for column in ("time", "level", "correlation_id", "message", "error"):
        table.add_column(column)
    for document in documents:
        error = document.get("error") or {}
        table.add_row(
            str(document.get("time")),
            str(document.get("level")),
            str(document.get("correlation_id") or ""),
            str(document.get("message")),
            str(error.get("message") or ""),
        )
    console.print(table)


def _logdemo(
    *,
    host: str | None,
    port: int | None,
    uri: str | None,
    index: str | None,
    daily: bool | None,
    date_format: str | None,
    dry_run: bool,
    console: Console,
) -> dict[str, Any]:
    """Ship the demo records and return a summary of the run."""

    options: dict[str, Any] = {
        "connection.host": host,
        "connection.port": port,
        "connection.uri": uri,
        "index": index,
        "daily": daily,
        "date_format": date_format,
        "level": "TRACE",
    }
    settings = _settings_from_options(options)

    storage: InMemoryStorageAdapter | None = None
    logger_options: dict[str, Any] = {}
    if dry_run:
        storage = InMemoryStorageAdapter()
        dry_storage = storage
        logger_options["storage_factory"] = lambda target, _settings: dry_storage
        if not settings.connection.configured:
            settings = build_settings({"connection.host": "localhost"}, base=settings, environ={})

    es_logger = ElasticSearchLogger(
        settings=settings,
        console=RichConsoleAdapter(console=console),
        environ={},
        **logger_options,
    )
    es_logger.open(DEMO_CORRELATION_ID)
    index_name = es_logger.current_index
    try:
        emitted = _emit_demo_records(es_logger)
        written = es_logger.dump()
    finally:
        es_logger.close(DEMO_CORRELATION_ID)

    documents = storage.documents(index_name) if storage is not None else []
    return {"index": index_name, "emitted": emitted, "written": written, "documents": documents}


@cli.command("logdemo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--host", default=None, help="Elasticsearch host.")
@click.option("--port", type=int, default=None, help="Elasticsearch port (default: 9200).")
@click.option("--uri", default=None, help="Full connection URI; wins over --host/--port.")
@click.option("--index", default=None, help="Base index name (default: log).")
@click.option("--daily/--no-daily", default=None, help="Rotate the index daily.")
@click.option("--date-format", default=None, help="LDML date pattern used for rotation.")
@click.option("--dry-run", is_flag=True, default=False, help="Write to an in-memory store instead of Elasticsearch.")
def cli_logdemo(
    host: str | None,
    port: int | None,
    uri: str | None,
    index: str | None,
    daily: bool | None,
    date_format: str | None,
    dry_run: bool,
) -> None:
    """Log one record per level, flush them, and close the logger."""

    console = Console()
    result = _logdemo(
        host=host,
        port=port,
        uri=uri,
        index=index,
        daily=daily,
        date_format=date_format,
        dry_run=dry_run,
        console=console,
    )
    if dry_run:
        _render_documents(console, result["index"], result["documents"])
    click.echo(f"emitted {result['emitted']} records, wrote {result['written']} documents to {result['index']}")


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :func:`lib_cli_exit_tools.run_cli`.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    unless ``restore_traceback`` is false.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
