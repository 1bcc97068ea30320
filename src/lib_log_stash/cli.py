"""Command line interface for smoke tests and ad-hoc events.

Purpose
-------
Expose the package through ``lib_log_stash`` / ``python -m lib_log_stash``:
print the metadata banner, or write a single structured event to the console,
stdout or a log file.

Contents
--------
* :func:`cli` – Click group with ``--use-dotenv`` and ``--version``.
* :func:`info` – metadata banner.
* :func:`emit` – log one message with fields and tags.
* :func:`main` – test-friendly runner returning an exit code.

System Role
-----------
Presentation layer only: every command goes through the runtime façade
(:func:`lib_log_stash.init` / :func:`lib_log_stash.shutdown`).
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Sequence

import click

from . import __init__conf__
from . import config as log_config
from .domain.errors import ForbiddenFieldError
from .domain.levels import Severity
from .runtime import init, shutdown, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_LEVEL_NAMES = [severity.name.lower() for severity in Severity]
_ENCODER_NAMES = ["json", "logstash", "lograge", "message", "hash", "raw"]


def _parse_field(raw: str) -> tuple[str, Any]:
    """Split ``key=value``; values that parse as JSON keep their JSON type.

    Examples
    --------
    >>> _parse_field('count=3'), _parse_field('user=ada')
    (('count', 3), ('user', 'ada'))
    """

    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--field")
    try:
        parsed: Any = json.loads(value)
    except ValueError:
        parsed = value
    return key.strip(), parsed


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load environment variables from the nearest .env (default: ${log_config.DOTENV_ENV_VAR}).",
)
@click.option("--version", "-V", is_flag=True, help="Print the installed version and exit.")
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None, version: bool) -> None:
    """Structured, buffered logging toolkit."""

    if log_config.should_use_dotenv(explicit=use_dotenv, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()
    if version:
        click.echo(__init__conf__.version)
        ctx.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command(context_settings=CLICK_CONTEXT_SETTINGS)
def info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command(context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option("--level", type=click.Choice(_LEVEL_NAMES, case_sensitive=False), default="info", show_default=True)
@click.option("--field", "fields", multiple=True, metavar="KEY=VALUE", help="Add a field; JSON values keep their type.")
@click.option("--tag", "tags", multiple=True, help="Add a tag (repeatable).")
@click.option("--encoder", type=click.Choice(_ENCODER_NAMES), default=None, help="Encoder for the target (default: the target's own).")
@click.option(
    "--target",
    default="console",
    show_default=True,
    help="'console', '-' for plain stdout, a file path or a file:// URI.",
)
@click.option("--force-color", is_flag=True, help="Force colours on the console target.")
@click.option("--no-color", is_flag=True, help="Disable colours on the console target.")
def emit(
    message: str,
    level: str,
    fields: tuple[str, ...],
    tags: tuple[str, ...],
    encoder: str | None,
    target: str,
    force_color: bool,
    no_color: bool,
) -> None:
    """Write MESSAGE as one event."""

    parsed = dict(_parse_field(raw) for raw in fields)
    device: Any = sys.stdout if target == "-" else target
    if target == "-" and encoder is None:
        encoder = "json"
    logger = init(target=device, encoder=encoder, force_color=force_color, no_color=no_color)
    try:
        with logger.with_buffer():
            try:
                logger.fields.update(parsed)
            except ForbiddenFieldError as exc:
                raise click.BadParameter(str(exc), param_hint="--field") from exc
            logger.tag(*tags)
            logger.add(Severity.from_name(level), message)
    finally:
        shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click group and return its exit code instead of exiting.

    Examples
    --------
    >>> main(["info"])  # doctest: +ELLIPSIS
    Info for lib_log_stash:
    ...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    return result if isinstance(result, int) else 0


__all__ = ["cli", "emit", "info", "main"]
