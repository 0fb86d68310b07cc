"""CLI interface for svckit"""

import dataclasses
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Optional

import click

from svckit.domain.models.result import Err, Ok, Result
from svckit.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from svckit.infrastructure.debug import json_merge, pretty_debug
from svckit.infrastructure.env import env_or_default, read_env
from svckit.infrastructure.http_client import wait_for_url
from svckit.infrastructure.retry import RetryPolicy, run_with_retry
from svckit.infrastructure.timing import log_duration
from svckit.infrastructure.tracing import SpanFilter, configure_tracing, span

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(span)s] %(message)s"


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Setup logging configuration

    Args:
        verbose: Force DEBUG level
        level: Level name used when not verbose (defaults to INFO)
    """
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName((level or "INFO").upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    root = logging.getLogger()
    root.setLevel(resolved)
    for handler in root.handlers:
        handler.addFilter(SpanFilter())


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _load_config(ctx: click.Context) -> ConfigManager:
    """Load configuration and apply its log level unless --verbose was given"""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    if not verbose:
        setup_logging(level=config_manager.get_logging_config().level)
    return config_manager


def _resolve_policy(
    config_manager: ConfigManager,
    attempts: Optional[int],
    delay_ms: Optional[int],
) -> RetryPolicy:
    """Build a retry policy from config, with CLI overrides

    Raises:
        click.BadParameter: If the resulting policy is invalid
    """
    overrides = {}
    if attempts is not None:
        overrides["max_attempts"] = attempts
    if delay_ms is not None:
        overrides["delay"] = delay_ms / 1000.0
    try:
        policy = RetryPolicy.from_config(config_manager.get_retry_config())
        return dataclasses.replace(policy, **overrides)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def _run_command(command: tuple) -> Result[int, int]:
    """Run a command once; exit code 0 is Ok, anything else is Err"""
    logger.debug(f"Running: {' '.join(command)}")
    completed = subprocess.run(list(command), check=False)
    if completed.returncode == 0:
        return Ok(0)
    logger.warning(f"Command exited with code {completed.returncode}")
    return Err(completed.returncode)


def _exit_code(returncode: int) -> int:
    """Map a subprocess return code to a shell exit status

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def _load_json_file(path: Path):
    """Load a JSON document from path

    Raises:
        click.ClickException: If the file is not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {path}: {e}") from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--trace", is_flag=True, help="Export finished spans as JSON to stderr")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .svckit.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, trace: bool, config: Path):
    """svckit - boilerplate helpers for backend services"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    configure_tracing(console=trace)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command(context_settings={"ignore_unknown_options": True})
@click.option("--attempts", "-n", type=int, help="Total attempts. Overrides config.")
@click.option("--delay-ms", type=int, help="Delay between attempts in ms. Overrides config.")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run(ctx, attempts: Optional[int], delay_ms: Optional[int], command: tuple):
    """Run a command, retrying while it exits non-zero.

    COMMAND: Command and arguments (put them after --)
    """
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)
    policy = _resolve_policy(config_manager, attempts, delay_ms)

    try:
        with span("run", command=command[0]), log_duration(f"Command {command[0]}"):
            result = run_with_retry(lambda: _run_command(command), policy)
    except OSError as e:
        _die(f"Cannot run {command[0]}: {e}", verbose=verbose, exc=e)

    if result.is_err:
        click.echo(
            f"Command failed after {policy.max_attempts} attempts (exit code {result.error})",
            err=True,
        )
        sys.exit(_exit_code(result.error))
    click.echo("Command succeeded")


@cli.command(name="wait-http")
@click.argument("url", type=str)
@click.option("--attempts", "-n", type=int, help="Total checks. Overrides config.")
@click.option("--delay-ms", type=int, help="Delay between checks in ms. Overrides config.")
@click.option("--timeout", type=float, help="Per-request timeout in seconds. Overrides config.")
@click.pass_context
def wait_http(ctx, url: str, attempts: Optional[int], delay_ms: Optional[int], timeout: Optional[float]):
    """Wait until URL answers with a non-error status.

    URL: Address to check
    """
    config_manager = _load_config(ctx)
    policy = _resolve_policy(config_manager, attempts, delay_ms)
    request_timeout = timeout if timeout is not None else config_manager.get_http_config().timeout

    with span("wait-http", url=url):
        result = wait_for_url(url, policy, timeout=request_timeout)

    if result.is_err:
        _die(f"{result.error} (gave up after {policy.max_attempts} attempts)")
    click.echo(f"{url} is up (HTTP {result.value.status_code})")


@cli.command()
@click.argument("name", type=str)
@click.option("--default", "default", type=str, help="Value printed when NAME is unset")
def env(name: str, default: Optional[str]):
    """Print an environment variable.

    NAME: Environment variable name
    """
    if default is None:
        value = read_env(name)
        if value is None:
            raise click.ClickException(f"Environment variable {name} is not set")
        click.echo(value)
        return
    click.echo(env_or_default(name, default))


@cli.command()
@click.argument("base", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("other", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def merge(base: Path, other: Path):
    """Shallow-merge two JSON files; keys from OTHER win.

    BASE: JSON file with base values
    OTHER: JSON file with overriding values
    """
    pretty_debug(json_merge(_load_json_file(base), _load_json_file(other)))


@cli.command(name="config")
@click.pass_context
def show_config(ctx):
    """Print the effective configuration."""
    config_manager = _load_config(ctx)
    pretty_debug(config_manager.config)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
