"""
Snyk pipeline task — CLI entrypoint.

Usage:
    python -m snyk_task.main --help
    python -m snyk_task.main run
    python -m snyk_task.main --inputs snyk-task.yml plan
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from snyk_task import __version__
from snyk_task.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    LOG_LEVEL_ENV,
    DEFAULT_LEVEL,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="snyk-task")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only log errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--inputs",
    "-i",
    "inputs_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML file with task inputs (default: agent INPUT_* variables only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    inputs_path: str | None,
) -> None:
    """Snyk pipeline task — install, authenticate, test and monitor with Snyk."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["inputs_path"] = Path(inputs_path) if inputs_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output a run summary as JSON.")
@click.pass_context
def run(ctx: click.Context, as_json: bool) -> None:
    """Run the task: install, auth, test and (optionally) monitor."""
    from snyk_task.core.use_cases.run import run_task

    inputs = {"debug": "true"} if ctx.obj.get("debug") else None
    result = run_task(inputs_path=ctx.obj.get("inputs_path"), inputs=inputs)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.ok:
        click.secho("✅ Snyk task succeeded", fg="green", bold=True)
        return

    click.secho(f"❌ {result.message}", fg="red", err=True)
    sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, as_json: bool) -> None:
    """Show the commands a run would execute, without running them."""
    from snyk_task.core.errors import ConfigError
    from snyk_task.core.use_cases.plan import plan_task
    from snyk_task.core.use_cases.run import build_host

    try:
        host = build_host(inputs_path=ctx.obj.get("inputs_path"))
    except ConfigError as e:
        click.secho(f"❌ {e.message}", fg="red", err=True)
        sys.exit(1)

    result = plan_task(host)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    click.secho(f"\n📋 Planned commands (sudo: {'yes' if result.elevated else 'no'})", fg="cyan", bold=True)
    for i, cmd in enumerate(result.commands, 1):
        marker = "" if cmd.resolved else "  (not found)"
        click.echo(f"   {i}. [{cmd.kind.value}] {cmd.line}{marker}")
    click.echo()


def main() -> None:
    """Console script entrypoint."""
    cli(obj={})


if __name__ == "__main__":
    main()
