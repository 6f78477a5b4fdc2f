"""
pipconverge — CLI entrypoint.

Usage:
    python -m pipconverge.main --help
    python -m pipconverge.main status
    python -m pipconverge.main converge --dry-run
    python -m pipconverge.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pipconverge import __version__
from pipconverge.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="pipconverge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (shows pip commands).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to packages.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pipconverge — keep Python environments at their declared packages."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--mock", is_flag=True, help="Use mock runner (no real pip calls).")
@click.pass_context
def status(ctx: click.Context, as_json: bool, mock: bool) -> None:
    """Show installed and candidate versions of declared packages."""
    from pipconverge.core.use_cases.converge import get_status

    result = get_status(config_path=ctx.obj.get("config_path"), mock_mode=mock)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho("\n📦 Declared packages", fg="cyan", bold=True)
    for spec, state in result.entries:
        click.echo(f"   {spec.python} ({spec.action})")
        for name, current, candidate in zip(state.names, state.current, state.candidate):
            current_label = current or "not installed"
            candidate_label = f" → {candidate}" if candidate and candidate != current else ""
            click.echo(f"     • {name:<30} {current_label}{candidate_label}")
    click.echo()


@cli.command("converge")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Plan but don't run pip install/uninstall.")
@click.option("--mock", is_flag=True, help="Use mock runner (no real pip calls).")
@click.pass_context
def converge_cmd(ctx: click.Context, as_json: bool, dry_run: bool, mock: bool) -> None:
    """Install, upgrade or remove packages until they match packages.yml.

    Examples:

        pipconverge converge

        pipconverge --config deploy/packages.yml converge --dry-run
    """
    from pipconverge.core.use_cases.converge import run_converge

    result = run_converge(
        config_path=ctx.obj.get("config_path"),
        dry_run=dry_run,
        mock_mode=mock,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    mode_label = "[dry-run] " if dry_run else "[mock] " if mock else ""
    if result.reports:
        click.secho(f"\n⚡ {mode_label}converge", fg="cyan", bold=True)

    for report in result.reports:
        for decision in report.plan.decisions:
            if decision.needs_action:
                click.secho(f"   ✓ {report.plan.action} {decision.name}", fg="green", nl=False)
                click.echo(f"  ({decision.reason})")
            elif decision.skipped:
                click.secho(f"   ⊘ {decision.name}", fg="yellow", nl=False)
                click.echo(f"  ({decision.reason})")
            elif ctx.obj.get("verbose"):
                click.echo(f"   · {decision.name}  ({decision.reason})")
        if report.receipt and ctx.obj.get("verbose"):
            click.echo(f"     │ {report.receipt.command}")

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.echo()
    click.secho(f"   Result: {result.changed} declaration(s) changed", fg="green", bold=True)
    click.echo()


@cli.group()
def config() -> None:
    """Manifest configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate packages.yml."""
    from pipconverge.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.manifest is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Packages: {len(result.manifest.packages)}")
        click.echo(f"   Environments: {len(result.manifest.environments)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
