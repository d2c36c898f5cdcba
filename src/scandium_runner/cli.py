"""CLI entrypoint for the Scandium suite runner."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from scandium_runner.api_client import ScandiumClientError
from scandium_runner.config import Config, ConfigurationError, load_config

# Load .env file on CLI startup
load_dotenv()


def _load(
    config_file: Optional[str],
    require_suite: bool = True,
    base_url: Optional[str] = None,
    max_attempts: Optional[int] = None,
    wait_period: Optional[float] = None,
    results_dir: Optional[str] = None,
) -> Config:
    """Load config, apply command-line overrides, exit 2 on configuration errors."""
    try:
        config = load_config(
            run_file=Path(config_file) if config_file else None,
            require_suite=require_suite,
        )
    except ConfigurationError as e:
        click.echo(f"Configuration error:\n{e}", err=True)
        raise SystemExit(2)

    overrides = {}
    if base_url:
        overrides["base_url"] = base_url.rstrip("/")
    if max_attempts is not None:
        overrides["max_attempts"] = max_attempts
    if wait_period is not None:
        overrides["wait_period"] = wait_period
    if results_dir:
        overrides["results_dir"] = Path(results_dir)

    return replace(config, **overrides) if overrides else config


def _fail(e: ScandiumClientError) -> None:
    """Report a fatal client error with its stage and exit nonzero."""
    stage = f" ({e.stage})" if e.stage else ""
    click.echo(f"Error{stage}: {e}", err=True)
    if e.handle:
        click.echo(f"  Execution ID: {e.handle}", err=True)
    raise SystemExit(1)


config_option = click.option(
    "--config", "config_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML or JSON run file with base settings (environment overrides it).",
)
base_url_option = click.option("--base-url", default=None, help="Override BASE_URL.")
max_attempts_option = click.option(
    "--max-attempts",
    default=None,
    type=click.IntRange(min=1),
    help="Override MAX_ATTEMPTS (polling rounds).",
)
wait_period_option = click.option(
    "--wait-period",
    default=None,
    type=click.FloatRange(min=0),
    help="Override WAIT_PERIOD (seconds between polling rounds).",
)
results_dir_option = click.option(
    "--results-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Override RESULTS_DIR (where result files are written).",
)


@click.group()
@click.version_option(package_name="scandium-runner")
def cli():
    """Scandium CLI - run a test suite remotely and wait for the verdict."""
    pass


@cli.command()
@config_option
@base_url_option
@max_attempts_option
@wait_period_option
@results_dir_option
def run(
    config_file: Optional[str],
    base_url: Optional[str],
    max_attempts: Optional[int],
    wait_period: Optional[float],
    results_dir: Optional[str],
):
    """Submit the suite, poll every execution, and report PASSED/FAILED/TIMEOUT."""
    from scandium_runner.runner import run_suite

    config = _load(config_file, True, base_url, max_attempts, wait_period, results_dir)

    click.echo(f"Running suite {config.suite_id} in project {config.project_id}")
    click.echo(f"  Base URL: {config.base_url}")
    click.echo(f"  Max attempts: {config.max_attempts}, wait period: {config.wait_period}s")
    click.echo()

    try:
        outcome = run_suite(config)
    except ScandiumClientError as e:
        _fail(e)

    click.echo(f"\nResult: {outcome.result}")
    raise SystemExit(outcome.exit_code)


@cli.command()
@click.argument("execution_ids", nargs=-1, required=True)
@config_option
@base_url_option
@max_attempts_option
@wait_period_option
@results_dir_option
def wait(
    execution_ids: tuple,
    config_file: Optional[str],
    base_url: Optional[str],
    max_attempts: Optional[int],
    wait_period: Optional[float],
    results_dir: Optional[str],
):
    """Poll already submitted executions to completion (no new submission)."""
    from scandium_runner.runner import wait_for_executions

    config = _load(config_file, False, base_url, max_attempts, wait_period, results_dir)

    handles = list(dict.fromkeys(execution_ids))
    click.echo(f"Waiting for {len(handles)} execution(s) in project {config.project_id}")

    try:
        outcome = wait_for_executions(config, handles)
    except ScandiumClientError as e:
        _fail(e)

    click.echo(f"\nResult: {outcome.result}")
    raise SystemExit(outcome.exit_code)


@cli.command()
@click.argument("execution_id")
@config_option
@base_url_option
def status(execution_id: str, config_file: Optional[str], base_url: Optional[str]):
    """Show the current status of one execution."""
    from scandium_runner.api_client import get_scandium_client

    config = _load(config_file, False, base_url)
    client = get_scandium_client(config)

    try:
        execution = client.get_execution(execution_id, config.project_id)
    except ScandiumClientError as e:
        _fail(e)

    click.echo(f"Execution ID:   {execution.handle}")
    click.echo(f"Running status: {execution.running_status}")
    click.echo(f"Status:         {execution.status}")
    if execution.is_terminal:
        click.echo("Terminal:       yes")
    else:
        click.echo("Terminal:       no")


@cli.command()
@results_dir_option
def show(results_dir: Optional[str]):
    """Summarize persisted results of the last run (read-only)."""
    from scandium_runner.observe import print_summary

    print_summary(Path(results_dir) if results_dir else None)


@cli.command()
@config_option
def check_config(config_file: Optional[str]):
    """Check that the required settings are present and valid."""
    config = _load(config_file)

    click.echo("Configuration loaded successfully!")
    click.echo("  API_TOKEN: [set]")
    click.echo(f"  PROJECT_ID: {config.project_id}")
    click.echo(f"  SUITE_ID: {config.suite_id}")
    click.echo(f"  BASE_URL: {config.base_url}")
    click.echo(f"  BROWSER: {config.browser}")
    click.echo(f"  SCREENSHOT: {str(config.screenshot).lower()}")
    click.echo(f"  RETRY: {config.retry}")
    click.echo(f"  MAX_ATTEMPTS: {config.max_attempts}")
    click.echo(f"  WAIT_PERIOD: {config.wait_period}s")
    click.echo(f"  HUB_URL: {config.hub_url or '[unset]'}")
    click.echo(f"  STARTING_URL: {config.starting_url or '[unset]'}")
    click.echo(f"  RESULTS_DIR: {config.results_dir}")


if __name__ == "__main__":
    cli()
