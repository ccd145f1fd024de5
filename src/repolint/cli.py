"""repolint CLI - audit repositories against configured consistency rules."""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from repolint import __version__
from repolint.config import Config, load_config
from repolint.exceptions import ConfigError, ContentError
from repolint.github.client import ContentClient, GitHubClient
from repolint.reporting import has_errors, render_console, write_json_report
from repolint.rules import RuleKind
from repolint.runner import RepositoryReport, run
from repolint.types import RepositoryRef

TOKEN_ENV_VAR = "GITHUB_TOKEN"

cli = typer.Typer(
    name="repolint",
    help="repolint - check consistency across GitHub repositories",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show repolint version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    _ = version


def _load_config_or_exit(config_path: Path | None) -> Config:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1) from exc


async def _resolve_repositories(client: ContentClient, names: list[str]) -> list[RepositoryRef]:
    repositories: list[RepositoryRef] = []
    for name in names:
        ref = RepositoryRef.parse(name)
        repositories.append(await client.get_repository(ref.owner, ref.name))
    return repositories


async def _audit(client: ContentClient, config: Config, repo_names: list[str]) -> list[RepositoryReport]:
    repositories = await _resolve_repositories(client, repo_names) if repo_names else None
    return await run(client, config, repositories)


@cli.command("run")
def run_command(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Path to config file (default: repolint.json/.yaml/.yml/.toml in the workspace)",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        help=f"GitHub token (can also use {TOKEN_ENV_VAR} env var)",
    ),
    repo: list[str] = typer.Option(
        [],
        "--repo",
        help="Audit only this repository (OWNER/NAME). Repeatable.",
    ),
    json_out: Path | None = typer.Option(
        None,
        "--json-out",
        help="Also write the results as JSON to this path",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Run repolint checks against your repositories."""
    _configure_logging(verbose)
    config = _load_config_or_exit(config_path)

    resolved_token = (token or os.environ.get(TOKEN_ENV_VAR) or "").strip()
    if not resolved_token:
        err_console.print(
            f"[bold red]Error:[/bold red] GitHub token is required. Use --token or set {TOKEN_ENV_VAR} environment variable"
        )
        raise typer.Exit(1)

    for name in repo:
        try:
            RepositoryRef.parse(name)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(2) from exc

    console.print("Running repolint...")
    client = GitHubClient(resolved_token)
    try:
        reports = asyncio.run(_audit(client, config, list(repo)))
    except ContentError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    render_console(reports, console)
    if json_out is not None:
        written = write_json_report(reports, json_out)
        console.print(f"JSON report: {written}")

    raise typer.Exit(1 if has_errors(reports) else 0)


@cli.command("validate")
def validate_command(
    config_path: Path | None = typer.Option(None, "--config", help="Path to config file"),
) -> None:
    """Load and validate the configuration without contacting GitHub."""
    config = _load_config_or_exit(config_path)
    console.print(f"[green]Config OK:[/green] {config.path} ({len(config.rules)} rules)")


@cli.command("rules")
def rules_command() -> None:
    """List the known rule identifiers."""
    for kind in RuleKind:
        typer.echo(kind.value)


def main() -> None:
    cli()


if __name__ == "__main__":

    main()
