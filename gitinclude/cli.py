"""CLI commands for gitinclude."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gitinclude.errors import GitIncludeError
from gitinclude.models.checkout import CheckoutState, SyncResult
from gitinclude.sync.engine import included_dirs
from gitinclude.sync.git import DEFAULT_TIMEOUT
from gitinclude.sync.naming import derive_repo_name
from gitinclude.sync.progress import ConsoleProgress
from gitinclude.workspace import Workspace

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def get_workspace(ctx: click.Context, timeout: float | None = DEFAULT_TIMEOUT) -> Workspace:
    return Workspace(
        ctx.obj["workspace_dir"],
        ctx.obj["config_path"],
        timeout=timeout,
        progress_callback=ConsoleProgress(err_console),
    )


def _fail(error: GitIncludeError) -> NoReturn:
    err_console.print(f"[red]{escape(str(error))}[/red]")
    raise SystemExit(1)


@click.group()
@click.option("--workspace", "-w", default=".", help="Workspace directory")
@click.option("--config", "-c", default=None, help="Config file (default: <workspace>/gitinclude.yaml)")
@click.option("--verbose", "-v", is_flag=True, help="Log git commands")
@click.pass_context
def main(ctx: click.Context, workspace: str, config: str | None, verbose: bool) -> None:
    """gitinclude - Check out git repositories for inclusion in a build."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["workspace_dir"] = Path(workspace)
    ctx.obj["config_path"] = Path(config) if config else None


@main.command()
@click.option("--offline", is_flag=True, envvar="GITINCLUDE_OFFLINE", help="Skip all git activity")
@click.option("--parallel", is_flag=True, help="Sync repositories concurrently")
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    envvar="GITINCLUDE_TIMEOUT",
    show_default=True,
    help="Seconds allowed per git command",
)
@click.option("--json", "as_json", is_flag=True, help="Print included directories as JSON")
@click.pass_context
def sync(ctx: click.Context, offline: bool, parallel: bool, timeout: float, as_json: bool) -> None:
    """Clone or update declared repositories and print the directories to include."""
    workspace = get_workspace(ctx, timeout)

    async def run() -> list[SyncResult]:
        return await workspace.sync(offline=offline, parallel=parallel)

    try:
        results = asyncio.run(run())
    except GitIncludeError as e:
        _fail(e)

    dirs = [str(d) for d in included_dirs(results)]
    if as_json:
        click.echo(json.dumps(dirs, indent=2))
    else:
        for d in dirs:
            click.echo(d)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the local state of each declared repository (no network access)."""
    workspace = get_workspace(ctx)

    try:
        infos = asyncio.run(workspace.status())
    except GitIncludeError as e:
        _fail(e)

    table = Table(title=f"Checkouts in {workspace.checkout_dir}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("URL", style="blue", overflow="fold")
    table.add_column("Branch", style="yellow", no_wrap=True)
    table.add_column("State", justify="center", no_wrap=True)
    table.add_column("Commit", style="dim", no_wrap=True)

    state_styles = {
        CheckoutState.ABSENT: "yellow",
        CheckoutState.PRESENT: "green",
        CheckoutState.PARTIAL: "red",
    }

    for info in infos:
        style = state_styles[info.state]
        branch = info.spec.branch
        if info.branch and not info.is_on_branch:
            branch = f"{info.spec.branch} (on {info.branch})"
        table.add_row(
            info.repo_name,
            info.spec.url,
            branch,
            f"[{style}]{info.state.value}[/{style}]",
            info.commit[:7] if info.commit else "-",
        )

    console.print(table)


@main.command()
@click.argument("url")
def name(url: str) -> None:
    """Print the checkout directory name derived from URL."""
    try:
        click.echo(derive_repo_name(url))
    except GitIncludeError as e:
        _fail(e)


if __name__ == "__main__":
    main()
