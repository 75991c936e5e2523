"""
Command Line Interface for svupdate.

This module provides the main CLI using the Click framework. Without flags it
updates the locally recorded Minecraft version to its newest build, or fetches
the newest version when nothing is recorded yet.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn, DownloadColumn, Progress, SpinnerColumn, TextColumn,
    TimeRemainingColumn, TransferSpeedColumn
)
from rich.table import Table

from . import __version__
from .backends.factory import get_backend
from .config.logging_config import setup_logging
from .config.settings import Config
from .exceptions import ServerUpdateError
from .models import BackendKind, UpdateResult
from .updater import ServerUpdater
from .utils.base_api import DownloadClient


def _print_summary(console: Console, result: UpdateResult, checking: bool) -> None:
    """Show local and remote build side by side."""
    table = Table(title="Server Update Check" if checking else "Server Update")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Installed", result.local.describe())
    if result.remote is not None:
        table.add_row("Available", result.remote.describe())
        table.add_row("Artifact", result.remote.artifact_filename)
        table.add_row("Hash", f"{result.remote.hash_algorithm.upper()} {result.remote.expected_hash}")
    if result.artifact_path is not None:
        table.add_row("Jar", str(result.artifact_path))

    console.print(table)


def _run_with_progress(
    console: Console,
    updater: ServerUpdater,
    version: Optional[str],
    latest: bool,
    force: bool,
) -> UpdateResult:
    """Run the update, drawing a progress bar once the download starts."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = None

        def progress_callback(downloaded: int, total: int) -> None:
            nonlocal task_id
            if task_id is None:
                task_id = progress.add_task("Downloading server jar...", total=total)
            progress.update(task_id, completed=downloaded, total=total)

        return updater.run(
            version=version,
            latest=latest,
            progress_callback=progress_callback,
            force=force,
        )


@click.command()
@click.option('--version', '-v', 'mc_version', metavar='MC_VERSION',
              help='Download the newest build of this Minecraft version (e.g. 1.20.1)')
@click.option('--latest', '-l', is_flag=True,
              help='Download the newest version and build, ignoring local state')
@click.option('--backend', '-b', type=click.Choice([kind.value for kind in BackendKind]),
              help='Build server to use (default from config: paper)')
@click.option('--directory', '-d', type=click.Path(file_okay=False, path_type=Path),
              help='Server directory holding the jar and version_history.json')
@click.option('--output', '-o', 'jar_name', help='Name of the server jar (default: server.jar)')
@click.option('--marker', 'marker_file', help='Name of the version history file')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False, path_type=Path),
              help='Path to an alternative config.yaml')
@click.option('--check', is_flag=True, help='Only report whether an update is available')
@click.option('--force', is_flag=True, help='Download even if the installed build is current')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--no-progress', is_flag=True, help='Do not draw a download progress bar')
@click.version_option(__version__, '--tool-version', prog_name="svupdate")
def main(
    mc_version: Optional[str],
    latest: bool,
    backend: Optional[str],
    directory: Optional[Path],
    jar_name: Optional[str],
    marker_file: Optional[str],
    config_file: Optional[Path],
    check: bool,
    force: bool,
    debug: bool,
    no_color: bool,
    no_progress: bool,
) -> None:
    """svupdate - keep a Paper or Purpur server jar up to date."""

    if mc_version is not None and latest:
        raise click.UsageError("--version and --latest are mutually exclusive")

    config = Config(config_file)

    # Command line options override the config file for this run only
    overrides = {
        "server.backend": backend,
        "server.directory": str(directory) if directory else None,
        "server.jar_name": jar_name,
        "server.marker_file": marker_file,
        "logging.level": "DEBUG" if debug else None,
        "ui.colored_output": False if no_color else None,
        "ui.progress_bar": False if no_progress else None,
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)

    console = Console(no_color=not config.get("ui.colored_output", True))
    log = setup_logging(config)

    try:
        kind = config.get_backend_kind()
        backend_client = get_backend(
            kind,
            base_url=config.get_api_url(kind),
            timeout=config.get_timeout("api.timeout"),
            log=log,
        )
        downloader = DownloadClient(
            timeout=config.get_timeout("downloads.timeout"),
            chunk_size=config.get_chunk_size(),
            log=log,
        )
        updater = ServerUpdater(
            backend_client,
            downloader,
            directory=config.get_server_directory(),
            jar_name=config.get("server.jar_name"),
            marker_file=config.get("server.marker_file"),
            log=log,
        )

        with backend_client, downloader:
            if check:
                result = updater.check(version=mc_version, latest=latest)
            elif not config.get("ui.progress_bar", True):
                result = updater.run(version=mc_version, latest=latest, force=force)
            else:
                result = _run_with_progress(console, updater, mc_version, latest, force)

    except ServerUpdateError as e:
        log.error(f"Update failed: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    _print_summary(console, result, check)

    if check:
        if result.update_available:
            console.print("[yellow]An update is available.[/yellow]")
        else:
            console.print("[green]Server jar is up to date.[/green]")
    elif result.updated:
        console.print(f"[green]Successfully updated to {result.remote.describe()}![/green]")
    else:
        console.print("[green]Latest version already downloaded.[/green]")


if __name__ == "__main__":
    main()
