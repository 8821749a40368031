"""CLI interface for sitenav.

Command-line tool for validating, inspecting and serving sidebars.
"""

import json
import logging
import sys
from pathlib import Path

import click

from sitenav.config import Config
from sitenav.core.loader import SidebarLoader, SiteNavigation
from sitenav.core.sidebar import Category, Entry

# Sidebar, content and declaration errors all derive from ValueError
NAVIGATION_ERRORS = (FileNotFoundError, ValueError)

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover sitenav.toml)",
)


@click.group()
def cli() -> None:
    """sitenav - Sidebar navigation for documentation sites."""


@cli.command()
@config_option
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)
@click.option(
    "--sidebars",
    "sidebars_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Sidebar declaration file (overrides config)",
)
@click.option(
    "--collect-all/--fail-fast",
    default=None,
    help="Report every error or stop at the first (overrides config, default: fail-fast)",
)
def check(
    config_path: Path | None,
    source_dir: Path | None,
    sidebars_file: Path | None,
    collect_all: bool | None,
) -> None:
    """Validate sidebars against the documentation sources."""
    mode = None if collect_all is None else ("collect-all" if collect_all else "fail-fast")
    navigation = _load_navigation(
        config_path,
        source_dir=source_dir,
        sidebars_file=sidebars_file,
        validation_mode=mode,
    )

    document_count = sum(len(tree.document_ids()) for tree in navigation.sidebars.values())
    click.echo(
        click.style(
            f"Validated {len(navigation.sidebars)} sidebar(s), {document_count} document(s)",
            fg="green",
        ),
    )

    unreferenced = navigation.unreferenced_documents()
    if unreferenced:
        click.echo(
            click.style(
                f"Warning: {len(unreferenced)} document(s) not referenced by any sidebar:",
                fg="yellow",
            ),
        )
        for doc_id in unreferenced:
            click.echo(f"  - {doc_id}")


@cli.command()
@config_option
@click.option(
    "--name",
    "-n",
    default=None,
    help="Sidebar to show (default: all)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print sidebars as JSON",
)
def show(config_path: Path | None, name: str | None, as_json: bool) -> None:
    """Print sidebar trees."""
    navigation = _load_navigation(config_path)

    trees = list(navigation.sidebars.values())
    if name is not None:
        tree = navigation.sidebars.get(name)
        if tree is None:
            click.echo(click.style(f"Error: unknown sidebar '{name}'", fg="red"), err=True)
            sys.exit(1)
        trees = [tree]

    if as_json:
        click.echo(json.dumps([tree.to_dict() for tree in trees], indent=2))
        return

    for tree in trees:
        click.echo(tree.name)
        for line in _outline(tree.items, depth=1):
            click.echo(line)


@cli.command()
@config_option
@click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Documentation source directory (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the navigation API server."""
    from sitenav.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            source_dir=source_dir,
            live_reload_enabled=live_reload,
        )
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    click.echo(f"Sidebars file: {config.docs.sidebars_file}")
    click.echo(f"Validation: {config.validation.mode}")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


def _load_navigation(
    config_path: Path | None,
    *,
    source_dir: Path | None = None,
    sidebars_file: Path | None = None,
    validation_mode: str | None = None,
) -> SiteNavigation:
    """Load config and build every sidebar, exiting on failure.

    Raises:
        SystemExit: If configuration or sidebars are invalid
    """
    try:
        config = Config.load(config_path).with_overrides(
            source_dir=source_dir,
            sidebars_file=sidebars_file,
            validation_mode=validation_mode,
        )
        return SidebarLoader(config).load()
    except NAVIGATION_ERRORS as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _outline(items: tuple[Entry, ...], depth: int) -> list[str]:
    """Render entries as indented outline lines."""
    indent = "  " * depth
    lines: list[str] = []
    for item in items:
        if isinstance(item, Category):
            marker = "+" if item.collapsed else "-"
            lines.append(f"{indent}{marker} {item.label}")
            lines.extend(_outline(item.items, depth + 1))
        else:
            lines.append(f"{indent}{item.title} ({item.id})")
    return lines
