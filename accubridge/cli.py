"""CLI entry point for accubridge."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from accubridge_core.config import AccuBridgeConfig, load_config
from accubridge_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from accubridge_core.errors import AccuBridgeError
from accubridge_core.issues import Issue, create_issue_tracking_provider
from accubridge_core.log_setup import configure_logging
from accubridge_core.vcs import DirectoryListing, TreeNode, create_source_control_provider

app = typer.Typer(
    name="accubridge",
    help="Browse AccuRev streams and AccuWork issues through the accurev CLI.",
)

config_app = typer.Typer(help="Manage accubridge configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: AccuBridgeConfig | None = None


def _get_config() -> AccuBridgeConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to accubridge.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _fail(e: Exception) -> typer.Exit:
    rprint(f"[red]Error:[/red] {e}")
    return typer.Exit(1)


def _stream_tree(node: TreeNode, branch: Tree | None = None) -> Tree:
    """Render a stream hierarchy as a Rich tree."""
    if branch is None:
        branch = Tree(f"[bold cyan]{node.name}[/bold cyan]")
    for child in node.directories:
        _stream_tree(child, branch.add(f"[cyan]{child.name}[/cyan]"))
    return branch


def _display_listing(listing: DirectoryListing) -> None:
    table = Table(title=listing.path or "(root)")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for name in listing.directories:
        table.add_row(f"{name}/", "-", "-")
    for f in listing.files:
        table.add_row(f.name, str(f.size), f.last_modified.strftime("%Y-%m-%d %H:%M:%S"))
    rprint(table)


def _display_issues(issues: list[Issue], closed: set[str]) -> None:
    table = Table(title=f"Issues ({len(issues)})")
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Status")
    table.add_column("Title")
    table.add_column("Release", style="yellow")
    for issue in issues:
        status = issue.status or "-"
        if issue.status in closed:
            status = f"[dim]{status}[/dim]"
        table.add_row(issue.id or "-", status, issue.title or "", issue.release or "-")
    rprint(table)


@app.command()
def streams() -> None:
    """Show the stream hierarchy."""
    cfg = _get_config()
    provider = create_source_control_provider(cfg.accurev)
    try:
        root = provider.list_streams()
    except AccuBridgeError as e:
        raise _fail(e)
    rprint(_stream_tree(root))


@app.command(name="ls")
def list_directory(
    path: str = typer.Argument("", help="Source path, e.g. depot/:stream/dir"),
) -> None:
    """List one directory level of a stream."""
    cfg = _get_config()
    provider = create_source_control_provider(cfg.accurev)
    try:
        listing = provider.get_directory_entry_info(path)
    except AccuBridgeError as e:
        raise _fail(e)
    if listing is None:
        rprint(f"[yellow]Not found:[/yellow] {path}")
        raise typer.Exit(1)
    _display_listing(listing)


@app.command()
def get(
    source: str = typer.Argument(..., help="Source path, e.g. depot/:stream/dir"),
    target: Path = typer.Argument(..., help="Destination directory"),
) -> None:
    """Get the latest version of a path into a local directory."""
    cfg = _get_config()
    provider = create_source_control_provider(cfg.accurev)
    try:
        provider.get_latest(source, target)
    except (AccuBridgeError, ValueError, FileNotFoundError) as e:
        raise _fail(e)
    rprint(f"[green]Copied[/green] {source} -> {target}")


@app.command()
def issues(
    release: str | None = typer.Option(None, "--release", "-r", help="Target release"),
    category: str | None = typer.Option(
        None, "--category", help="Category value (overrides accuwork.category_id_filter)"
    ),
) -> None:
    """List AccuWork issues."""
    cfg = _get_config()
    try:
        provider = create_issue_tracking_provider(cfg.accurev, cfg.accuwork)
        if category is not None:
            found = provider.query_issues(release, category)
        else:
            found = provider.get_issues(release)
    except (AccuBridgeError, ValueError) as e:
        raise _fail(e)
    _display_issues(found, set(cfg.accuwork.closed_statuses))


@app.command()
def categories() -> None:
    """List values of the configured category filter field."""
    cfg = _get_config()
    try:
        provider = create_issue_tracking_provider(cfg.accurev, cfg.accuwork)
        found = provider.get_categories()
        type_names = provider.category_type_names
    except (AccuBridgeError, ValueError) as e:
        raise _fail(e)
    if not found:
        rprint("[yellow]No category filter configured.[/yellow]")
        return
    tree = Tree(f"[bold]{type_names[0] if type_names else 'Categories'}[/bold]")
    for c in found:
        tree.add(c.name)
    rprint(tree)


@app.command()
def check() -> None:
    """Check that accurev is available and the configuration works."""
    cfg = _get_config()
    vcs = create_source_control_provider(cfg.accurev)
    if not vcs.is_available():
        rprint(f"[red]Not available:[/red] {cfg.accurev.exe_path}")
        raise typer.Exit(1)
    try:
        vcs.validate_connection()
        rprint("[green]AccuRev:[/green] ok")
        if cfg.accuwork.depot:
            create_issue_tracking_provider(cfg.accurev, cfg.accuwork).validate_connection()
            rprint("[green]AccuWork:[/green] ok")
        else:
            rprint("[dim]AccuWork: no depot configured, skipped[/dim]")
    except (AccuBridgeError, ValueError) as e:
        raise _fail(e)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default accubridge.yaml in current directory."""
    target = Path("accubridge.yaml")
    if target.exists() and not force:
        rprint("[yellow]accubridge.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
