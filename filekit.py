#!/usr/bin/env python3
"""
filekit - file convenience layer

Main entry point for the filekit CLI application.
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from core import FileKitConfig, FileSystemError, load_config
from modules.filesystem import FileFinder, FileHandle


console = Console()


def get_config(ctx: click.Context) -> FileKitConfig:
    """Get the configuration loaded for this invocation."""
    return ctx.obj["config"]


def fail(error: Exception) -> None:
    """Report an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {error}")
    raise SystemExit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="filekit")
@click.option("--config", "config_path", default="config.yaml", show_default=True,
              help="Path to the YAML configuration file.")
@click.pass_context
def filekit(ctx, config_path: str):
    """
    filekit - create, read, write, delete and find files.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj["config_path"] = config_path


@filekit.command()
@click.pass_context
def status(ctx):
    """Show the effective configuration."""
    config = get_config(ctx)
    console.print(Panel.fit(
        "[bold blue]filekit[/bold blue]\n"
        f"[dim]Config: {ctx.obj['config_path']}[/dim]",
        title="Status"
    ))
    console.print(f"\n   Encoding: {config.encoding}")
    console.print(f"   Audit log: {config.audit_log_path if config.audit_enabled else 'disabled'}")
    console.print(f"   Brace expansion: {'on' if config.brace_expansion else 'off'}")


@filekit.command()
@click.argument("path")
@click.pass_context
def cat(ctx, path: str):
    """Print the content of a file."""
    config = get_config(ctx)
    try:
        handle = FileHandle.open(path, encoding=config.encoding, logger=config.make_logger())
    except (FileSystemError, OSError, UnicodeDecodeError) as e:
        fail(e)
    click.echo(handle.read(), nl=False)


@filekit.command()
@click.argument("path")
@click.argument("text", nargs=-1)
@click.pass_context
def create(ctx, path: str, text):
    """Create a new file, optionally with TEXT as its content."""
    config = get_config(ctx)
    try:
        with FileHandle.create(path, encoding=config.encoding, logger=config.make_logger()) as handle:
            handle.write(" ".join(text)).save()
    except (FileSystemError, OSError) as e:
        fail(e)
    console.print(f"[green]Created:[/green] {path}")


@filekit.command()
@click.argument("path")
@click.argument("text", nargs=-1, required=True)
@click.option("--mode", type=click.Choice(["overwrite", "append", "before", "after"]),
              default="overwrite", show_default=True,
              help="How TEXT is combined with the existing file.")
@click.pass_context
def write(ctx, path: str, text, mode: str):
    """Write TEXT to an existing file."""
    config = get_config(ctx)
    content = " ".join(text)
    try:
        with FileHandle.open(path, encoding=config.encoding, logger=config.make_logger()) as handle:
            if mode == "append":
                handle.append_mode().write(content)
            elif mode == "before":
                handle.write_before(content)
            elif mode == "after":
                handle.write_after(content)
            else:
                handle.write(content)
            handle.save()
    except (FileSystemError, OSError, UnicodeDecodeError) as e:
        fail(e)
    console.print(f"[green]Saved ({mode}):[/green] {path}")


@filekit.command()
@click.argument("path")
@click.pass_context
def rm(ctx, path: str):
    """Delete a file if it exists."""
    config = get_config(ctx)
    try:
        removed = FileHandle.unlink(path, logger=config.make_logger())
    except OSError as e:
        fail(e)
    if removed:
        console.print(f"[green]Deleted:[/green] {path}")
    else:
        console.print(f"[dim]Nothing to delete:[/dim] {path}")


@filekit.command()
@click.argument("pattern")
@click.option("--prefix", is_flag=True, help="Treat PATTERN as a directory plus name prefix.")
@click.pass_context
def find(ctx, pattern: str, prefix: bool):
    """Find files by glob PATTERN (with {a,b} alternatives) or by prefix."""
    finder = FileFinder(brace_expansion=get_config(ctx).brace_expansion)
    if prefix:
        matches = finder.find_files_that_start_with(pattern)
    else:
        matches = finder.find_files_that_match(pattern)

    if not matches:
        console.print("[dim]No files found.[/dim]")
        return

    for match in matches:
        click.echo(match)


@filekit.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show.")
@click.option("--failed", is_flag=True, help="Only show failed actions.")
@click.pass_context
def audit(ctx, limit: int, failed: bool):
    """View the audit log."""
    logger = get_config(ctx).make_logger()
    if logger is None:
        console.print("[dim]Audit logging is disabled.[/dim]")
        return

    entries = logger.get_failed_actions(limit=limit) if failed else logger.get_recent(limit=limit)

    if not entries:
        console.print("[dim]No audit entries found.[/dim]")
        return

    table = Table(title="Recent Failed Actions" if failed else "Recent Audit Log")
    table.add_column("Time", style="dim")
    table.add_column("Action")
    table.add_column("Target")
    table.add_column("Status")

    for entry in entries:
        time_str = entry.timestamp.split("T")[1].split(".")[0] if "T" in entry.timestamp else entry.timestamp

        status_str = entry.status
        if entry.status == "executed":
            status_str = f"[green]{entry.status}[/green]"
        elif entry.status == "failed":
            status_str = f"[red]{entry.status}[/red]"

        table.add_row(time_str, entry.action_type, entry.target or "—", status_str)

    console.print(table)


if __name__ == "__main__":
    filekit()
