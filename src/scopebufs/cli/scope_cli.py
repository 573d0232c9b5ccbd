"""
CLI commands for inspecting and editing scope membership.

Commands work on a JSON workspace file describing the host's items and
scopes. Commands that change membership write the workspace back.
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from scopebufs.core.config import settings
from scopebufs.core.exceptions import ScopeBufsError
from scopebufs.host.memory import MemoryHost
from scopebufs.scope.scope_manager import ScopeManager
from scopebufs.scope.schemas import ScopeId
from scopebufs.scope.snapshot import extract_snapshot
from scopebufs.scope.snapshot_store import SnapshotStore

scope_app = typer.Typer(help="Commands to inspect and edit scope-local buffer lists.")
console = Console()

WORKSPACE_OPTION = typer.Option(
    Path("workspace.json"), "--workspace", "-w",
    envvar="SCOPEBUFS_WORKSPACE",
    help="Workspace JSON file describing items and scopes",
)


def _open(workspace: Path) -> Tuple[MemoryHost, ScopeManager]:
    host = MemoryHost.load(workspace)
    return host, ScopeManager(host, settings).install()


def _scope(text: Optional[str]) -> Optional[ScopeId]:
    if text is None:
        return None
    try:
        return ScopeId.parse(text)
    except ValueError:
        typer.echo(f"Error: invalid scope {text!r}, expected CONTAINER[:INDEX]")
        raise typer.Exit(code=1)


def _fail(e: Exception):
    typer.echo(f"Error: {str(e)}")
    raise typer.Exit(code=1)


def _print_items(title: str, host: MemoryHost, items: Iterable[Any]) -> None:
    items = list(items)
    if not items:
        typer.echo("No items found.")
        return
    table = Table(title=title)
    table.add_column("Name", style="green")
    table.add_column("File", style="cyan")
    table.add_column("Project", style="magenta")
    for item in items:
        table.add_row(host.item_name(item), host.file_path(item) or "", host.project_id(item) or "")
    console.print(table)


def _ordered(host: MemoryHost, items: set) -> List[Any]:
    return [i for i in host.all_items() if i in items]


@scope_app.command("list")
def list_cmd(
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]; current scope if omitted"),
    buried: Optional[bool] = typer.Option(
        None, "--buried/--no-buried",
        help="Include buried items (default: configured toggle)"
    ),
    hidden: bool = typer.Option(False, "--hidden", help="Include hidden items"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    List a scope's local items.
    """
    try:
        host, manager = _open(workspace)
        items = manager.accessor.compute_list(_scope(scope), include_buried=buried, include_hidden=hidden)
        _print_items(f"Items of {scope or host.current_scope()}", host, items)
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("captured")
def captured_cmd(
    exclude: Optional[str] = typer.Option(None, "--exclude", "-x", help="Scope to leave out"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    List items captured by any scope.
    """
    try:
        host, manager = _open(workspace)
        items = manager.algebra.captured(excluding=_scope(exclude))
        _print_items("Captured items", host, _ordered(host, items))
    except ScopeBufsError as e:
        _fail(e)


@scope_app.command("orphans")
def orphans_cmd(workspace: Path = WORKSPACE_OPTION):
    """
    List items no scope captures.
    """
    try:
        host, manager = _open(workspace)
        _print_items("Orphan items", host, manager.algebra.orphans_list())
    except ScopeBufsError as e:
        _fail(e)


@scope_app.command("exclusive")
def exclusive_cmd(
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    invert: bool = typer.Option(False, "--invert", "-i", help="Show items shared with other scopes"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    List items only this scope captures.
    """
    try:
        host, manager = _open(workspace)
        items = manager.algebra.exclusive(_scope(scope), invert=invert)
        title = "Shared items" if invert else "Exclusive items"
        _print_items(title, host, _ordered(host, items))
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("locate")
def locate_cmd(
    name: str = typer.Argument(..., help="Item name"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Show which scopes hold an item.
    """
    try:
        host, manager = _open(workspace)
        item = host.lookup_by_name(name)
        if item is None:
            _fail(ValueError(f"No live item named {name!r}"))
        scopes = manager.algebra.locate(item)
        if not scopes:
            typer.echo(f"{name} is not captured by any scope.")
            return
        for scope in scopes:
            typer.echo(str(scope))
    except ScopeBufsError as e:
        _fail(e)


@scope_app.command("clear")
def clear_cmd(
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Reset a scope to its current item.
    """
    try:
        host, manager = _open(workspace)
        manager.operations.clear(_scope(scope))
        host.save(workspace)
        typer.echo(f"Cleared {scope or host.current_scope()}")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("remove")
def remove_cmd(
    name: str = typer.Argument(..., help="Item name"),
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Remove an item from a scope without destroying it.
    """
    try:
        host, manager = _open(workspace)
        item = host.lookup_by_name(name)
        if item is None or not manager.operations.remove(_scope(scope), item):
            typer.echo(f"{name} is not in the scope.")
            return
        host.save(workspace)
        typer.echo(f"Removed {name}")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("kill-orphans")
def kill_orphans_cmd(workspace: Path = WORKSPACE_OPTION):
    """
    Destroy every item no scope captures.
    """
    try:
        host, manager = _open(workspace)
        destroyed = manager.operations.kill_orphans()
        host.save(workspace)
        typer.echo(f"Destroyed {len(destroyed)} items")
    except ScopeBufsError as e:
        _fail(e)


@scope_app.command("kill-exclusive")
def kill_exclusive_cmd(
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    kill_all: bool = typer.Option(False, "--all", "-a", help="Destroy shared items too"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Destroy the items only this scope captures.
    """
    try:
        host, manager = _open(workspace)
        destroyed = manager.operations.kill_exclusive(_scope(scope), kill_all=kill_all)
        host.save(workspace)
        typer.echo(f"Destroyed {len(destroyed)} items")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("isolate")
def isolate_cmd(
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    file_only: bool = typer.Option(False, "--file-only", help="Only remove items without a file"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Remove items that belong to another project.
    """
    try:
        host, manager = _open(workspace)
        result = manager.operations.isolate_by_project(_scope(scope), file_only=file_only)
        if result.project is None:
            typer.echo("Scope has no current project.")
            return
        host.save(workspace)
        typer.echo(f"Removed {len(result.removed)} items outside project {result.project}")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("snapshot-save")
def snapshot_save_cmd(
    name: str = typer.Argument(..., help="Name to store the window state under"),
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Capture a scope's window state and store it.
    """
    try:
        host, manager = _open(workspace)
        scope_id = manager.accessor.resolve(_scope(scope))
        state = manager.capture_window(scope_id)
        SnapshotStore(db).save(name, scope_id, state)
        typer.echo(f"Saved {name} from {scope_id}")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("snapshot-restore")
def snapshot_restore_cmd(
    name: str = typer.Argument(..., help="Stored window state name"),
    scope: Optional[str] = typer.Argument(None, help="Scope as CONTAINER[:INDEX]"),
    force: bool = typer.Option(False, "--force", "-f", help="Restore into windows that are not live"),
    db: Optional[str] = typer.Option(None, "--db", help="Database URL"),
    workspace: Path = WORKSPACE_OPTION,
):
    """
    Restore a stored window state into a scope.
    """
    try:
        host, manager = _open(workspace)
        state = SnapshotStore(db).load(name)
        if not manager.restore_window(state, _scope(scope), force=force):
            typer.echo("Nothing restored.")
            return
        host.save(workspace)
        typer.echo(f"Restored {name} into {scope or host.current_scope()}")
    except (ScopeBufsError, KeyError) as e:
        _fail(e)


@scope_app.command("snapshots")
def snapshots_cmd(db: Optional[str] = typer.Option(None, "--db", help="Database URL")):
    """
    List stored window states.
    """
    try:
        records = SnapshotStore(db).list_records()
        if not records:
            typer.echo("No window states found.")
            return
        table = Table(title="Window states")
        table.add_column("Name", style="green")
        table.add_column("Scope", style="cyan")
        table.add_column("Items", style="magenta")
        table.add_column("Updated", style="yellow")
        for record in records:
            snapshot = extract_snapshot(record.state)
            updated = record.updated_at.strftime("%Y-%m-%d %H:%M:%S") if record.updated_at else "Unknown"
            table.add_row(
                record.name,
                f"{record.container}:{record.sub_index}",
                str(len(snapshot.names)) if snapshot else "0",
                updated,
            )
        console.print(table)
    except ScopeBufsError as e:
        _fail(e)
