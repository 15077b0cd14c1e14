"""CLI for userdesk.

Usage:
    python -m userdesk list                      # Show all users
    python -m userdesk add                       # Prompt for a new user
    python -m userdesk add -f Ada -l Lovelace -e ada@x.com -d Research
    python -m userdesk edit 3 --department Ops   # Prompt for the rest
    python -m userdesk delete 3
    python -m userdesk reset                     # Clear stored users
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from userdesk.config import Settings
from userdesk.form import FormError, UserForm
from userdesk.models import FIELD_LABELS, FORM_FIELDS, Notice
from userdesk.remote import fetch_users
from userdesk.render import render_users
from userdesk.storage import LocalStorage, SnapshotError, UserSnapshot
from userdesk.store import LoadSource, UserStore

app = typer.Typer(
    name="userdesk",
    help="Manage a local list of users",
    no_args_is_help=True,
)
console = Console(stderr=True)
out = Console()


def _configure_logging(verbose: bool) -> None:
    log = logging.getLogger("userdesk")
    log.handlers[:] = [RichHandler(console=console, show_path=False)]
    log.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def _build_store(settings: Settings) -> UserStore:
    snapshot = UserSnapshot(LocalStorage(settings.storage_path))
    return UserStore(snapshot, fetch=partial(fetch_users, settings.api_url, settings.timeout_s))


def _open_store(settings: Settings) -> UserStore:
    """Build the store and load it, reporting a failed fetch once."""
    store = _build_store(settings)
    try:
        source = store.load()
    except SnapshotError as e:
        _fail(str(e))
    if source is LoadSource.FAILED:
        console.print(f"[red]{Notice.FETCH_ERROR.value}[/red]")
    return store


def _fill_form(form: UserForm, given: dict[str, Optional[str]]) -> dict[str, str]:
    """Apply option values, prompt for the rest, and submit.

    Prompts default to the form's current value, so pressing enter keeps it.
    """
    for name in FORM_FIELDS:
        value = given.get(name)
        if value is None:
            value = typer.prompt(FIELD_LABELS[name], default=form.data[name] or None)
        form.change(name, value)
    try:
        return form.submit()
    except FormError as e:
        _fail(str(e))


@app.callback()
def main(
    ctx: typer.Context,
    storage: Optional[Path] = typer.Option(None, "--storage", help="Local storage file (env: USERDESK_STORAGE)"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Remote user list used when nothing is stored (env: USERDESK_API_URL)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
) -> None:
    """Manage a local list of users."""
    _configure_logging(verbose)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        _fail(str(e))
    if storage:
        settings.storage_path = storage
    if api_url:
        settings.api_url = api_url
    ctx.obj = settings


@app.command("list")
def cmd_list(ctx: typer.Context) -> None:
    """Show all users."""
    store = _open_store(ctx.obj)
    render_users(store.users, out)


@app.command("add")
def cmd_add(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--first-name", "-f", help="First name"),
    username: Optional[str] = typer.Option(None, "--last-name", "-l", help="Last name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Email address"),
    department: Optional[str] = typer.Option(None, "--department", "-d", help="Department"),
) -> None:
    """Add a user. Fields not given as options are prompted for."""
    store = _open_store(ctx.obj)
    form = UserForm.open()
    fields = _fill_form(form, {"name": name, "username": username, "email": email, "department": department})
    try:
        user = store.create(fields)
    except SnapshotError as e:
        _fail(str(e))
    console.print(f"[green]{Notice.ADDED.value}[/green] (id {user.id})")


@app.command("edit")
def cmd_edit(
    ctx: typer.Context,
    user_id: int = typer.Argument(help="Id of the user to edit"),
    name: Optional[str] = typer.Option(None, "--first-name", "-f", help="First name"),
    username: Optional[str] = typer.Option(None, "--last-name", "-l", help="Last name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Email address"),
    department: Optional[str] = typer.Option(None, "--department", "-d", help="Department"),
) -> None:
    """Edit a user. Prompts default to the current values."""
    store = _open_store(ctx.obj)
    user = store.get(user_id)
    if user is None:
        _fail(f"no user with id {user_id}")
    form = UserForm.open(user)
    console.print(f"[bold]{form.title}[/bold] #{user.id}")
    fields = _fill_form(form, {"name": name, "username": username, "email": email, "department": department})
    try:
        store.update(user.id, fields)
    except SnapshotError as e:
        _fail(str(e))
    console.print(f"[green]{Notice.UPDATED.value}[/green]")


@app.command("delete")
def cmd_delete(
    ctx: typer.Context,
    user_id: int = typer.Argument(help="Id of the user to delete"),
) -> None:
    """Delete a user. Unknown ids leave the list unchanged."""
    store = _open_store(ctx.obj)
    try:
        store.delete(user_id)
    except SnapshotError as e:
        _fail(str(e))
    console.print(f"[green]{Notice.DELETED.value}[/green]")


@app.command("reset")
def cmd_reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Clear stored users; the next load fetches the remote list again."""
    if not yes:
        typer.confirm("Clear all stored users?", abort=True)
    store = _build_store(ctx.obj)
    try:
        store.reset()
    except (OSError, SnapshotError) as e:
        _fail(str(e))
    console.print(f"Cleared {ctx.obj.storage_path}")


if __name__ == "__main__":
    app()
