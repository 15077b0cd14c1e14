"""Rich rendering of the user list."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from userdesk.models import NOT_AVAILABLE, User


def build_user_table(users: list[User]) -> Table:
    """One row per user with the commands that act on it."""
    table = Table(title="User List", show_header=True, header_style="bold")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("First Name", style="green")
    table.add_column("Last Name")
    table.add_column("Email")
    table.add_column("Department")
    table.add_column("Actions", style="cyan")

    for u in users:
        dept = escape(str(u.department_label))
        if u.department_label == NOT_AVAILABLE:
            dept = f"[dim]{dept}[/dim]"
        table.add_row(
            str(u.id),
            escape(str(u.name)),
            escape(str(u.username)),
            escape(str(u.email)),
            dept,
            f"edit {u.id} | delete {u.id}",
        )
    return table


def render_users(users: list[User], console: Console) -> None:
    if not users:
        console.print("[yellow]No users.[/yellow] Add one with: userdesk add")
        return
    console.print()
    console.print(build_user_table(users))
    console.print()
