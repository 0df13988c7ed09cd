"""User management commands."""

from typing import Optional

import typer
from rich.table import Table

from rag_admin_sdk import UserRole

from ragadmin.application.use_cases import UserManagement
from ragadmin.cli.context import (
    EXIT_FAILURE,
    console,
    exit_for,
    format_datetime,
    open_console,
    run_async,
)

app = typer.Typer(help="User administration.")


@app.command("list")
def list_users():
    """List all users."""
    run_async(_list_users())


async def _list_users() -> None:
    async with open_console() as ctx:
        page = UserManagement(ctx.client, ctx.notifier)
        if not await page.load():
            raise typer.Exit(EXIT_FAILURE)

        table = Table(title="Users")
        table.add_column("ID", style="dim")
        table.add_column("Email", style="cyan")
        table.add_column("Role", style="green")
        table.add_column("Licenses")
        table.add_column("Created At")
        for user in page.users:
            table.add_row(
                user.id,
                user.email,
                user.role.value,
                str(len(user.licenses or [])),
                format_datetime(user.created_at),
            )
        if not page.users:
            table.add_row("", "No users found", "", "", "")
        console.print(table)


@app.command()
def show(user_id: str = typer.Argument(..., help="User id")):
    """Show one user with its licenses."""
    run_async(_show(user_id))


async def _show(user_id: str) -> None:
    async with open_console() as ctx:
        page = UserManagement(ctx.client, ctx.notifier)
        user = await page.view_user(user_id)
        if user is None:
            raise typer.Exit(EXIT_FAILURE)

        console.print(f"[bold]{user.email}[/bold] ({user.role.value})")
        console.print(f"Created: {format_datetime(user.created_at)}")
        table = Table(title="Licenses")
        table.add_column("Key", style="cyan")
        table.add_column("Status")
        table.add_column("Expires At")
        for lic in user.licenses or []:
            table.add_row(
                lic.key,
                "[green]Active[/green]" if lic.is_active else "[red]Inactive[/red]",
                format_datetime(lic.expires_at),
            )
        console.print(table)


@app.command()
def create(
    email: str = typer.Option(..., "--email", "-e", help="User email"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Password (prompted if not provided)"
    ),
    role: Optional[UserRole] = typer.Option(None, "--role", "-r", help="ADMIN or CUSTOMER"),
):
    """Create a new user."""
    if not password:
        password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)
    run_async(_create(email, password, role))


async def _create(email: str, password: str, role: Optional[UserRole]) -> None:
    async with open_console() as ctx:
        page = UserManagement(ctx.client, ctx.notifier)
        exit_for(await page.create_user(email, password, role))


@app.command()
def update(
    user_id: str = typer.Argument(..., help="User id"),
    email: str = typer.Option(..., "--email", "-e", help="New email"),
    role: Optional[UserRole] = typer.Option(None, "--role", "-r", help="ADMIN or CUSTOMER"),
):
    """Update a user's email and role."""
    run_async(_update(user_id, email, role))


async def _update(user_id: str, email: str, role: Optional[UserRole]) -> None:
    async with open_console() as ctx:
        page = UserManagement(ctx.client, ctx.notifier)
        exit_for(await page.update_user(user_id, email, role))


@app.command()
def delete(
    user_id: str = typer.Argument(..., help="User id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a user."""
    if not yes:
        typer.confirm(f"Delete user {user_id}?", abort=True)
    run_async(_delete(user_id))


async def _delete(user_id: str) -> None:
    async with open_console() as ctx:
        page = UserManagement(ctx.client, ctx.notifier)
        user = await page.view_user(user_id)
        if user is None:
            raise typer.Exit(EXIT_FAILURE)
        exit_for(await page.delete_user(user))
