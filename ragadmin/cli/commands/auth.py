"""Session commands: the login entry point."""

import typer
from rich.table import Table

from rag_admin_sdk import RagAdminError

from ragadmin.application.results import describe_error
from ragadmin.cli.context import EXIT_FAILURE, console, open_console, run_async

app = typer.Typer(help="Log in and out of the RAG backend.")


@app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Account password"
    ),
):
    """Authenticate and persist the session."""
    run_async(_login(email, password))


async def _login(email: str, password: str) -> None:
    async with open_console(protected=False) as ctx:
        try:
            user = await ctx.auth.login(email, password)
        except RagAdminError as e:
            ctx.notifier.error(describe_error(e, "Invalid email or password"))
            raise typer.Exit(EXIT_FAILURE)
        console.print(f"[green]Logged in as[/green] {user.email} ({user.role.value})")


@app.command()
def logout():
    """Clear the persisted session."""
    run_async(_logout())


async def _logout() -> None:
    async with open_console(protected=False) as ctx:
        if not ctx.auth.is_authenticated:
            console.print("Not logged in.")
            return
        ctx.auth.logout()


@app.command()
def whoami():
    """Show the account of the persisted session."""
    run_async(_whoami())


async def _whoami() -> None:
    async with open_console() as ctx:
        user = ctx.auth.user
        table = Table(title="Current Session")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Email", user.email)
        table.add_row("Role", user.role.value)
        table.add_row("API", ctx.settings.api_url)
        console.print(table)
