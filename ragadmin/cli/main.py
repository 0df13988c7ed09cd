"""RAG Admin CLI - Main entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ragadmin import __version__
from ragadmin.application.use_cases import load_dashboard
from ragadmin.application.results import describe_error
from ragadmin.cli.commands import auth, users, licenses, knowledge_bases, config
from ragadmin.cli.context import EXIT_FAILURE, open_console, run_async
from ragadmin.core.config import get_settings
from rag_admin_sdk import RagAdminError

console = Console()

app = typer.Typer(
    name="ragadmin",
    help="RAG Admin CLI - manage users, licenses, knowledge bases and AI settings.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth.app, name="auth")
app.add_typer(users.app, name="users")
app.add_typer(licenses.app, name="licenses")
app.add_typer(knowledge_bases.app, name="kb")
app.add_typer(config.app, name="config")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging once per invocation."""
    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]RAG Admin[/bold] v{__version__}")


@app.command()
def dashboard():
    """Overview of users, licenses and knowledge bases."""
    run_async(_dashboard())


async def _dashboard() -> None:
    async with open_console() as ctx:
        try:
            summary = await load_dashboard(ctx.client)
        except RagAdminError as e:
            ctx.notifier.error(describe_error(e, "Failed to load data"))
            raise typer.Exit(EXIT_FAILURE)

        table = Table(title=f"Dashboard - {ctx.auth.user.email}")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right")
        table.add_row("Users", str(summary.users))
        table.add_row("Admins", str(summary.admins))
        table.add_row("Licenses", str(summary.licenses))
        table.add_row("Active licenses", str(summary.active_licenses))
        table.add_row("Expired licenses", str(summary.expired_licenses))
        table.add_row("Knowledge bases", str(summary.knowledge_bases))
        table.add_row("Documents", str(summary.documents))
        console.print(table)


if __name__ == "__main__":
    app()
