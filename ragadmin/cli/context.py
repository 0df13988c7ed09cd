"""Shared wiring for CLI commands: settings, session, client, auth guard."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Optional
import asyncio

import httpx
import typer
from rich.console import Console

from rag_admin_sdk import AsyncRagAdminClient, FileSessionStorage, Session

from ragadmin.adapters.notifications import ConsoleNotifier
from ragadmin.application.results import WorkflowOutcome, WorkflowResult
from ragadmin.core.auth import AuthContext, NotAuthenticatedError
from ragadmin.core.config import Settings, get_settings
from ragadmin.ports.notifier import NotifierPort

console = Console()

EXIT_FAILURE = 1
EXIT_PARTIAL_SUCCESS = 3


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


def create_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for the API client; None selects httpx's default."""
    return None


def format_datetime(value: Optional[datetime], empty: str = "Never") -> str:
    if value is None:
        return empty
    return value.strftime("%b %d, %Y, %I:%M %p")


@dataclass
class ConsoleContext:
    settings: Settings
    session: Session
    client: AsyncRagAdminClient
    auth: AuthContext
    notifier: NotifierPort


@asynccontextmanager
async def open_console(protected: bool = True) -> AsyncIterator[ConsoleContext]:
    """Build the per-invocation context.

    Protected commands do not run until the persisted session has been checked,
    and exit with a pointer to the login command while anonymous.
    """
    settings = get_settings()
    session = Session(FileSessionStorage(settings.storage_path))
    client = AsyncRagAdminClient(
        base_url=settings.api_url,
        session=session,
        timeout=settings.request_timeout,
        transport=create_transport(),
    )
    auth = AuthContext(client, session)
    auth.on_redirect(_show_login_hint)
    auth.initialize()
    ctx = ConsoleContext(
        settings=settings,
        session=session,
        client=client,
        auth=auth,
        notifier=ConsoleNotifier(),
    )
    try:
        if protected:
            try:
                auth.require_authenticated()
            except NotAuthenticatedError:
                raise typer.Exit(EXIT_FAILURE)
        yield ctx
    finally:
        auth.close()
        await client.close()


def _show_login_hint(route: str) -> None:
    console.print(
        f"[yellow]Not logged in ({route}).[/yellow] Run [bold]ragadmin auth login[/bold]."
    )


def exit_for(result: WorkflowResult) -> None:
    """Map a workflow outcome to the process exit code."""
    if result.outcome in (WorkflowOutcome.FAILURE, WorkflowOutcome.REJECTED):
        raise typer.Exit(EXIT_FAILURE)
    if result.outcome == WorkflowOutcome.PARTIAL_SUCCESS:
        raise typer.Exit(EXIT_PARTIAL_SUCCESS)
