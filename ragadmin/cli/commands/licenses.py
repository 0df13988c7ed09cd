"""License management commands."""

from typing import List, Optional

import typer
from rich.table import Table

from ragadmin.application.use_cases import LicenseForm, LicenseManagement
from ragadmin.cli.context import (
    EXIT_FAILURE,
    console,
    exit_for,
    format_datetime,
    open_console,
    run_async,
)

app = typer.Typer(help="License administration.")


@app.command("list")
def list_licenses():
    """List all licenses."""
    run_async(_list_licenses())


async def _list_licenses() -> None:
    async with open_console() as ctx:
        page = LicenseManagement(ctx.client, ctx.notifier)
        if not await page.load():
            raise typer.Exit(EXIT_FAILURE)

        table = Table(title="Licenses")
        table.add_column("ID", style="dim")
        table.add_column("License Key", style="cyan")
        table.add_column("User")
        table.add_column("Status")
        table.add_column("Expires At")
        table.add_column("Knowledge Bases")
        table.add_column("Created At")
        for lic in page.licenses:
            table.add_row(
                lic.id,
                lic.key,
                lic.user.email if lic.user else "-",
                "[green]Active[/green]" if lic.is_active else "[red]Inactive[/red]",
                format_datetime(lic.expires_at),
                str(len(lic.knowledge_bases or [])),
                format_datetime(lic.created_at),
            )
        if not page.licenses:
            table.add_row("", "No licenses found", "", "", "", "", "")
        console.print(table)


@app.command()
def create(
    user_id: str = typer.Option(..., "--user", "-u", help="Owner user id"),
    days: Optional[int] = typer.Option(
        None, "--days", "-d", help="Validity period in days (omit for unlimited)"
    ),
    knowledge_bases: List[str] = typer.Option(
        [], "--kb", "-k", help="Knowledge base id to attach (repeatable)"
    ),
):
    """Create a license and attach knowledge bases to it."""
    run_async(_create(user_id, days, knowledge_bases))


async def _create(user_id: str, days: Optional[int], knowledge_bases: List[str]) -> None:
    async with open_console() as ctx:
        page = LicenseManagement(ctx.client, ctx.notifier)
        form = LicenseForm(user_id=user_id, validity_days=days)
        for kb_id in knowledge_bases:
            if kb_id not in form.knowledge_base_ids:
                form.knowledge_base_ids.append(kb_id)
        result = await page.create_license(form)
        if result.value is not None:
            console.print(f"License key: [bold]{result.value.key}[/bold]")
        exit_for(result)


@app.command()
def toggle(license_id: str = typer.Argument(..., help="License id")):
    """Activate an inactive license or deactivate an active one."""
    run_async(_toggle(license_id))


async def _toggle(license_id: str) -> None:
    async with open_console() as ctx:
        page = LicenseManagement(ctx.client, ctx.notifier)
        if not await page.load():
            raise typer.Exit(EXIT_FAILURE)
        lic = next((item for item in page.licenses if item.id == license_id), None)
        if lic is None:
            ctx.notifier.error(f"License {license_id} not found")
            raise typer.Exit(EXIT_FAILURE)
        exit_for(await page.toggle_license(lic))
