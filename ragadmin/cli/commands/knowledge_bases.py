"""Knowledge base management commands."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from rag_admin_sdk import FileBlob, KnowledgeBase

from ragadmin.application.use_cases import (
    FileTarget,
    KnowledgeBaseForm,
    KnowledgeBaseManagement,
)
from ragadmin.cli.context import (
    EXIT_FAILURE,
    console,
    exit_for,
    format_datetime,
    open_console,
    run_async,
)

app = typer.Typer(help="Knowledge base administration.")

FilesOption = typer.Option(
    [], "--file", "-f", exists=True, dir_okay=False, help="PDF to upload (repeatable)"
)


def _find(page: KnowledgeBaseManagement, kb_id: str) -> Optional[KnowledgeBase]:
    kb = next((item for item in page.knowledge_bases if item.id == kb_id), None)
    if kb is None:
        page.notifier.error(f"Knowledge base {kb_id} not found")
    return kb


async def _open_page(ctx) -> KnowledgeBaseManagement:
    page = KnowledgeBaseManagement(ctx.client, ctx.notifier)
    if not await page.load():
        raise typer.Exit(EXIT_FAILURE)
    return page


@app.command("list")
def list_knowledge_bases():
    """List all knowledge bases."""
    run_async(_list_knowledge_bases())


async def _list_knowledge_bases() -> None:
    async with open_console() as ctx:
        page = await _open_page(ctx)

        table = Table(title="Knowledge Bases")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Documents")
        table.add_column("Created At")
        for kb in page.knowledge_bases:
            table.add_row(
                kb.id,
                kb.name,
                kb.description or "-",
                str(kb.document_count),
                format_datetime(kb.created_at),
            )
        if not page.knowledge_bases:
            table.add_row("", "No knowledge bases found", "", "", "")
        console.print(table)


@app.command()
def show(kb_id: str = typer.Argument(..., help="Knowledge base id")):
    """Show a knowledge base, its instructions and its documents."""
    run_async(_show(kb_id))


async def _show(kb_id: str) -> None:
    async with open_console() as ctx:
        page = await _open_page(ctx)
        kb = _find(page, kb_id)
        if kb is None:
            raise typer.Exit(EXIT_FAILURE)

        console.print(f"[bold]{kb.name}[/bold]")
        console.print(kb.description or "[dim]No description[/dim]")
        if kb.prompt_instructions:
            console.print(f"[cyan]Prompt instructions:[/cyan] {kb.prompt_instructions}")
        table = Table(title="Documents")
        table.add_column("Key", style="dim")
        table.add_column("Name")
        table.add_column("Status")
        for key, doc in (kb.documents or {}).items():
            label = doc.name if doc.kind == "file" else str(doc.value)
            table.add_row(key, label or "-", doc.status or "-")
        console.print(table)


@app.command()
def create(
    name: str = typer.Option(..., "--name", "-n", help="Knowledge base name"),
    description: str = typer.Option("", "--description", "-d"),
    instructions: str = typer.Option("", "--instructions", "-i", help="Prompt instructions"),
    files: List[Path] = FilesOption,
):
    """Create a knowledge base, optionally uploading PDFs into it."""
    run_async(_create(name, description, instructions, files))


async def _create(name: str, description: str, instructions: str, files: List[Path]) -> None:
    async with open_console() as ctx:
        page = KnowledgeBaseManagement(ctx.client, ctx.notifier)
        page.create_form = KnowledgeBaseForm(
            name=name, description=description, prompt_instructions=instructions
        )
        page.select_files(FileTarget.CREATE, [FileBlob.from_path(p) for p in files])
        exit_for(await page.create_knowledge_base())


@app.command()
def update(
    kb_id: str = typer.Argument(..., help="Knowledge base id"),
    name: Optional[str] = typer.Option(None, "--name", "-n"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    instructions: Optional[str] = typer.Option(None, "--instructions", "-i"),
    files: List[Path] = FilesOption,
):
    """Edit a knowledge base, optionally uploading more PDFs."""
    run_async(_update(kb_id, name, description, instructions, files))


async def _update(
    kb_id: str,
    name: Optional[str],
    description: Optional[str],
    instructions: Optional[str],
    files: List[Path],
) -> None:
    async with open_console() as ctx:
        page = await _open_page(ctx)
        kb = _find(page, kb_id)
        if kb is None:
            raise typer.Exit(EXIT_FAILURE)

        page.open_edit(kb)
        if name is not None:
            page.edit_form.name = name
        if description is not None:
            page.edit_form.description = description
        if instructions is not None:
            page.edit_form.prompt_instructions = instructions
        page.select_files(FileTarget.EDIT, [FileBlob.from_path(p) for p in files])
        exit_for(await page.update_knowledge_base())


@app.command()
def upload(
    kb_id: str = typer.Argument(..., help="Knowledge base id"),
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="PDF files"),
):
    """Upload PDFs to an existing knowledge base."""
    run_async(_upload(kb_id, files))


async def _upload(kb_id: str, files: List[Path]) -> None:
    async with open_console() as ctx:
        page = await _open_page(ctx)
        kb = _find(page, kb_id)
        if kb is None:
            raise typer.Exit(EXIT_FAILURE)

        page.open_upload(kb)
        page.select_files(FileTarget.UPLOAD, [FileBlob.from_path(p) for p in files])
        exit_for(await page.upload_files())


@app.command()
def attach(
    kb_id: str = typer.Option(..., "--kb", "-k", help="Knowledge base id"),
    license_id: str = typer.Option(..., "--license", "-l", help="License id"),
):
    """Attach a knowledge base to a license."""
    run_async(_attach(kb_id, license_id))


async def _attach(kb_id: str, license_id: str) -> None:
    async with open_console() as ctx:
        page = KnowledgeBaseManagement(ctx.client, ctx.notifier)
        exit_for(await page.attach_to_license(kb_id, license_id))


@app.command()
def delete(
    kb_id: str = typer.Argument(..., help="Knowledge base id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a knowledge base and its documents."""
    if not yes:
        typer.confirm(
            f"Delete knowledge base {kb_id}? Its documents are removed too.", abort=True
        )
    run_async(_delete(kb_id))


async def _delete(kb_id: str) -> None:
    async with open_console() as ctx:
        page = await _open_page(ctx)
        kb = _find(page, kb_id)
        if kb is None:
            raise typer.Exit(EXIT_FAILURE)
        exit_for(await page.delete_knowledge_base(kb))
