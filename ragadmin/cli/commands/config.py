"""AI configuration commands."""

from typing import List, Optional

import typer
from rich.table import Table

from rag_admin_sdk import LLMProvider

from ragadmin.application.use_cases import AIConfigurationManagement
from ragadmin.application.use_cases.manage_ai_configuration import CONFIG_FIELDS
from ragadmin.cli.context import (
    EXIT_FAILURE,
    console,
    exit_for,
    format_datetime,
    open_console,
    run_async,
)

app = typer.Typer(help="Global AI provider configuration.")


def _render(page: AIConfigurationManagement) -> None:
    config = page.config
    applicable = page.applicable_parameters()
    table = Table(title=f"AI Configuration (updated {format_datetime(config.updated_at)})")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_column("Range", style="dim")
    table.add_row("llm_provider", config.llm_provider.value, "")
    for name in CONFIG_FIELDS:
        if name == "llm_provider" or name not in applicable:
            continue
        spec = applicable[name]
        value = getattr(config, name)
        bounds = ""
        if spec.minimum is not None or spec.maximum is not None:
            low = "" if spec.minimum is None else f"{spec.minimum:g}"
            high = "" if spec.maximum is None else f"{spec.maximum:g}"
            bounds = f"{low} - {high}".strip()
        table.add_row(name, "-" if value is None else str(value), bounds)
    console.print(table)


@app.command()
def show():
    """Show the current AI configuration."""
    run_async(_show())


async def _show() -> None:
    async with open_console() as ctx:
        page = AIConfigurationManagement(ctx.client, ctx.notifier)
        if not await page.load():
            raise typer.Exit(EXIT_FAILURE)
        if page.config is None:
            ctx.notifier.error("No configuration found")
            raise typer.Exit(EXIT_FAILURE)
        _render(page)


@app.command("set")
def set_config(
    provider: Optional[LLMProvider] = typer.Option(None, "--provider", help="LLM provider"),
    model: Optional[str] = typer.Option(None, "--model"),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", help="0-1 for OPENAI/ANTHROPIC, 0-2 for GEMINI"
    ),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", min=1),
    top_p: Optional[float] = typer.Option(None, "--top-p", help="0-1"),
    top_k: Optional[int] = typer.Option(None, "--top-k", help="GEMINI/ANTHROPIC only"),
    frequency_penalty: Optional[float] = typer.Option(
        None, "--frequency-penalty", help="-2 to 2, OPENAI only"
    ),
    presence_penalty: Optional[float] = typer.Option(
        None, "--presence-penalty", help="-2 to 2, OPENAI only"
    ),
    stop_sequences: List[str] = typer.Option(
        [], "--stop", help="Stop sequence, repeatable (GEMINI/ANTHROPIC only)"
    ),
    clear: List[str] = typer.Option([], "--clear", help="Field to reset to null (repeatable)"),
):
    """Update the AI configuration. Only the given options are sent."""
    edits = {
        "llm_provider": provider,
        "model": model,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "top_p": top_p,
        "top_k": top_k,
        "frequency_penalty": frequency_penalty,
        "presence_penalty": presence_penalty,
        "stop_sequences": stop_sequences or None,
    }
    edits = {name: value for name, value in edits.items() if value is not None}
    for name in clear:
        if name not in CONFIG_FIELDS or name == "llm_provider":
            raise typer.BadParameter(f"cannot clear {name!r}", param_hint="--clear")
    if not edits and not clear:
        console.print("Nothing to update.")
        raise typer.Exit(0)
    run_async(_set_config(edits, clear))


async def _set_config(edits: dict, clear: List[str]) -> None:
    async with open_console() as ctx:
        page = AIConfigurationManagement(ctx.client, ctx.notifier)
        if not await page.load():
            raise typer.Exit(EXIT_FAILURE)
        for name, value in edits.items():
            page.set_field(name, value)
        for name in clear:
            page.clear_field(name)
        result = await page.save()
        if result.succeeded:
            _render(page)
        exit_for(result)
