import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .agents import GoDocsAgent, create_go_docs_agent
from .config import load_settings
from .errors import AgentConfigurationError
from .godoc.models import SECTIONS, DocError, DocResult
from .server import create_server
from .tools.go_docs import fetch_go_doc
from .utils.logging import setup_rich_logging

app = typer.Typer(help="Go documentation from pkg.go.dev")
console = Console()


@app.command()
def doc(
    package: str = typer.Argument("", help="Go package path, e.g. 'fmt' or 'net/http'"),
    section: str = typer.Option("auto", "--section", "-s", help=f"One of: {', '.join(SECTIONS)}"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result"),
):
    """Look up documentation for a Go package"""
    setup_rich_logging()

    with console.status(f"[bold yellow]Fetching {package or section}..."):
        outcome = asyncio.run(fetch_go_doc(package, section))

    if as_json:
        console.print_json(json.dumps(outcome.to_payload()))
    elif isinstance(outcome, DocError):
        _display_error(outcome)
    else:
        _display_result(outcome)

    if isinstance(outcome, DocError):
        raise typer.Exit(1)


@app.command()
def chat(
    message: Optional[str] = typer.Argument(None, help="Question for the Go documentation agent"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Start an interactive chat session"),
):
    """Chat with the Go documentation agent"""
    setup_rich_logging()

    if not message and not interactive:
        console.print("[red]Error: Provide a message or use --interactive mode[/red]")
        raise typer.Exit(1)

    try:
        agent = create_go_docs_agent(load_settings())
    except AgentConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    asyncio.run(_run_chat_session(agent, None if interactive else message))


@app.command()
def tools():
    """List the tools exposed by the MCP server"""
    server = create_server(load_settings())
    table = Table(show_header=True)
    table.add_column("Tool Name", style="bold blue")
    table.add_column("Description")
    table.add_column("Parameters", style="dim")

    for schema in server.tool_registry.tools:
        function = schema["function"]
        properties = function["parameters"].get("properties", {})
        required = function["parameters"].get("required", [])
        params = ", ".join(f"{name}{'' if name in required else '?'}" for name in properties)
        table.add_row(function["name"], function["description"].split("\n")[0], params)

    console.print(table)


async def _run_chat_session(agent: GoDocsAgent, message: str | None):
    """
    Answer one message, or prompt until 'exit' when message is None.

    The whole session shares one event loop: the agent's HTTP client keeps
    pooled connections bound to the loop that opened them.
    """
    try:
        if message is not None:
            await _run_single_message(agent, message)
        else:
            await _run_interactive_mode(agent)
    finally:
        await agent.close()


async def _run_interactive_mode(agent: GoDocsAgent):
    console.print("[bold blue]Starting interactive chat session (type 'exit' to quit)[/bold blue]")

    while True:
        message = await asyncio.to_thread(Prompt.ask, "\n[bold green]You")
        if message.lower() == "exit":
            break
        await _run_single_message(agent, message)


async def _run_single_message(agent: GoDocsAgent, message: str):
    with console.status("[bold yellow]Agent is thinking..."):
        try:
            response = await agent.process_message(message)
        except Exception as e:
            console.print(f"\n[bold red]Error:[/bold red] {e}")
            return
    console.print(f"\n[bold blue]Agent:[/bold blue] {response}")


def _display_error(error: DocError):
    console.print(f"[bold red]Error:[/bold red] {error.error}")
    console.print(f"[yellow]{error.suggestion}[/yellow]")


def _display_result(result: DocResult):
    console.print(Panel(result.description, title=f"[bold]{result.title}[/bold]", subtitle=result.url))
    console.print(f"[bold]Synopsis:[/bold] {result.synopsis}")

    if result.functions:
        table = Table(title="Functions", show_header=True)
        table.add_column("Name", style="bold blue")
        table.add_column("Signature", style="dim")
        table.add_column("Description")
        for func in result.functions:
            table.add_row(func.name, func.signature, func.description)
        console.print(table)

    if result.types:
        table = Table(title="Types", show_header=True)
        table.add_column("Name", style="bold blue")
        table.add_column("Definition", style="dim")
        table.add_column("Description")
        for type_info in result.types:
            table.add_row(type_info.name, type_info.definition, type_info.description)
        console.print(table)

    if result.exported:
        console.print(f"[bold]Exported:[/bold] {', '.join(result.exported)}")
    console.print(f"[dim]{result.note}[/dim]")


def run():
    """Entry point for the CLI"""
    app()
