"""
netledger CLI

Commands:
  serve                 Launch the browser and serve the HTTP API
  inspect URL           Open URL, list its network traffic, render bodies

Examples:
  netledger inspect https://example.com --wait 3
  netledger inspect https://example.com --method POST --type xhr
  netledger inspect https://example.com --all-types --body <request-id>
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.syntax import Syntax

from netledger.browser.manager import BrowserManager
from netledger.config import Config
from netledger.log import setup_logging, suppress_console_logs
from netledger.network.models import (
    FilterCriteria,
    ImageBody,
    JsonBody,
    NoResponse,
    NotFound,
    OpaqueBody,
    RenderError,
    RenderResult,
    TextBody,
)
from netledger.network.projector import list_requests
from netledger.network.renderer import ResponseRenderer
from netledger.network.truncation import first_line

# Results go to stdout; logs go to files only
suppress_console_logs()
log = setup_logging("cli", log_file="cli.log")
cli = typer.Typer(no_args_is_help=True, add_completion=False)
console = Console()
err_console = Console(stderr=True)

VERSION = "1.0.0"


def print_render(request_id: str, result: RenderResult) -> bool:
    """Print one render result. Returns False for caller-visible errors."""
    if isinstance(result, (NotFound, NoResponse, RenderError)):
        err_console.print(f"[bold red]✗[/] {result.message}")
        return False

    console.rule(f"[bold #58a6ff]{request_id}[/] [#8b949e]{result.kind}[/]")
    if isinstance(result, JsonBody):
        console.print(Syntax(result.text, "json", word_wrap=True))
        console.print(f"[#8b949e]raw size: {result.original_byte_length} bytes[/]")
        if result.truncated:
            console.print("[#8b949e]output cut at the byte ceiling[/]")
    elif isinstance(result, TextBody):
        console.print(result.text, markup=False, highlight=False)
    elif isinstance(result, ImageBody):
        console.print(f"Image {result.content_type}, {len(result.data)} bytes")
    elif isinstance(result, OpaqueBody):
        console.print(result.message)
    return True


async def _inspect(
    url: str,
    wait: float,
    criteria: FilterCriteria,
    bodies: list[str],
) -> int:
    browser = BrowserManager()
    failures = 0
    try:
        await browser.start()
        await browser.navigate(url)
        if wait > 0:
            await asyncio.sleep(wait)

        for line in await list_requests(browser.ledger, criteria):
            console.print(line, markup=False, highlight=False, soft_wrap=True)

        renderer = ResponseRenderer(browser.ledger)
        for request_id in bodies:
            if not print_render(request_id, await renderer.render(request_id)):
                failures += 1
    finally:
        await browser.close()
    return failures


@cli.command()
def inspect(
    url: str = typer.Argument(..., help="Page to open"),
    wait: float = typer.Option(2.0, "--wait", "-w", help="Seconds to let traffic settle after load"),
    method: List[str] = typer.Option([], "--method", "-m", help="HTTP method filter (repeatable)"),
    resource_type: Optional[List[str]] = typer.Option(None, "--type", "-t", help="Resource type filter (repeatable)"),
    all_types: bool = typer.Option(False, "--all-types", help="Do not apply the default resource types"),
    body: List[str] = typer.Option([], "--body", "-b", help="Request id whose body to render (repeatable)"),
) -> None:
    """Open URL, print its network requests as JSONL, optionally render bodies."""
    if all_types:
        types: list[str] = []
    elif resource_type:
        types = list(resource_type)
    else:
        types = Config.DEFAULT_RESOURCE_TYPES
    criteria = FilterCriteria(methods=set(method), resource_types=set(types))
    log.info(f"inspect {url} — methods={sorted(criteria.methods)} types={sorted(criteria.resource_types)}")

    try:
        failures = asyncio.run(_inspect(url, wait, criteria, list(body)))
    except Exception as e:
        log.error(f"inspect failed: {e}", exc_info=True)
        err_console.print(f"[bold red]✗[/] {first_line(e)}")
        raise typer.Exit(code=1)
    if failures:
        raise typer.Exit(code=2)


@cli.command()
def serve(
    host: str = typer.Option(Config.API_HOST, help="Bind address"),
    port: int = typer.Option(Config.API_PORT, help="Bind port"),
) -> None:
    """Launch the browser and serve the HTTP API."""
    import uvicorn

    log.info(f"Serving API on {host}:{port}")
    uvicorn.run("netledger.api.server:app", host=host, port=port, log_level="info")


@cli.command()
def version() -> None:
    """Print the version."""
    console.print(f"netledger {VERSION}")


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
