#!/usr/bin/env python3
"""
jsonjwt CLI - inspect JSON documents and decode JWTs in the terminal.

Commands:
    jsonjwt tree [FILE]         Show JSON as an expandable tree
    jsonjwt copy PATH [FILE]    Print the value at a path (for piping to a clipboard tool)
    jsonjwt format [FILE]       Pretty-print JSON
    jsonjwt decode [TOKEN]      Decode a JWT (signature is NOT verified)
    jsonjwt clear               Forget the remembered JSON or token input
    jsonjwt config              Show the current configuration

Input is read from FILE/TOKEN, then from stdin, then from the last input
remembered in the state file.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from . import config
from .claims import ClaimRow, describe_claims, describe_header, summarize_token
from .errors import JsonSyntaxError
from .paths import JsonPath
from .session import InspectorSession, Tab
from .token import TokenErrorKind
from .tree import TreeRow
from .values import Kind

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Application
# =============================================================================

app = typer.Typer(
    name="jsonjwt",
    help="🔎 Inspect JSON as a tree and decode JWTs",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

KIND_STYLES = {
    Kind.STRING: "green",
    Kind.NUMBER: "blue",
    Kind.BOOLEAN: "magenta",
    Kind.NULL: "dim",
    Kind.OBJECT: "dark_orange",
    Kind.ARRAY: "deep_pink3",
}


# =============================================================================
# Utility Functions
# =============================================================================

def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def load_state() -> dict:
    """Load remembered inputs from disk."""
    if not config.PERSIST or not config.STATE_PATH.exists():
        return {}

    try:
        state = json.loads(config.STATE_PATH.read_text())
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable state file %s: %s", config.STATE_PATH, e)
        return {}
    return state if isinstance(state, dict) else {}


def save_state(session: InspectorSession) -> None:
    """Save the session's inputs to disk."""
    if not config.PERSIST:
        return
    config.STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
    config.STATE_PATH.write_text(json.dumps(session.snapshot(), indent=2))
    logger.debug("Saved state to %s", config.STATE_PATH)


def open_session(quotes: Optional[bool] = None, tab: Tab = Tab.JSON) -> InspectorSession:
    session = InspectorSession.restore(load_state(), tab=tab)
    if quotes is not None:
        session.set_quote_strings(quotes)
    return session


def read_input(source: Optional[Path]) -> Optional[str]:
    """Text from a file, else piped stdin; None when neither supplies any."""
    if source is not None:
        return source.read_text()
    if not sys.stdin.isatty():
        text = sys.stdin.read()
        if text.strip():
            return text
    return None


def parse_path_option(text: str) -> JsonPath:
    try:
        return JsonPath.parse(text)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def no_data_exit() -> None:
    rprint(Panel(
        "[bold yellow]No JSON data to display.[/bold yellow]\n\n"
        "[dim]Pass a file, pipe JSON on stdin, or fix the remembered input.[/dim]",
        title="No Data",
        border_style="yellow",
    ))
    raise typer.Exit(1)


def _row_label(row: TreeRow) -> str:
    if row.path.is_root:
        name = "[italic dim]root[/italic dim]"
    else:
        name = f"[bold]{escape(row.label)}[/bold]"
    marker = ""
    if row.expandable:
        marker = "▼ " if row.expanded else "▶ "
    text = f"{marker}{name} [dim]({row.kind.value})[/dim]"
    if row.display is not None:
        text += f"  [{KIND_STYLES[row.kind]}]{escape(row.display)}[/]"
    if row.summary:
        text += f"  [dim]{row.summary}[/dim]"
    if row.selected:
        text = f"[reverse]{text}[/reverse]"
    return text


def build_tree(rows: List[TreeRow]) -> Tree:
    """Nest flat pre-order rows back into a rich Tree."""
    root = Tree(_row_label(rows[0]), guide_style="dim")
    stack = [(rows[0].depth, root)]
    for row in rows[1:]:
        while stack[-1][0] >= row.depth:
            stack.pop()
        node = stack[-1][1].add(_row_label(row))
        stack.append((row.depth, node))
    return root


def _claim_table(rows: List[ClaimRow]) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Claim", style="bold", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for row in rows:
        if row.is_temporal:
            style = "red" if row.expired else "cyan"
            table.add_row(
                f"🕒 {row.label}",
                f"{escape(row.json_text)}  [{style}]{escape(row.relative)}[/{style}]"
                f"  [dim]{escape(row.absolute)}[/dim]",
            )
        else:
            table.add_row(escape(row.label), escape(row.json_text))
    return table


# =============================================================================
# Callback
# =============================================================================

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
):
    setup_logging(verbose)


# =============================================================================
# JSON Commands
# =============================================================================

@app.command("tree")
def show_tree(
    file: Optional[Path] = typer.Argument(
        None,
        help="JSON file (default: stdin, then the remembered input)",
        exists=True,
        readable=True,
    ),
    quotes: Optional[bool] = typer.Option(
        None,
        "--quotes/--no-quotes",
        help="Wrap string values in quotes (remembered between runs)",
    ),
    collapse: bool = typer.Option(
        False,
        "--collapse",
        help="Start with everything but the root collapsed",
    ),
    toggle: Optional[List[str]] = typer.Option(
        None,
        "--toggle", "-t",
        help="Toggle a path open/closed, e.g. 'items[0].tags' (repeatable)",
    ),
    select: Optional[str] = typer.Option(
        None,
        "--select", "-s",
        help="Highlight a path",
    ),
):
    """
    🌳 Show JSON as an expandable tree.

    Examples:
        jsonjwt tree data.json
        cat data.json | jsonjwt tree --collapse --toggle users
    """
    session = open_session(quotes=quotes)
    text = read_input(file)
    if text is not None:
        session.set_json_text(text)
    save_state(session)

    if not session.has_data:
        no_data_exit()

    if collapse:
        session.collapse_all()
    try:
        for path_text in toggle or []:
            session.toggle(parse_path_option(path_text))
        if select is not None:
            session.select(parse_path_option(select))
    except LookupError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}", file=sys.stderr)
        raise typer.Exit(1)

    console.print(build_tree(session.rows()))


@app.command("copy")
def copy_value(
    path: str = typer.Argument(..., help="Path of the value, e.g. 'users[0].name'; '' for root"),
    file: Optional[Path] = typer.Argument(
        None,
        help="JSON file (default: stdin, then the remembered input)",
        exists=True,
        readable=True,
    ),
):
    """
    📋 Print the value at a path, unquoted, for piping into a clipboard tool.

    Examples:
        jsonjwt copy 'users[0].email' data.json | pbcopy
    """
    session = open_session()
    text = read_input(file)
    if text is not None:
        session.set_json_text(text)

    if not session.has_data:
        no_data_exit()

    try:
        request = session.copy_value(parse_path_option(path))
    except LookupError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}", file=sys.stderr)
        raise typer.Exit(1)

    logger.debug("Copied %s", request.label)
    typer.echo(request.text)


@app.command("format")
def format_json(
    file: Optional[Path] = typer.Argument(
        None,
        help="JSON file (default: stdin, then the remembered input)",
        exists=True,
        readable=True,
    ),
):
    """
    ✨ Pretty-print JSON and remember the formatted text.
    """
    session = open_session()
    text = read_input(file)
    if text is not None:
        session.set_json_text(text)

    try:
        formatted = session.format_json()
    except JsonSyntaxError as e:
        rprint(Panel(
            "[bold red]❌ Invalid JSON[/bold red]\n\n"
            "Please enter valid JSON to format.\n\n"
            f"[dim]{escape(str(e))}[/dim]",
            title="Format Failed",
            border_style="red",
        ))
        raise typer.Exit(1)

    save_state(session)
    typer.echo(formatted)


# =============================================================================
# Token Commands
# =============================================================================

@app.command("decode")
def decode(
    token: Optional[str] = typer.Argument(
        None,
        help="JWT string (default: stdin, then the remembered input)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """
    🔑 Decode a JWT. The signature is shown but NOT verified.

    Examples:
        jsonjwt decode eyJhbGciOi...
        pbpaste | jsonjwt decode --json
    """
    session = open_session(tab=Tab.JWT)
    text = token if token is not None else read_input(None)
    if text is not None:
        session.set_token_text(text.strip())
    save_state(session)

    result = session.token_result()
    if result is None:
        rprint("[yellow]No token to decode.[/yellow]")
        raise typer.Exit(1)

    now_ms = session.now_ms()

    if not result.ok:
        if as_json:
            typer.echo(json.dumps({"ok": False, "kind": result.kind.value, "message": result.message}))
        elif result.kind is TokenErrorKind.INVALID_FORMAT:
            rprint(Panel(
                "[bold red]Invalid JWT Format[/bold red]\n\n"
                "JWT tokens must have three parts separated by dots.\n"
                "Please check your JWT token and try again.\n\n"
                f"[dim]{escape(result.message or '')}[/dim]",
                title="Error",
                border_style="red",
            ))
        else:
            rprint(Panel(
                "[bold red]Error Decoding JWT[/bold red]\n\n"
                "Could not decode the JWT header or payload.\n"
                "The JWT token may be malformed or using an unsupported encoding.\n\n"
                f"[dim]{escape(result.message or '')}[/dim]",
                title="Error",
                border_style="red",
            ))
        raise typer.Exit(1)

    decoded = result.token
    summary = summarize_token(decoded, now_ms)
    claims = describe_claims(decoded.payload, now_ms)

    if as_json:
        output = {
            "ok": True,
            "header": decoded.header,
            "payload": decoded.payload,
            "signature": decoded.signature,
            "expired": summary.expired,
            "times": {
                row.key: {"relative": row.relative, "absolute": row.absolute}
                for row in claims
                if row.is_temporal
            },
        }
        typer.echo(json.dumps(output, indent=2))
        return

    # Overview
    border = "red" if summary.expired else "green"
    status = "[bold red]Expired[/bold red]" if summary.expired else "[bold green]Valid[/bold green]"
    overview = [f"{status}", f"[dim]Algorithm:[/dim] {escape(summary.algorithm)}"]
    if summary.issued:
        overview.append(f"[dim]Issued:[/dim]    {summary.issued}")
    if summary.expires:
        overview.append(f"[dim]Expires:[/dim]   {summary.expires}")
    rprint(Panel("\n".join(overview), title=f"{escape(summary.token_type)} Token", border_style=border))

    rprint(Panel(_claim_table(describe_header(decoded.header)), title="Header", border_style="blue"))
    rprint(Panel(_claim_table(claims), title="Payload", border_style="green"))
    rprint(Panel(
        f"[magenta]{escape(decoded.signature)}[/magenta]\n\n"
        "[dim]Signature is displayed only; it has not been verified.[/dim]",
        title="Signature",
        border_style="magenta",
    ))


# =============================================================================
# Housekeeping Commands
# =============================================================================

@app.command("clear")
def clear(
    tab: Tab = typer.Option(
        Tab.JSON,
        "--tab",
        help="Which remembered input to clear",
        case_sensitive=False,
    ),
):
    """
    🗑️  Forget the remembered JSON or JWT input.
    """
    session = open_session(tab=tab)
    cleared = session.clear()
    save_state(session)
    rprint(f"[green]✓[/green] {cleared.value.upper()} input cleared")


@app.command("config")
def show_config():
    """
    ⚙️  Show the current configuration.
    """
    table = Table(title="jsonjwt Configuration", show_header=False)
    table.add_column("Setting", style="dim", no_wrap=True)
    table.add_column("Value", overflow="fold")
    for name, value in config.config_items().items():
        table.add_row(name, escape(str(value)))
    console.print(table)


if __name__ == "__main__":
    app()
