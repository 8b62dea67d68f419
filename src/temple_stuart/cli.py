"""Command-line interface using Typer."""

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from temple_stuart import __version__
from temple_stuart.config import get_settings

app = typer.Typer(
    name="temple-stuart",
    help="Temple Stuart - corporate action cost basis ledger",
    add_completion=False,
)
console = Console()

DEFAULT_API_URL = "http://localhost:8000/api/v1"


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"Temple Stuart version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Temple Stuart CLI."""
    pass


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
):
    """Start the FastAPI server."""
    import uvicorn

    console.print(f"[green]Starting Temple Stuart API on {host}:{port}[/green]")
    uvicorn.run(
        "temple_stuart.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command("record-action")
def record_action(
    symbol: str = typer.Argument(..., help="Stock symbol"),
    action_type: str = typer.Option(..., "--type", help="SPLIT, REVERSE_SPLIT or STOCK_DIVIDEND"),
    effective_date: str = typer.Option(..., "--date", help="Effective date (YYYY-MM-DD)"),
    ratio_from: str = typer.Option(..., "--from", help="First ratio term (1 for 1:50)"),
    ratio_to: str = typer.Option(..., "--to", help="Second ratio term (50 for 1:50)"),
    user_email: str = typer.Option(..., "--user", envvar="TEMPLE_STUART_USER", help="Caller email"),
    pre_split_shares: str = typer.Option(None, "--pre-shares", help="Shares held before the action"),
    post_split_shares: str = typer.Option(None, "--post-shares", help="Shares held after the action"),
    add_pre_split_lot: bool = typer.Option(False, "--add-lot", help="Create a lot for untracked shares"),
    lot_cost_basis: str = typer.Option("0", "--lot-cost", help="Cost basis of that lot"),
    lot_acquired_date: str = typer.Option(None, "--lot-date", help="Acquisition date of that lot (YYYY-MM-DD)"),
    notes: str = typer.Option(None, "--notes", help="Free-form notes"),
    source: str = typer.Option(None, "--source", help="SEC filing, broker statement, etc."),
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", help="API base URL"),
):
    """Record a corporate action and adjust affected lots."""
    payload = {
        "symbol": symbol,
        "action_type": action_type.upper(),
        "effective_date": effective_date,
        "ratio_from": ratio_from,
        "ratio_to": ratio_to,
        "add_pre_split_lot": add_pre_split_lot,
        "lot_cost_basis": lot_cost_basis,
    }
    optional = {
        "pre_split_shares": pre_split_shares,
        "post_split_shares": post_split_shares,
        "lot_acquired_date": lot_acquired_date,
        "notes": notes,
        "source": source,
    }
    payload.update({key: value for key, value in optional.items() if value})

    async def do_record():
        async with httpx.AsyncClient(cookies={get_settings().auth_cookie_name: user_email}) as client:
            console.print(f"[yellow]Recording {payload['action_type']} for {symbol.upper()}...[/yellow]")
            try:
                response = await client.post(f"{api_url}/corporate-actions", json=payload, timeout=30.0)
                response.raise_for_status()
                data = response.json()
                console.print(f"[green]✓ Recorded corporate action {data['action']['id']}[/green]")
                console.print(f"  Lots adjusted: {data['adjusted_lots']}")
                if data["new_lot"]:
                    console.print(f"  New lot: {data['new_lot']['id']}")
                for adj in data["adjustments"]:
                    console.print(
                        f"  {adj['lot_id'][:8]}: "
                        f"{adj['before']['shares']} @ {adj['before']['cost_per_share']} -> "
                        f"{adj['after']['shares']} @ {adj['after']['cost_per_share']}"
                    )
            except httpx.HTTPStatusError as e:
                console.print(f"[red]✗ Rejected ({e.response.status_code}): {e.response.text}[/red]")
                raise typer.Exit(code=1)
            except httpx.HTTPError as e:
                console.print(f"[red]✗ Request failed: {e}[/red]")
                console.print("[yellow]Make sure the API server is running (temple-stuart serve)[/yellow]")
                raise typer.Exit(code=1)

    asyncio.run(do_record())


@app.command("list-actions")
def list_actions(
    user_email: str = typer.Option(..., "--user", envvar="TEMPLE_STUART_USER", help="Caller email"),
    symbol: str = typer.Option(None, "--symbol", help="Filter by symbol"),
    api_url: str = typer.Option(DEFAULT_API_URL, "--api-url", help="API base URL"),
):
    """List recorded corporate actions."""

    async def do_list():
        async with httpx.AsyncClient(cookies={get_settings().auth_cookie_name: user_email}) as client:
            params = {"symbol": symbol} if symbol else {}
            try:
                response = await client.get(f"{api_url}/corporate-actions", params=params, timeout=30.0)
                response.raise_for_status()
            except httpx.HTTPError as e:
                console.print(f"[red]✗ Request failed: {e}[/red]")
                raise typer.Exit(code=1)

            data = response.json()
            table = Table(title=f"Corporate actions ({data['total']})")
            table.add_column("Date")
            table.add_column("Symbol")
            table.add_column("Type")
            table.add_column("Ratio")
            table.add_column("Lots", justify="right")
            for action in data["actions"]:
                table.add_row(
                    action["effective_date"],
                    action["symbol"],
                    action["action_type"],
                    f"{action['ratio_from']}:{action['ratio_to']}",
                    str(len(action["lot_adjustments"])),
                )
            console.print(table)

    asyncio.run(do_list())


@app.command()
def status():
    """Show Temple Stuart status."""
    settings = get_settings()
    console.print(f"[bold]{settings.app_name} v{__version__}[/bold]")
    console.print(f"Database: {settings.database_url.split('@')[-1]}")
    console.print("[green]Status: Ready[/green]")


if __name__ == "__main__":
    app()
