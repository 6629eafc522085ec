"""Deploy new contract code through the contract's own ``upgrade`` method."""

import asyncio
from pathlib import Path

import structlog
import typer
from rich.console import Console

from nearx.cli import main as cli_main
from nearx.config import get_settings
from nearx.log import configure_logging
from nearx.services import ConfigurationError, canonical_account_id, parse_target

app = typer.Typer(
    name="nearx-upgrade",
    help="Upgrade the NearX contract code (owner only)",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)


async def _upgrade(network: str, contract_name: str, account_id: str, wasm: Path) -> None:
    async with await cli_main.open_client(network, contract_name, account_id) as client:
        await client.upgrade(wasm)


@app.command()
def upgrade(
    target: str = typer.Argument(..., help="NETWORK:CONTRACT"),
    account_id: str = typer.Argument(..., help="Owner account signing the upgrade"),
    wasm: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Compiled contract (.wasm)"),
):
    """Upload WASM and let the contract migrate itself."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    try:
        network, contract_name = parse_target(target)
        account_id = canonical_account_id(network, account_id)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    try:
        asyncio.run(_upgrade(network, contract_name, account_id, wasm))
    except Exception as e:
        logger.error("Upgrade failed", contract=contract_name, error=str(e), error_type=type(e).__name__)
        raise typer.Exit(code=1)

    console.print(f"[green]Contract {contract_name} upgraded[/green]")


if __name__ == "__main__":
    app()
