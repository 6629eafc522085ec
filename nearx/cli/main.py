"""Main CLI entry point."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import NoReturn, Optional

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nearx.config import get_settings
from nearx.log import configure_logging
from nearx.services import (
    ConfigurationError,
    NearxPoolClient,
    canonical_account_id,
    parse_target,
)
from nearx.services.schemas import DrainResult, FanOutResult

app = typer.Typer(
    name="nearx",
    help="NearX staking-pool operator CLI",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True, emoji=False)
logger = structlog.get_logger(__name__)


@dataclass
class CommandOptions:
    account_id: str
    page_size: int
    sync: bool
    operator_id: str | None = None
    treasury_id: str | None = None


async def open_client(network: str, contract_name: str, account_id: str) -> NearxPoolClient:
    return await NearxPoolClient.new(network, contract_name, account_id)


def log_command(name: str) -> None:
    logger.info("Running command", command=name)


# ------------------------------------------------------------------
# Output helpers
# ------------------------------------------------------------------


def print_fan_out(result: FanOutResult) -> None:
    console.print(
        f"{result.operation}: {result.succeeded}/{len(result.attempted)} validator calls succeeded"
    )
    for failure in result.failures:
        console.print(f"  [yellow]{escape(str(failure))}[/yellow]")


def print_drain(result: DrainResult) -> None:
    suffix = " (stopped at iteration cap)" if result.exhausted else ""
    console.print(f"{result.operation}: {result.iterations} iteration(s){suffix}")


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


async def display_validators(client: NearxPoolClient, opts: CommandOptions) -> None:
    table = Table(title="Validators")
    table.add_column("Account", style="cyan")
    table.add_column("Staked", justify="right")
    table.add_column("Unstaked", justify="right")
    table.add_column("Rewards epoch", justify="right")
    table.add_column("Unstake start", justify="right")
    table.add_column("Paused")

    for validator in await client.validators():
        table.add_row(
            validator.account_id,
            str(validator.staked),
            str(validator.unstaked),
            str(validator.last_asked_rewards_epoch_height),
            str(validator.last_unstake_start_epoch),
            "yes" if validator.paused else "no",
        )
    console.print(table)


async def display_epoch(client: NearxPoolClient, opts: CommandOptions) -> None:
    console.print(f"Current epoch: {await client.current_epoch()}")


async def display_balance(client: NearxPoolClient, opts: CommandOptions) -> None:
    staked, unstaked, total = await asyncio.gather(
        client.staked_balance(), client.unstaked_balance(), client.total_balance()
    )
    table = Table(title=f"Balance of {client.account_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("yoctoNEAR", style="green", justify="right")
    table.add_row("Staked", str(staked))
    table.add_row("Unstaked", str(unstaked))
    table.add_row("Total", str(total))
    console.print(table)


async def display_users(client: NearxPoolClient, opts: CommandOptions) -> None:
    users = await client.user_accounts(page_size=opts.page_size)
    table = Table(title=f"Accounts ({len(users)})")
    table.add_column("Account", style="cyan")
    table.add_column("NearX", justify="right")
    table.add_column("Staked", justify="right")
    table.add_column("Unstaked", justify="right")
    table.add_column("Withdrawable epoch", justify="right")
    for user in users:
        table.add_row(
            user.account_id,
            str(user.nearx_balance),
            str(user.staked_balance),
            str(user.unstaked_balance),
            str(user.withdrawable_epoch),
        )
    console.print(table)


async def sync_balances(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("sync balances")
    print_fan_out(await client.sync_balances())


async def epoch_autocompound_rewards(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("epoch autocompound")
    print_fan_out(await client.epoch_autocompound_rewards())


async def stake(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("epoch stake")
    print_drain(await client.epoch_stake())


async def unstake(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("epoch unstake")
    print_drain(await client.epoch_unstake())


async def withdraw(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("epoch withdraw")
    print_fan_out(await client.epoch_withdraw())


async def run_whole_epoch(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("epoch run")
    report = await client.run_whole_epoch(sync=opts.sync)
    if report.sync is not None:
        print_fan_out(report.sync)
    print_fan_out(report.autocompound)
    print_drain(report.stake)
    print_drain(report.unstake)
    print_fan_out(report.withdraw)


# The signing account becomes the owner; the contract rejects an owner,
# operator or treasury that is shared with another role.
async def run_init(client: NearxPoolClient, opts: CommandOptions) -> None:
    log_command("init")
    await client.init(opts.account_id, opts.operator_id, opts.treasury_id)


COMMANDS: dict[str, Callable[[NearxPoolClient, CommandOptions], Awaitable[None]]] = {
    "validators": display_validators,
    "epoch": display_epoch,
    "balance": display_balance,
    "users": display_users,
    "sync-balances": sync_balances,
    "autocompound": epoch_autocompound_rewards,
    "stake": stake,
    "unstake": unstake,
    "withdraw": withdraw,
    "all": run_whole_epoch,
    "init": run_init,
}

USAGE = f"""nearx NETWORK:CONTRACT ACCOUNT_ID COMMAND
    NETWORK: testnet | mainnet
    COMMAND: {' | '.join(COMMANDS)}"""


def fail(message: str | None = None) -> NoReturn:
    if message:
        err_console.print(f"[red]{escape(message)}[/red]")
    err_console.print(USAGE, highlight=False)
    raise typer.Exit(code=1)


async def _run(network: str, contract_name: str, command: str, opts: CommandOptions) -> None:
    async with await open_client(network, contract_name, opts.account_id) as client:
        await COMMANDS[command](client, opts)


@app.command()
def main(
    target: str = typer.Argument(..., help="NETWORK:CONTRACT (e.g., testnet:v2-nearx.staderlabs.testnet)"),
    account_id: str = typer.Argument(..., help="Signing account; the network suffix is added when missing"),
    command: Optional[str] = typer.Argument(None, help="Command to run"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1, help="Accounts per page (users)"),
    sync: bool = typer.Option(False, "--sync", help="Sync validator balances before an epoch run (all)"),
    operator_id: Optional[str] = typer.Option(None, "--operator", help="Operator account (init)"),
    treasury_id: Optional[str] = typer.Option(None, "--treasury", help="Treasury account (init)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="console or json"),
):
    """Run one NearX pool command."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, log_format or settings.log_format)

    if command is None:
        fail()
    if command not in COMMANDS:
        fail(f"Undefined command: {command}")

    try:
        network, contract_name = parse_target(target)
        account_id = canonical_account_id(network, account_id)
        if operator_id:
            operator_id = canonical_account_id(network, operator_id)
        if treasury_id:
            treasury_id = canonical_account_id(network, treasury_id)
    except ConfigurationError as e:
        fail(str(e))

    if command == "init" and not (operator_id and treasury_id):
        fail("init requires --operator and --treasury")

    opts = CommandOptions(
        account_id=account_id,
        page_size=page_size or settings.page_size,
        sync=sync,
        operator_id=operator_id,
        treasury_id=treasury_id,
    )

    try:
        asyncio.run(_run(network, contract_name, command, opts))
    except ConfigurationError as e:
        fail(str(e))
    except Exception as e:
        logger.error("Command failed", command=command, error=str(e), error_type=type(e).__name__)
        raise typer.Exit(code=1)

    console.print("Command successfully executed")


if __name__ == "__main__":
    app()
