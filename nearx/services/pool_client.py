"""NearX pool client: one session per network, contract and signing account."""

import asyncio
from pathlib import Path
from typing import Any

import structlog

from nearx.config import get_settings
from nearx.services._helpers import ceil_div
from nearx.services.contract import TGAS, NearxContract
from nearx.services.epoch import EpochOrchestrator
from nearx.services.errors import MissingAccountId
from nearx.services.keystore import KeyStore
from nearx.services.network import NetworkConfig, resolve_network
from nearx.services.schemas import (
    DrainResult,
    EpochRunReport,
    FanOutResult,
    SnapshotUser,
    ValidatorInfo,
)
from nearx.services.transport import ContractTransport, NearRpcTransport

logger = structlog.get_logger(__name__)

UPGRADE_GAS = 300 * TGAS


class NearxPoolClient:
    """Façade over the NearX contract for one account.

    Build it with :meth:`new`; the session is not mutated afterwards and every
    read goes to the contract. Use it as an async context manager, or call
    :meth:`close`, to release the RPC session.
    """

    def __init__(
        self,
        config: NetworkConfig,
        contract_name: str,
        account_id: str,
        contract: NearxContract,
        epoch: EpochOrchestrator | None = None,
    ):
        self.config = config
        self.contract_name = contract_name
        self.account_id = account_id
        self.contract = contract
        self.epoch = epoch or EpochOrchestrator(contract)

    @property
    def network(self) -> str:
        return self.config.network_id

    @classmethod
    async def new(
        cls,
        network: str,
        contract_name: str,
        account_id: str | None = None,
        key_store: KeyStore | None = None,
        transport: ContractTransport | None = None,
    ) -> "NearxPoolClient":
        """Resolve the network, pick the signing account and bind the contract.

        Without an explicit ``account_id`` the key store's signed-in account is
        used; a store without one (the near-cli directory) raises
        MissingAccountId.
        """
        config = resolve_network(network, key_store)
        if account_id is None:
            account_id = config.key_store.default_account_id(network)
        if account_id is None:
            raise MissingAccountId("When used from the CLI, the account id must be specified")

        if transport is None:
            transport = await NearRpcTransport.connect(config, account_id, contract_name)

        settings = get_settings()
        contract = NearxContract(transport)
        epoch = EpochOrchestrator(
            contract,
            max_concurrency=settings.epoch.max_concurrency,
            max_iterations=settings.epoch.max_iterations,
        )
        logger.debug("Pool client ready", network=network, contract=contract_name, account_id=account_id)
        return cls(config, contract_name, account_id, contract, epoch)

    async def close(self) -> None:
        """Release the transport's RPC session."""
        await self.contract.transport.close()

    async def __aenter__(self) -> "NearxPoolClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # View methods
    # ------------------------------------------------------------------

    async def staked_balance(self) -> int:
        return await self.contract.get_account_staked_balance(self.account_id)

    async def unstaked_balance(self) -> int:
        return await self.contract.get_account_unstaked_balance(self.account_id)

    async def total_balance(self) -> int:
        return await self.contract.get_account_total_balance(self.account_id)

    async def validators(self) -> list[ValidatorInfo]:
        return await self.contract.get_validators()

    async def current_epoch(self) -> int:
        return await self.contract.get_current_epoch()

    async def number_of_accounts(self) -> int:
        return await self.contract.get_number_of_accounts()

    async def user_accounts(self, page_size: int = 50) -> list[SnapshotUser]:
        """Every account snapshot; pages are fetched concurrently, returned in offset order."""
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        total = await self.contract.get_number_of_accounts()
        pages = await asyncio.gather(
            *(
                self.contract.get_snapshot_users(page * page_size, page_size)
                for page in range(ceil_div(total, page_size))
            )
        )
        return [user for page in pages for user in page]

    # ------------------------------------------------------------------
    # User-facing methods
    # ------------------------------------------------------------------

    async def stake(self, amount: int) -> Any:
        return await self.contract.deposit_and_stake(amount=amount)

    async def unstake(self, amount: int) -> Any:
        return await self.contract.unstake(amount)

    async def unstake_all(self) -> Any:
        return await self.contract.unstake_all()

    async def withdraw(self, amount: int) -> Any:
        return await self.contract.withdraw(amount)

    async def withdraw_all(self) -> Any:
        return await self.contract.withdraw_all()

    # ------------------------------------------------------------------
    # Owner methods
    # ------------------------------------------------------------------

    async def init(self, owner_account_id: str, operator_account_id: str, treasury_account_id: str) -> Any:
        return await self.contract.new(owner_account_id, operator_account_id, treasury_account_id)

    async def upgrade(self, wasm_path: Path | str) -> Any:
        code = Path(wasm_path).read_bytes()
        logger.info("Upgrading contract", contract=self.contract_name, code_size=len(code))
        return await self.contract.upgrade(code, gas=UPGRADE_GAS)

    # ------------------------------------------------------------------
    # Operator methods
    # ------------------------------------------------------------------

    async def epoch_autocompound_rewards(self) -> FanOutResult:
        return await self.epoch.epoch_autocompound_rewards()

    async def epoch_stake(self) -> DrainResult:
        return await self.epoch.epoch_stake()

    async def epoch_unstake(self) -> DrainResult:
        return await self.epoch.epoch_unstake()

    async def epoch_withdraw(self) -> FanOutResult:
        return await self.epoch.epoch_withdraw()

    async def sync_balances(self) -> FanOutResult:
        return await self.epoch.sync_balances()

    async def run_whole_epoch(self, sync: bool = False) -> EpochRunReport:
        return await self.epoch.run_whole_epoch(sync=sync)
