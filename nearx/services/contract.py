"""Typed binding for the NearX staking-pool contract."""

from typing import Any

from nearx.services._helpers import JsonDict, to_int, to_u128
from nearx.services.errors import UnknownContractMethod
from nearx.services.schemas import HumanReadableAccount, SnapshotUser, ValidatorInfo
from nearx.services.transport import ContractTransport

TGAS = 1_000_000_000_000

# Default budget for user-facing change calls.
DEFAULT_GAS = 30 * TGAS

VIEW_METHODS: frozenset[str] = frozenset(
    {
        # Fungible token
        "ft_balance_of",
        # Staking pool
        "get_account_staked_balance",
        "get_account_unstaked_balance",
        "get_account_total_balance",
        # Operator
        "get_validators",
        "get_number_of_accounts",
        "get_snapshot_users",
        "get_accounts",
        # Utils
        "get_current_epoch",
    }
)

CHANGE_METHODS: frozenset[str] = frozenset(
    {
        "new",
        # Staking pool
        "deposit",
        "deposit_and_stake",
        "deposit_and_stake_direct_stake",
        "stake",
        "withdraw",
        "withdraw_all",
        "unstake",
        "unstake_all",
        # Operator
        "epoch_stake",
        "epoch_autocompound_rewards",
        "epoch_unstake",
        "epoch_withdraw",
        "sync_balance_from_validator",
        "upgrade",
    }
)


class NearxContract:
    """Contract proxy bound to one signing account.

    View methods never carry gas or a deposit; change methods accept a gas
    budget and an attached deposit (yoctoNEAR). Errors from the transport are
    not caught here.
    """

    def __init__(self, transport: ContractTransport):
        self.transport = transport

    @property
    def contract_id(self) -> str:
        return self.transport.contract_id

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def view(self, method: str, args: JsonDict | None = None) -> Any:
        if method not in VIEW_METHODS:
            raise UnknownContractMethod(f"'{method}' is not a declared view method")
        return await self.transport.view(method, args or {})

    async def call(
        self,
        method: str,
        args: JsonDict | bytes | None = None,
        *,
        gas: int | None = None,
        amount: int | None = None,
    ) -> Any:
        if method not in CHANGE_METHODS:
            raise UnknownContractMethod(f"'{method}' is not a declared change method")
        return await self.transport.call(
            method,
            {} if args is None else args,
            gas=DEFAULT_GAS if gas is None else gas,
            amount=amount or 0,
        )

    # ------------------------------------------------------------------
    # View methods
    # ------------------------------------------------------------------

    async def ft_balance_of(self, account_id: str) -> int:
        return to_int(await self.view("ft_balance_of", {"account_id": account_id}))

    async def get_account_staked_balance(self, account_id: str) -> int:
        return to_int(await self.view("get_account_staked_balance", {"account_id": account_id}))

    async def get_account_unstaked_balance(self, account_id: str) -> int:
        return to_int(await self.view("get_account_unstaked_balance", {"account_id": account_id}))

    async def get_account_total_balance(self, account_id: str) -> int:
        return to_int(await self.view("get_account_total_balance", {"account_id": account_id}))

    async def get_validators(self) -> list[ValidatorInfo]:
        raw = await self.view("get_validators")
        return [ValidatorInfo.from_json(item) for item in raw or []]

    async def get_number_of_accounts(self) -> int:
        return to_int(await self.view("get_number_of_accounts"))

    async def get_snapshot_users(self, from_index: int, length: int) -> list[SnapshotUser]:
        raw = await self.view("get_snapshot_users", {"from": from_index, "length": length})
        return [SnapshotUser.from_json(item) for item in raw or []]

    async def get_accounts(self, from_index: int, limit: int) -> list[HumanReadableAccount]:
        raw = await self.view("get_accounts", {"from_index": from_index, "limit": limit})
        return [HumanReadableAccount.from_json(item) for item in raw or []]

    async def get_current_epoch(self) -> int:
        return to_int(await self.view("get_current_epoch"))

    # ------------------------------------------------------------------
    # Change methods: staking pool
    # ------------------------------------------------------------------

    async def new(
        self,
        owner_account_id: str,
        operator_account_id: str,
        treasury_account_id: str,
        *,
        gas: int | None = None,
    ) -> Any:
        return await self.call(
            "new",
            {
                "owner_account_id": owner_account_id,
                "operator_account_id": operator_account_id,
                "treasury_account_id": treasury_account_id,
            },
            gas=gas,
        )

    async def deposit(self, *, amount: int, gas: int | None = None) -> Any:
        return await self.call("deposit", gas=gas, amount=amount)

    async def deposit_and_stake(self, *, amount: int, gas: int | None = None) -> Any:
        return await self.call("deposit_and_stake", gas=gas, amount=amount)

    async def deposit_and_stake_direct_stake(self, *, amount: int, gas: int | None = None) -> Any:
        return await self.call("deposit_and_stake_direct_stake", gas=gas, amount=amount)

    async def stake(self, amount: int, *, gas: int | None = None) -> Any:
        return await self.call("stake", {"amount": to_u128(amount)}, gas=gas)

    async def unstake(self, amount: int, *, gas: int | None = None) -> Any:
        return await self.call("unstake", {"amount": to_u128(amount)}, gas=gas)

    async def unstake_all(self, *, gas: int | None = None) -> Any:
        return await self.call("unstake_all", gas=gas)

    async def withdraw(self, amount: int, *, gas: int | None = None) -> Any:
        return await self.call("withdraw", {"amount": to_u128(amount)}, gas=gas)

    async def withdraw_all(self, *, gas: int | None = None) -> Any:
        return await self.call("withdraw_all", gas=gas)

    # ------------------------------------------------------------------
    # Change methods: operator
    # ------------------------------------------------------------------

    async def epoch_stake(self, *, gas: int | None = None) -> Any:
        return await self.call("epoch_stake", gas=gas)

    async def epoch_unstake(self, *, gas: int | None = None) -> Any:
        return await self.call("epoch_unstake", gas=gas)

    async def epoch_autocompound_rewards(self, validator: str, *, gas: int | None = None) -> Any:
        return await self.call("epoch_autocompound_rewards", {"validator": validator}, gas=gas)

    async def epoch_withdraw(self, validator: str, *, gas: int | None = None) -> Any:
        return await self.call("epoch_withdraw", {"validator": validator}, gas=gas)

    async def sync_balance_from_validator(self, validator_id: str, *, gas: int | None = None) -> Any:
        return await self.call("sync_balance_from_validator", {"validator_id": validator_id}, gas=gas)

    async def upgrade(self, code: bytes, *, gas: int | None = None) -> Any:
        return await self.call("upgrade", code, gas=gas)
