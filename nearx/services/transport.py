"""RPC transport between the contract binding and a NEAR node."""

from typing import Any, Protocol

import structlog
from py_near import transactions
from py_near.account import Account

from nearx.services._helpers import JsonDict, decode_success_value
from nearx.services.errors import ContractCallError
from nearx.services.network import NetworkConfig

logger = structlog.get_logger(__name__)


class ContractTransport(Protocol):
    contract_id: str

    async def view(self, method: str, args: JsonDict) -> Any: ...

    async def call(self, method: str, args: JsonDict | bytes, *, gas: int, amount: int) -> Any: ...

    async def close(self) -> None: ...


class NearRpcTransport:
    """Signs and submits contract calls through py-near.

    SDK exceptions propagate unchanged; nothing here retries.
    """

    def __init__(self, account: Account, contract_id: str):
        self._account = account
        self.contract_id = contract_id

    @classmethod
    async def connect(cls, config: NetworkConfig, account_id: str, contract_id: str) -> "NearRpcTransport":
        key = config.key_store.get_key(config.network_id, account_id)
        if key is None:
            logger.warning(
                "No credentials for account, change calls will be rejected",
                account_id=account_id,
                network=config.network_id,
            )
        account = Account(
            account_id,
            key.private_key if key else None,
            rpc_addr=config.node_url,
        )
        await account.startup()
        logger.debug("Connected", rpc_url=config.node_url, account_id=account_id, contract=contract_id)
        return cls(account, contract_id)

    async def view(self, method: str, args: JsonDict) -> Any:
        result = await self._account.view_function(self.contract_id, method, args)
        return result.result

    async def call(self, method: str, args: JsonDict | bytes, *, gas: int, amount: int) -> Any:
        if isinstance(args, bytes):
            # Raw input (contract code) must not be JSON encoded.
            action = transactions.create_function_call_action(method, args, gas, amount)
            outcome = await self._account.sign_and_submit_tx(self.contract_id, [action])
        else:
            outcome = await self._account.function_call(
                self.contract_id, method, args, gas=gas, amount=amount
            )
        return self._outcome_value(method, outcome)

    async def close(self) -> None:
        await self._account.shutdown()
        logger.debug("Disconnected", contract=self.contract_id)

    @staticmethod
    def _outcome_value(method: str, outcome: Any) -> Any:
        status = getattr(outcome, "status", None) or {}
        if "Failure" in status:
            raise ContractCallError(method, str(status["Failure"]))
        return decode_success_value(status.get("SuccessValue"))
