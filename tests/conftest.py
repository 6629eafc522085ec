"""Shared fixtures: a scripted contract transport and a client bound to it."""

import inspect
from collections.abc import Callable
from typing import Any

import pytest

from nearx.services.contract import NearxContract
from nearx.services.epoch import EpochOrchestrator
from nearx.services.keystore import InMemoryKeyStore
from nearx.services.network import resolve_network
from nearx.services.pool_client import NearxPoolClient

CONTRACT: str = "v2-nearx.staderlabs.testnet"
ACCOUNT: str = "operator.testnet"

Handler = Callable[[Any], Any]


class FakeTransport:
    """Answers view/change calls from per-method handlers and records every call.

    A handler is either a plain value or a callable taking the call args; it may
    return an awaitable, and an Exception result is raised.
    """

    def __init__(self, contract_id: str = CONTRACT):
        self.contract_id = contract_id
        self.views: dict[str, Any] = {}
        self.changes: dict[str, Any] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.call_options: list[tuple[str, int, int]] = []
        self.closed = False

    async def _answer(self, handler: Any, args: Any) -> Any:
        value = handler(args) if callable(handler) else handler
        if inspect.isawaitable(value):
            value = await value
        if isinstance(value, Exception):
            raise value
        return value

    async def view(self, method: str, args: dict[str, object]) -> Any:
        self.calls.append(("view", method, args))
        return await self._answer(self.views[method], args)

    async def call(self, method: str, args: Any, *, gas: int, amount: int) -> Any:
        self.calls.append(("call", method, args))
        self.call_options.append((method, gas, amount))
        return await self._answer(self.changes.get(method), args)

    async def close(self) -> None:
        self.closed = True

    def change_calls(self, method: str | None = None) -> list[tuple[str, Any]]:
        return [
            (name, args)
            for kind, name, args in self.calls
            if kind == "call" and (method is None or name == method)
        ]


def validator_json(
    account_id: str,
    unstaked: int = 0,
    last_unstake_start_epoch: int = 0,
    staked: int = 0,
    paused: bool = False,
) -> dict[str, object]:
    return {
        "account_id": account_id,
        "staked": str(staked),
        "unstaked": str(unstaked),
        "last_asked_rewards_epoch_height": "0",
        "last_unstake_start_epoch": str(last_unstake_start_epoch),
        "paused": paused,
    }


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def contract(transport: FakeTransport) -> NearxContract:
    return NearxContract(transport)


@pytest.fixture()
def client(transport: FakeTransport, contract: NearxContract) -> NearxPoolClient:
    config = resolve_network("testnet", InMemoryKeyStore())
    return NearxPoolClient(config, CONTRACT, ACCOUNT, contract, EpochOrchestrator(contract))
