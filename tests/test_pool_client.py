"""Tests for nearx.services.pool_client."""

import asyncio
from pathlib import Path

import pytest

from nearx.services.errors import InvalidNetwork, MissingAccountId
from nearx.services.keystore import FileSystemKeyStore, InMemoryKeyStore
from nearx.services.pool_client import UPGRADE_GAS, NearxPoolClient

from tests.conftest import ACCOUNT, CONTRACT, FakeTransport, validator_json


class TestNew:
    def test_explicit_account(self, transport: FakeTransport, tmp_path: Path) -> None:
        client = asyncio.run(
            NearxPoolClient.new(
                "testnet", CONTRACT, "alice.testnet", key_store=FileSystemKeyStore(tmp_path), transport=transport
            )
        )
        assert client.account_id == "alice.testnet"
        assert client.network == "testnet"
        assert client.contract_name == CONTRACT
        assert client.config.node_url == "https://rpc.testnet.near.org"
        assert client.contract.transport is transport

    def test_signed_in_account_from_key_store(self, transport: FakeTransport) -> None:
        store = InMemoryKeyStore(default_account="wallet-user.near")
        client = asyncio.run(NearxPoolClient.new("mainnet", "nearx.near", key_store=store, transport=transport))
        assert client.account_id == "wallet-user.near"

    def test_missing_account_id(self, transport: FakeTransport, tmp_path: Path) -> None:
        with pytest.raises(MissingAccountId):
            asyncio.run(
                NearxPoolClient.new("testnet", CONTRACT, key_store=FileSystemKeyStore(tmp_path), transport=transport)
            )

    def test_invalid_network(self, transport: FakeTransport) -> None:
        with pytest.raises(InvalidNetwork):
            asyncio.run(NearxPoolClient.new("betanet", CONTRACT, "alice", transport=transport))


class TestViews:
    def test_balances_use_bound_account(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_account_staked_balance"] = "100"
        transport.views["get_account_total_balance"] = "150"
        transport.views["get_account_unstaked_balance"] = "50"

        assert asyncio.run(client.staked_balance()) == 100
        assert asyncio.run(client.total_balance()) == 150
        assert asyncio.run(client.unstaked_balance()) == 50
        assert {args["account_id"] for _, _, args in transport.calls} == {ACCOUNT}

    def test_validators_keep_contract_order(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_validators"] = [
            validator_json("z.poolv1.testnet", paused=True),
            validator_json("a.poolv1.testnet"),
        ]
        assert [v.account_id for v in asyncio.run(client.validators())] == [
            "z.poolv1.testnet",
            "a.poolv1.testnet",
        ]

    def test_current_epoch(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_current_epoch"] = "42"
        assert asyncio.run(client.current_epoch()) == 42


class TestUserAccounts:
    def test_pages_in_offset_order(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_number_of_accounts"] = 120

        async def _page(args: dict[str, int]) -> list[dict[str, object]]:
            start = args["from"]
            # Earlier pages finish last.
            for _ in range(300 - start):
                await asyncio.sleep(0)
            end = min(start + args["length"], 120)
            return [{"account_id": f"user{i}.testnet", "nearx_balance": str(i)} for i in range(start, end)]

        transport.views["get_snapshot_users"] = _page

        users = asyncio.run(client.user_accounts(page_size=50))

        page_args = [args for _, method, args in transport.calls if method == "get_snapshot_users"]
        assert page_args == [
            {"from": 0, "length": 50},
            {"from": 50, "length": 50},
            {"from": 100, "length": 50},
        ]
        assert [u.account_id for u in users] == [f"user{i}.testnet" for i in range(120)]
        assert users[119].nearx_balance == 119

    def test_exact_multiple(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_number_of_accounts"] = 100
        transport.views["get_snapshot_users"] = []
        asyncio.run(client.user_accounts(page_size=50))
        assert len([c for c in transport.calls if c[1] == "get_snapshot_users"]) == 2

    def test_no_accounts(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.views["get_number_of_accounts"] = 0
        assert asyncio.run(client.user_accounts()) == []
        assert [c[1] for c in transport.calls] == ["get_number_of_accounts"]

    def test_invalid_page_size(self, client: NearxPoolClient) -> None:
        with pytest.raises(ValueError):
            asyncio.run(client.user_accounts(page_size=0))


class TestChangeCalls:
    def test_stake_attaches_deposit(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        asyncio.run(client.stake(3 * 10**24))
        assert transport.change_calls() == [("deposit_and_stake", {})]
        assert transport.call_options[0][2] == 3 * 10**24

    def test_unstake_and_withdraw(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        asyncio.run(client.unstake(10))
        asyncio.run(client.withdraw_all())
        assert transport.change_calls() == [("unstake", {"amount": "10"}), ("withdraw_all", {})]

    def test_init(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        asyncio.run(client.init("owner.testnet", "operator.testnet", "treasury.testnet"))
        assert transport.change_calls() == [
            (
                "new",
                {
                    "owner_account_id": "owner.testnet",
                    "operator_account_id": "operator.testnet",
                    "treasury_account_id": "treasury.testnet",
                },
            )
        ]

    def test_upgrade_reads_wasm(self, client: NearxPoolClient, transport: FakeTransport, tmp_path: Path) -> None:
        wasm = tmp_path / "near_x.wasm"
        wasm.write_bytes(b"\x00asm\x01\x00\x00\x00")
        asyncio.run(client.upgrade(wasm))
        assert transport.change_calls() == [("upgrade", b"\x00asm\x01\x00\x00\x00")]
        assert transport.call_options[0][1] == UPGRADE_GAS

    def test_operator_calls_delegate(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        transport.changes["epoch_stake"] = False
        result = asyncio.run(client.epoch_stake())
        assert result.iterations == 0
        assert transport.change_calls() == [("epoch_stake", {})]


class TestLifecycle:
    def test_close_releases_transport(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        asyncio.run(client.close())
        assert transport.closed is True

    def test_context_manager_closes_on_error(self, client: NearxPoolClient, transport: FakeTransport) -> None:
        async def _run() -> None:
            async with client:
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            asyncio.run(_run())
        assert transport.closed is True
