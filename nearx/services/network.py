"""Network endpoints, account-id canonicalization and CLI target parsing."""

from dataclasses import dataclass

from nearx.config import get_settings
from nearx.services.errors import InvalidNetwork, InvalidTarget
from nearx.services.keystore import FileSystemKeyStore, KeyStore

TESTNET = "testnet"
MAINNET = "mainnet"

ACCOUNT_SUFFIX: dict[str, str] = {
    MAINNET: "near",
    TESTNET: "testnet",
}


@dataclass(frozen=True)
class NetworkConfig:
    network_id: str
    node_url: str
    wallet_url: str
    helper_url: str
    explorer_url: str
    key_store: KeyStore


_ENDPOINTS: dict[str, dict[str, str]] = {
    TESTNET: {
        "node_url": "https://rpc.testnet.near.org",
        "wallet_url": "https://wallet.testnet.near.org",
        "helper_url": "https://helper.testnet.near.org",
        "explorer_url": "https://explorer.testnet.near.org",
    },
    MAINNET: {
        "node_url": "https://rpc.near.org",
        "wallet_url": "https://wallet.near.org",
        "helper_url": "https://helper.near.org",
        "explorer_url": "https://explorer.near.org",
    },
}


def _require_network(network: str) -> None:
    if network not in _ENDPOINTS:
        raise InvalidNetwork(network)


def resolve_network(network: str, key_store: KeyStore | None = None) -> NetworkConfig:
    """Endpoints for ``network``; credentials default to the near-cli directory."""
    _require_network(network)
    if key_store is None:
        key_store = FileSystemKeyStore(get_settings().credentials_dir)
    return NetworkConfig(network_id=network, key_store=key_store, **_ENDPOINTS[network])


def canonical_account_id(network: str, account_id: str) -> str:
    """Append the network's top-level account unless the id already has a suffix.

    >>> canonical_account_id("testnet", "alice")
    'alice.testnet'
    >>> canonical_account_id("mainnet", "alice.near")
    'alice.near'
    """
    _require_network(network)
    account_id = account_id.strip()
    if "." in account_id:
        return account_id
    return f"{account_id}.{ACCOUNT_SUFFIX[network]}"


def parse_target(target: str) -> tuple[str, str]:
    """Parse ``NETWORK:CONTRACT`` into a validated network and canonical contract id."""
    parts = target.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidTarget(
            f"Invalid target '{target}'. Expected format: NETWORK:CONTRACT (e.g., testnet:nearx)"
        )
    network, contract_name = parts
    return network, canonical_account_id(network, contract_name)
