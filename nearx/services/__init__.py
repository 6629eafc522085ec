"""Service layer: network resolution, contract binding, pool client and epoch operations."""

from nearx.services.contract import CHANGE_METHODS, DEFAULT_GAS, VIEW_METHODS, NearxContract
from nearx.services.epoch import EPOCH_GAS, EPOCH_TO_UNBOUND, EpochOrchestrator, is_withdrawable
from nearx.services.errors import (
    ConfigurationError,
    ContractCallError,
    ContractError,
    InvalidNetwork,
    InvalidTarget,
    KeyStoreError,
    MissingAccountId,
    NearxError,
    UnknownContractMethod,
)
from nearx.services.keystore import FileSystemKeyStore, InMemoryKeyStore, KeyPair, KeyStore
from nearx.services.network import (
    NetworkConfig,
    canonical_account_id,
    parse_target,
    resolve_network,
)
from nearx.services.pool_client import UPGRADE_GAS, NearxPoolClient
from nearx.services.transport import ContractTransport, NearRpcTransport

__all__ = [
    # Network
    "NetworkConfig",
    "canonical_account_id",
    "parse_target",
    "resolve_network",
    # Credentials
    "FileSystemKeyStore",
    "InMemoryKeyStore",
    "KeyPair",
    "KeyStore",
    # Contract
    "CHANGE_METHODS",
    "DEFAULT_GAS",
    "VIEW_METHODS",
    "ContractTransport",
    "NearRpcTransport",
    "NearxContract",
    # Client
    "NearxPoolClient",
    "UPGRADE_GAS",
    # Epoch
    "EPOCH_GAS",
    "EPOCH_TO_UNBOUND",
    "EpochOrchestrator",
    "is_withdrawable",
    # Errors
    "ConfigurationError",
    "ContractCallError",
    "ContractError",
    "InvalidNetwork",
    "InvalidTarget",
    "KeyStoreError",
    "MissingAccountId",
    "NearxError",
    "UnknownContractMethod",
]
