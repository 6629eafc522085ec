"""Shared exception hierarchy for the NearX client."""


class NearxError(Exception):
    """Base exception for every error raised by this package."""


# ── Configuration ─────────────────────────────────────────────────────────────


class ConfigurationError(NearxError):
    """Fatal start-up error: bad arguments, unknown network, missing account."""


class InvalidNetwork(ConfigurationError):
    """Network tag is not one of the recognised networks."""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Invalid network: {network!r} (expected 'testnet' or 'mainnet')")


class InvalidTarget(ConfigurationError):
    """The NETWORK:CONTRACT token could not be parsed."""


class MissingAccountId(ConfigurationError):
    """No account id was given and the key store has no signed-in account."""


class KeyStoreError(ConfigurationError):
    """A credential file exists but cannot be read."""


# ── Contract ──────────────────────────────────────────────────────────────────


class ContractError(NearxError):
    """Base exception for contract binding errors."""


class UnknownContractMethod(ContractError):
    """Method name is not part of the declared view/change method sets."""


class ContractCallError(ContractError):
    """The transaction outcome reported a ``Failure`` status for ``method``."""

    def __init__(self, method: str, message: str):
        self.method = method
        super().__init__(f"{method}: {message}")
