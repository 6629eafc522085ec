"""NearX staking-pool operator client."""

from nearx.services import NearxPoolClient, canonical_account_id, resolve_network

__version__ = "0.1.0"

__all__ = ["NearxPoolClient", "__version__", "canonical_account_id", "resolve_network"]
