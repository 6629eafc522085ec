"""Credential stores used to sign change calls.

The on-disk layout is the one written by near-cli:
``<root>/<network>/<account_id>.json`` holding ``account_id``, ``public_key``
and ``private_key``.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

import structlog

from nearx.services.errors import KeyStoreError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class KeyPair:
    account_id: str
    public_key: str
    private_key: str

    def __repr__(self) -> str:
        return f"KeyPair(account_id={self.account_id!r}, public_key={self.public_key!r})"


class KeyStore(Protocol):
    def get_key(self, network: str, account_id: str) -> KeyPair | None: ...

    def default_account_id(self, network: str) -> str | None: ...


class FileSystemKeyStore:
    """Unencrypted near-cli key store rooted at a per-user directory."""

    def __init__(self, root: Path | str):
        self.root = Path(root).expanduser()

    def key_path(self, network: str, account_id: str) -> Path:
        return self.root / network / f"{account_id}.json"

    def get_key(self, network: str, account_id: str) -> KeyPair | None:
        path = self.key_path(network, account_id)
        if not path.exists():
            logger.debug("No credentials file", path=str(path))
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise KeyStoreError(f"Cannot read credentials file {path}: {e}") from e

        if not isinstance(data, dict):
            raise KeyStoreError(f"Credentials file {path} is not a JSON object")
        private_key = data.get("private_key") or data.get("secret_key")
        if not private_key:
            raise KeyStoreError(f"Credentials file {path} has no private_key")
        return KeyPair(
            account_id=str(data.get("account_id") or account_id),
            public_key=str(data.get("public_key", "")),
            private_key=str(private_key),
        )

    def default_account_id(self, network: str) -> str | None:
        # A CLI session always names the signing account explicitly.
        return None


class InMemoryKeyStore:
    """Credentials injected by the host application, e.g. a signed-in wallet session."""

    def __init__(
        self,
        keys: Mapping[tuple[str, str], KeyPair] | None = None,
        default_account: str | None = None,
    ):
        self._keys: dict[tuple[str, str], KeyPair] = dict(keys or {})
        self._default_account = default_account

    def set_key(self, network: str, key: KeyPair) -> None:
        self._keys[(network, key.account_id)] = key

    def get_key(self, network: str, account_id: str) -> KeyPair | None:
        return self._keys.get((network, account_id))

    def default_account_id(self, network: str) -> str | None:
        return self._default_account
