"""Shared utilities for the service layer."""

import base64
import json

# Arguments of a contract method, always passed by name.
JsonDict = dict[str, object]


def to_int(raw: object) -> int:
    """Parse a U128/U64 JSON value (decimal string or number) into an int."""
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise TypeError(f"expected an integer amount, got {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        return int(raw.strip() or "0")
    raise TypeError(f"expected an integer amount, got {raw!r}")


def to_u128(amount: int) -> str:
    """Serialize an amount the way near-sdk's U128 expects it."""
    if amount < 0:
        raise ValueError("amount must be non-negative")
    return str(int(amount))


def decode_success_value(encoded: str | None) -> object:
    """Decode a base64 ``SuccessValue`` from an execution outcome.

    Empty values (methods returning unit) decode to None; non-JSON payloads are
    returned as text.
    """
    if not encoded:
        return None
    raw: bytes = base64.b64decode(encoded)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode("utf-8", errors="replace")


def ceil_div(total: int, size: int) -> int:
    return -(-total // size)
