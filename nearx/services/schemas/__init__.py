"""Shared dataclasses for NearX services."""

from nearx.services.schemas.contract import (
    HumanReadableAccount,
    SnapshotUser,
    ValidatorInfo,
)
from nearx.services.schemas.results import (
    DrainResult,
    EpochRunReport,
    FanOutResult,
    ValidatorFailure,
)

__all__ = [
    # Contract view models
    "HumanReadableAccount",
    "SnapshotUser",
    "ValidatorInfo",
    # Result schemas
    "DrainResult",
    "EpochRunReport",
    "FanOutResult",
    "ValidatorFailure",
]
