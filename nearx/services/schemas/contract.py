"""View models returned by the NearX contract."""

from dataclasses import dataclass
from typing import Any, Mapping

from nearx.services._helpers import to_int


@dataclass(frozen=True)
class ValidatorInfo:
    account_id: str
    staked: int
    unstaked: int
    last_asked_rewards_epoch_height: int
    last_unstake_start_epoch: int
    paused: bool

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ValidatorInfo":
        return cls(
            account_id=str(data["account_id"]),
            staked=to_int(data.get("staked")),
            unstaked=to_int(data.get("unstaked")),
            last_asked_rewards_epoch_height=to_int(data.get("last_asked_rewards_epoch_height")),
            last_unstake_start_epoch=to_int(data.get("last_unstake_start_epoch")),
            paused=bool(data.get("paused", False)),
        )


@dataclass(frozen=True)
class SnapshotUser:
    account_id: str
    unstaked_balance: int = 0
    staked_balance: int = 0
    nearx_balance: int = 0
    withdrawable_epoch: int = 0

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SnapshotUser":
        return cls(
            account_id=str(data["account_id"]),
            unstaked_balance=to_int(data.get("unstaked_balance")),
            staked_balance=to_int(data.get("staked_balance")),
            nearx_balance=to_int(data.get("nearx_balance")),
            withdrawable_epoch=to_int(data.get("withdrawable_epoch")),
        )


@dataclass(frozen=True)
class HumanReadableAccount:
    account_id: str
    unstaked_balance: int
    staked_balance: int
    can_withdraw: bool

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "HumanReadableAccount":
        return cls(
            account_id=str(data["account_id"]),
            unstaked_balance=to_int(data.get("unstaked_balance")),
            staked_balance=to_int(data.get("staked_balance")),
            can_withdraw=bool(data.get("can_withdraw", False)),
        )
