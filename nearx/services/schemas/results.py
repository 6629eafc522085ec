"""Result dataclasses returned by epoch operations."""

from dataclasses import dataclass, field


@dataclass
class ValidatorFailure:
    validator: str
    reason: BaseException

    def __str__(self) -> str:
        return f"{self.validator}: {type(self.reason).__name__}: {self.reason}"


@dataclass
class FanOutResult:
    """Outcome of one per-validator batch. Failures are informational."""

    operation: str
    attempted: list[str] = field(default_factory=list)
    failures: list[ValidatorFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.attempted) - len(self.failures)

    @property
    def reasons(self) -> list[BaseException]:
        return [failure.reason for failure in self.failures]


@dataclass
class DrainResult:
    operation: str
    iterations: int
    exhausted: bool = False


@dataclass
class EpochRunReport:
    autocompound: FanOutResult
    stake: DrainResult
    unstake: DrainResult
    withdraw: FanOutResult
    sync: FanOutResult | None = None

    @property
    def failures(self) -> list[ValidatorFailure]:
        batches = [self.sync, self.autocompound, self.withdraw]
        return [failure for batch in batches if batch is not None for failure in batch.failures]
