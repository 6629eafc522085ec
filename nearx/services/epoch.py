"""Epoch operations: per-validator sweeps and drain loops run by the operator.

Fan-out sweeps (autocompound, withdraw, balance sync) issue one call per
validator, wait for every call to settle and report the failures instead of
raising them. Drain loops (stake, unstake) call the contract one step at a
time until it reports there is nothing left to do; their errors propagate.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from nearx.services.contract import TGAS, NearxContract
from nearx.services.schemas import (
    DrainResult,
    EpochRunReport,
    FanOutResult,
    ValidatorFailure,
    ValidatorInfo,
)

logger = structlog.get_logger(__name__)

# Epochs an unstaked balance stays locked on the validator before it can be withdrawn.
EPOCH_TO_UNBOUND = 4

# Gas attached to every operator call; they all fan out into cross-contract calls.
EPOCH_GAS = 300 * TGAS


def is_withdrawable(validator: ValidatorInfo, current_epoch: int) -> bool:
    return (
        validator.unstaked > 0
        and validator.last_unstake_start_epoch + EPOCH_TO_UNBOUND <= current_epoch
    )


class EpochOrchestrator:
    """Runs the operator's epoch steps against a bound contract."""

    def __init__(
        self,
        contract: NearxContract,
        max_concurrency: int | None = None,
        max_iterations: int | None = None,
    ):
        self.contract = contract
        self.max_concurrency = max_concurrency
        self.max_iterations = max_iterations

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    async def _fan_out(
        self,
        operation: str,
        validators: list[str],
        call: Callable[[str], Awaitable[Any]],
    ) -> FanOutResult:
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def _one(validator: str) -> Any:
            if semaphore is None:
                return await call(validator)
            async with semaphore:
                return await call(validator)

        outcomes = await asyncio.gather(*(_one(v) for v in validators), return_exceptions=True)

        result = FanOutResult(operation=operation, attempted=list(validators))
        for validator, outcome in zip(validators, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(
                    "Validator call failed",
                    operation=operation,
                    validator=validator,
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )
                result.failures.append(ValidatorFailure(validator=validator, reason=outcome))
            elif isinstance(outcome, BaseException):
                raise outcome

        logger.info(
            "Validator sweep finished",
            operation=operation,
            attempted=len(result.attempted),
            failed=len(result.failures),
        )
        return result

    async def _drain(self, operation: str, step: Callable[[], Awaitable[Any]]) -> DrainResult:
        iterations = 0
        while True:
            if self.max_iterations is not None and iterations >= self.max_iterations:
                logger.warning(
                    "Drain loop stopped at iteration cap",
                    operation=operation,
                    iterations=iterations,
                )
                return DrainResult(operation=operation, iterations=iterations, exhausted=True)
            if not await step():
                break
            iterations += 1

        logger.info("Drain finished", operation=operation, iterations=iterations)
        return DrainResult(operation=operation, iterations=iterations)

    async def _validator_ids(self) -> list[str]:
        return [v.account_id for v in await self.contract.get_validators()]

    # ------------------------------------------------------------------
    # Epoch steps
    # ------------------------------------------------------------------

    async def epoch_autocompound_rewards(self) -> FanOutResult:
        validators = await self._validator_ids()
        return await self._fan_out(
            "epoch autocompound",
            validators,
            lambda v: self.contract.epoch_autocompound_rewards(v, gas=EPOCH_GAS),
        )

    async def epoch_stake(self) -> DrainResult:
        return await self._drain("epoch stake", lambda: self.contract.epoch_stake(gas=EPOCH_GAS))

    async def epoch_unstake(self) -> DrainResult:
        return await self._drain("epoch unstake", lambda: self.contract.epoch_unstake(gas=EPOCH_GAS))

    async def epoch_withdraw(self) -> FanOutResult:
        validators = await self.contract.get_validators()
        current_epoch = await self.contract.get_current_epoch()
        ready = [v.account_id for v in validators if is_withdrawable(v, current_epoch)]
        logger.debug(
            "Withdrawable validators",
            current_epoch=current_epoch,
            selected=len(ready),
            total=len(validators),
        )
        return await self._fan_out(
            "epoch withdraw",
            ready,
            lambda v: self.contract.epoch_withdraw(v, gas=EPOCH_GAS),
        )

    async def sync_balances(self) -> FanOutResult:
        validators = await self._validator_ids()
        return await self._fan_out(
            "sync balances",
            validators,
            lambda v: self.contract.sync_balance_from_validator(v, gas=EPOCH_GAS),
        )

    async def run_whole_epoch(self, sync: bool = False) -> EpochRunReport:
        """Autocompound, stake, unstake, then withdraw; each step settles before the next.

        Balance sync is not part of a regular epoch run and only happens, first,
        when ``sync`` is set.
        """
        synced = await self.sync_balances() if sync else None
        autocompound = await self.epoch_autocompound_rewards()
        stake = await self.epoch_stake()
        unstake = await self.epoch_unstake()
        withdraw = await self.epoch_withdraw()
        return EpochRunReport(
            autocompound=autocompound,
            stake=stake,
            unstake=unstake,
            withdraw=withdraw,
            sync=synced,
        )
