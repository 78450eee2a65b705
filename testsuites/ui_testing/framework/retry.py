# ================================================================================
# Retry Module
# ================================================================================
#
# Bounded retry for flaky UI actions, modelled as a small state machine:
#
#   Attempting(1) --ok--> Succeeded
#   Attempting(n) --err, n < max--> sleep(backoff) --> Attempting(n + 1)
#   Attempting(max) --err--> Failed(max)
#
# `run_with_retry` never raises for an action failure; it returns an outcome
# (`Success` or `ExhaustedFailure`) and `outcome.unwrap()` turns exhaustion
# into an `InteractionExhaustedError` chained to the last underlying error.
#
# ================================================================================

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from onlytests_tools.common.logger import LogContext, StructuredLogger


T = TypeVar("T")


class InteractionError(Exception):
    """Base class for interaction-layer failures."""


class InteractionTimeoutError(InteractionError):
    """An awaited browser action did not settle within its timeout."""

    def __init__(self, message: str, timeout: Optional[int] = None) -> None:
        super().__init__(message)
        self.timeout = timeout


class InteractionExhaustedError(InteractionError):
    """
    All attempts of a required action failed.

    Attributes:
        action: Action label, e.g. CLICK
        target: Description of the element acted on
        attempts: Number of attempts made
        last_error: The error raised by the final attempt
    """

    def __init__(self, action: str, target: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"{action} on {target} failed after {attempts} attempt(s): {last_error}")
        self.action = action
        self.target = target
        self.attempts = attempts
        self.last_error = last_error

    @property
    def retry_count(self) -> int:
        return self.attempts


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry behaviour for click/fill style actions.

    Attributes:
        max_attempts: Total attempts, including the first one (>= 1)
        backoff_ms: Fixed pause between attempts in milliseconds (>= 0)
    """

    max_attempts: int = 3
    backoff_ms: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got: {self.max_attempts}")
        if self.backoff_ms < 0:
            raise ValueError(f"backoff_ms must be >= 0, got: {self.backoff_ms}")


class AttemptState(Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    attempts: int

    state = AttemptState.SUCCEEDED

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class ExhaustedFailure:
    last_error: BaseException
    attempts: int
    action: str = "action"
    target: str = ""

    state = AttemptState.FAILED

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        raise InteractionExhaustedError(self.action, self.target, self.attempts, self.last_error) from self.last_error


RetryOutcome = Union[Success[T], ExhaustedFailure]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def run_with_retry(
    action: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    label: str,
    target: str,
    log: StructuredLogger,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RetryOutcome:
    """
    Run `action` until it succeeds or the policy is exhausted.

    Args:
        action: Zero-argument coroutine factory performing one attempt
        policy: Attempt bound and backoff
        label: Action label used in logs (e.g. "click")
        target: Human-readable element description for logs
        log: Structured logger
        sleep: Awaitable sleep in seconds (injectable for tests)

    Returns:
        Success(value, attempts) or ExhaustedFailure(last_error, attempts)
    """
    attempt = 1
    while True:
        started = time.perf_counter()
        try:
            value = await action()
        except Exception as e:
            log.log_element_interaction(target, label, False)

            if attempt >= policy.max_attempts:
                log.error(
                    f"Failed to {label} element after {attempt} attempt(s): {target}",
                    LogContext(action=label.upper(), retry_count=attempt, error=e),
                )
                return ExhaustedFailure(last_error=e, attempts=attempt, action=label.upper(), target=target)

            log.log_retry(label, attempt, e)
            await sleep(policy.backoff_ms / 1000)
            attempt += 1
            continue

        log.log_element_interaction(target, label, True)
        log.log_performance_metrics(label, _elapsed_ms(started))
        return Success(value=value, attempts=attempt)


__all__ = [
    "AttemptState",
    "ExhaustedFailure",
    "InteractionError",
    "InteractionExhaustedError",
    "InteractionTimeoutError",
    "RetryOutcome",
    "RetryPolicy",
    "Success",
    "run_with_retry",
]
