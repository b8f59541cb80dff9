"""Retry policy with exponential backoff for Hashnode API calls.

A request runs through a small state machine:

    ATTEMPTING --success--> SUCCEEDED
    ATTEMPTING --failure--> BACKOFF   (retryable kind, retries left)
    ATTEMPTING --failure--> FAILED    (otherwise)
    BACKOFF    ----------> ATTEMPTING (next attempt)

transition() is pure so the decisions can be tested without a clock;
RetryPolicy.run() drives it and does the actual waiting.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from hashpost.config import DEFAULT_RETRY_CONFIG, RetryConfig
from hashpost.errors import ClassifiedError, ErrorKind, classify_error
from hashpost.utils.logging import get_logger

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]
Classifier = Callable[[BaseException], ClassifiedError]

RETRYABLE_KINDS = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.NETWORK_ERROR})


def is_retryable(kind: ErrorKind) -> bool:
    """Return whether a failure of this kind is worth another attempt."""
    return kind in RETRYABLE_KINDS


def calculate_backoff(attempt: int, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> float:
    """Exponential backoff delay in seconds for a 0-based attempt index."""
    delay = config.initial_delay * config.backoff_multiplier**attempt
    return min(delay, config.max_delay)


def retry_delay(attempt: int, error: ClassifiedError, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> float:
    """Delay before the next attempt. A server-supplied wait always wins."""
    if error.retry_after is not None:
        return float(error.retry_after)
    return calculate_backoff(attempt, config)


class RetryState(str, Enum):
    """States of a single retried operation."""

    ATTEMPTING = "attempting"
    BACKOFF = "backoff"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryStep:
    """Where a retried operation currently stands."""

    state: RetryState
    attempt: int = 0
    delay: float = 0.0
    error: ClassifiedError | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (RetryState.SUCCEEDED, RetryState.FAILED)


def transition(
    step: RetryStep, config: RetryConfig, error: ClassifiedError | None = None
) -> RetryStep:
    """Compute the next step of the retry state machine.

    Args:
        step: The current step.
        config: Retry tuning.
        error: The classified failure of the attempt that just finished, or
            None if it succeeded. Only used when leaving ATTEMPTING.

    Returns:
        The next step.

    Raises:
        ValueError: If called on a terminal step.
    """
    if step.state is RetryState.ATTEMPTING:
        if error is None:
            return RetryStep(RetryState.SUCCEEDED, attempt=step.attempt)
        if not is_retryable(error.kind) or step.attempt >= config.max_retries:
            return RetryStep(RetryState.FAILED, attempt=step.attempt, error=error)
        return RetryStep(
            RetryState.BACKOFF,
            attempt=step.attempt,
            delay=retry_delay(step.attempt, error, config),
            error=error,
        )

    if step.state is RetryState.BACKOFF:
        return RetryStep(RetryState.ATTEMPTING, attempt=step.attempt + 1)

    raise ValueError(f"No transition out of terminal state {step.state.value}")


class RetryPolicy:
    """Runs an async operation under the retry state machine.

    The sleep function and logger are injectable so tests can use a fake
    clock and capture retry decisions. Cancelling the calling task while it
    waits in BACKOFF cancels the operation.
    """

    def __init__(
        self,
        config: RetryConfig = DEFAULT_RETRY_CONFIG,
        *,
        sleep: Sleep | None = None,
        logger: Any = None,
        classifier: Classifier = classify_error,
    ) -> None:
        self.config = config
        self._sleep = sleep or asyncio.sleep
        self._logger = logger if logger is not None else get_logger(__name__)
        self._classify = classifier

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` until it succeeds or the policy gives up.

        Makes at most ``max_retries + 1`` attempts, one after another.

        Returns:
            The operation's result.

        Raises:
            ClassifiedError: The classification of the last failure, once it
                is not retryable or retries are exhausted.
        """
        step = RetryStep(RetryState.ATTEMPTING)

        while True:
            try:
                return await operation()
            except Exception as exc:
                error = self._classify(exc)

            step = transition(step, self.config, error)
            if step.state is RetryState.FAILED:
                self._logger.debug(
                    "Giving up on Hashnode API request",
                    attempts=step.attempt + 1,
                    kind=error.kind.value,
                    retryable=is_retryable(error.kind),
                )
                raise error

            self._logger.warning(
                "Hashnode API request failed, retrying",
                attempt=step.attempt + 1,
                max_attempts=self.config.max_retries + 1,
                delay_seconds=step.delay,
                kind=error.kind.value,
                error=error.message,
            )
            await self._sleep(step.delay)
            step = transition(step, self.config)
