"""
Simulated unreliable transport for the War engine.
Wraps engine operations in random latency and injected failures.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, Tuple, TypeVar

from war_engine.rules import (
    DEFAULT_MAX_DELAY,
    DEFAULT_MIN_DELAY,
    DEFAULT_TIMEOUT_DURATION,
    NETWORK_ERROR_MESSAGES,
    SERVER_ERROR_MESSAGES,
    TIMEOUT_MESSAGE,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailureMode(Enum):
    """Failure injected into a single simulated call."""
    NONE = "none"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"


@dataclass(frozen=True)
class NetworkConfig:
    """Latency bounds and failure probabilities for the simulated transport."""

    min_delay: float = DEFAULT_MIN_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    timeout_rate: float = 0.02
    network_error_rate: float = 0.05
    server_error_rate: float = 0.01
    timeout_duration: float = DEFAULT_TIMEOUT_DURATION
    network_error_messages: Tuple[str, ...] = NETWORK_ERROR_MESSAGES
    server_error_messages: Tuple[str, ...] = SERVER_ERROR_MESSAGES

    def __post_init__(self):
        for name in ("timeout_rate", "network_error_rate", "server_error_rate"):
            rate = getattr(self, name)
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {rate}")
        if self.failure_rate > 1.0:
            raise ValueError(f"Failure rates sum to {self.failure_rate}, more than 1")
        if self.min_delay < 0 or self.max_delay < self.min_delay:
            raise ValueError(f"Invalid delay range [{self.min_delay}, {self.max_delay}]")
        if self.timeout_duration < 0:
            raise ValueError(f"timeout_duration must not be negative, got {self.timeout_duration}")
        if not self.network_error_messages or not self.server_error_messages:
            raise ValueError("Error message lists must not be empty")

    @property
    def failure_rate(self) -> float:
        return self.timeout_rate + self.network_error_rate + self.server_error_rate

    @classmethod
    def reliable(cls, min_delay: float = 0.0, max_delay: float = 0.0) -> 'NetworkConfig':
        """A transport that never fails."""
        return cls(min_delay=min_delay, max_delay=max_delay,
                   timeout_rate=0.0, network_error_rate=0.0, server_error_rate=0.0)


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """Uniform response of a simulated call. payload is set iff success."""

    payload: Optional[T]
    success: bool
    error_message: Optional[str] = None
    simulated_latency: float = 0.0
    failure_mode: FailureMode = FailureMode.NONE

    @classmethod
    def ok(cls, payload: T, latency: float) -> 'ResponseEnvelope[T]':
        return cls(payload=payload, success=True, simulated_latency=latency)

    @classmethod
    def failure(cls, message: str, latency: float, mode: FailureMode) -> 'ResponseEnvelope[T]':
        return cls(payload=None, success=False, error_message=message,
                   simulated_latency=latency, failure_mode=mode)


class TransportSimulator:
    """
    Runs operations behind a simulated network hop.

    Every call waits a random delay, then samples at most one failure mode.
    A failed call never runs its operation, so engine state is either fully
    updated or untouched. Suspensions go through ``sleep`` (asyncio.sleep by
    default), so independent games share an event loop without blocking.
    """

    def __init__(self, config: Optional[NetworkConfig] = None,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.config = config or NetworkConfig()
        self._rng = rng if rng is not None else random.Random(seed)
        self._sleep = sleep
        self.calls = 0
        self.failures = 0

    def sample_failure(self) -> FailureMode:
        """Draw the failure mode for one call from a single uniform roll."""
        roll = self._rng.random()
        threshold = self.config.timeout_rate
        if roll < threshold:
            return FailureMode.TIMEOUT
        threshold += self.config.network_error_rate
        if roll < threshold:
            return FailureMode.NETWORK_ERROR
        threshold += self.config.server_error_rate
        if roll < threshold:
            return FailureMode.SERVER_ERROR
        return FailureMode.NONE

    async def simulate(self, op: Callable[[], T]) -> ResponseEnvelope[T]:
        """
        Run op behind simulated latency and failure injection.

        Args:
            op: Zero-argument callable performing the engine operation

        Returns:
            ResponseEnvelope wrapping op's return value or the injected failure

        Engine exceptions raised by op propagate unchanged.
        """
        self.calls += 1
        latency = self._rng.uniform(self.config.min_delay, self.config.max_delay)
        await self._sleep(latency)

        mode = self.sample_failure()
        if mode is FailureMode.TIMEOUT:
            await self._sleep(self.config.timeout_duration)
            self.failures += 1
            logger.warning("Simulated timeout after %.2fs", latency + self.config.timeout_duration)
            return ResponseEnvelope.failure(
                TIMEOUT_MESSAGE, latency + self.config.timeout_duration, mode
            )
        if mode is FailureMode.NETWORK_ERROR:
            return self._fail(self.config.network_error_messages, latency, mode)
        if mode is FailureMode.SERVER_ERROR:
            return self._fail(self.config.server_error_messages, latency, mode)

        return ResponseEnvelope.ok(op(), latency)

    def _fail(self, messages: Tuple[str, ...], latency: float,
              mode: FailureMode) -> ResponseEnvelope:
        self.failures += 1
        message = self._rng.choice(messages)
        logger.warning("Simulated %s: %s", mode.value.replace("_", " "), message)
        return ResponseEnvelope.failure(message, latency, mode)
