"""Simulated submission round-trip."""

import asyncio
import logging
import random
import typing

from . import errors as _errors
from . import record as _record

logger = logging.getLogger(__name__)


class Transport(typing.Protocol):
    """Anything that can deliver a submitted payload."""

    async def send(self, payload: _record.Payload) -> None:
        """Deliver the payload, raising TransportError on failure."""
        ...


class SimulatedTransport:
    """Stand-in for a network call: waits, then succeeds or fails.

    The wait is a plain ``asyncio.sleep``, so cancelling the awaiting task
    cancels the submission.

    Attributes:
        latency_ms: (min, max) delay in milliseconds
        failure_rate: Probability in [0, 1] of a simulated failure
    """

    def __init__(
        self,
        latency_ms: tuple[int, int] = (500, 1500),
        failure_rate: float = 0.0,
        *,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize SimulatedTransport.

        Args:
            latency_ms: (min, max) delay; equal bounds give a fixed delay
            failure_rate: Probability of raising TransportError
            rng: Random source, for reproducible runs
        """
        low, high = latency_ms
        if low < 0 or high < low:
            raise ValueError("latency must satisfy 0 <= min <= max")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be within [0, 1]")
        self.latency_ms = (low, high)
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self.sent: list[_record.Payload] = []

    async def send(self, payload: _record.Payload) -> None:
        """Wait for the simulated latency, then accept or reject the payload.

        Args:
            payload: Submitted values

        Raises:
            TransportError: On a simulated failure
        """
        low, high = self.latency_ms
        delay_ms = low if low == high else self._rng.uniform(low, high)
        logger.debug("Simulating submission latency of %.0f ms", delay_ms)
        await asyncio.sleep(delay_ms / 1000)
        if self.failure_rate and self._rng.random() < self.failure_rate:
            raise _errors.TransportError("simulated submission failure")
        self.sent.append(dict(payload))
