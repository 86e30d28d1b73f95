"""Caller-side deadline for provider reads.

``get_state_with_timeout`` races a provider read against a timer. The loser is
never cancelled: when the timer wins, the read keeps running in the
background, and whatever fetch it was waiting on still lands in the provider
cache for later callers. Only the current caller gives up.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from tezos_gateway.cache.provider import ProviderResult

log = structlog.get_logger("data_provider")

T = TypeVar("T")


class ResponseTimeoutError(TimeoutError):
    def __init__(self, message: str = "Response timed out") -> None:
        super().__init__(message)


async def get_state_with_timeout(
    state: Awaitable[ProviderResult[T]],
    timeout_s: float,
    detached: set[asyncio.Future],
) -> ProviderResult[T]:
    """Return the provider result, or a timeout error result after *timeout_s*.

    A read that loses the race is parked in *detached* until it finishes, so
    the owner of that set keeps it referenced.
    """
    read = asyncio.ensure_future(state)
    try:
        return await asyncio.wait_for(asyncio.shield(read), timeout_s)
    except asyncio.TimeoutError:
        detached.add(read)
        read.add_done_callback(detached.discard)
        log.warning("provider_read_timed_out", timeout_s=timeout_s)
        return ProviderResult(error=ResponseTimeoutError())
