import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how many times to check a condition."""

    interval: float  # seconds between checks
    max_attempts: int
    settle_delay: float = 0.0  # seconds to wait once the condition holds


async def poll_until(
    predicate: Callable[[], Awaitable[bool]],
    policy: RetryPolicy,
    description: str = "condition",
) -> bool:
    """
    Check `predicate` until it returns True or the policy's attempts run out.

    The predicate is checked once up front and then once after each of
    `max_attempts` waits. A predicate that raises counts as not satisfied.
    Returns whether the condition was met; running out of attempts is not an error.
    """
    for attempt in range(policy.max_attempts + 1):
        try:
            satisfied = await predicate()
        except Exception as e:
            logger.debug(f"Check for {description} failed on attempt {attempt}: {e}")
            satisfied = False

        if satisfied:
            if policy.settle_delay:
                await asyncio.sleep(policy.settle_delay)
            return True

        if attempt < policy.max_attempts:
            await asyncio.sleep(policy.interval)

    logger.debug(f"Gave up waiting for {description} after {policy.max_attempts} retries")
    return False
