"""
Simulated I/O latency for the in-process backend.
"""

import asyncio

from intake.core.config import Settings


async def simulate_io(settings: Settings, seconds: float) -> None:
    """Await a simulated I/O delay, unless latency simulation is disabled."""
    if settings.simulate_latency and seconds > 0:
        await asyncio.sleep(seconds)
