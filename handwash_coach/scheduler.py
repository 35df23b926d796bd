"""
Tick scheduling: periodic observation sources that drive the classifier.
"""
import asyncio
import logging
import time
from typing import Callable, Iterable, List, Optional, TypeVar

from .types import Observation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class PeriodicObservationSource:
    """
    Calls a detector at a fixed period and pushes observations to a consumer.

    The detector runs in a worker thread so inference never blocks other
    tasks on the event loop; the consumer runs on the loop. A slow tick shortens the
    following sleep instead of queueing extra ticks.
    """

    def __init__(self, detect: Callable[[float], Optional[Observation]], interval_ms: float = 66.0,
                 clock: Callable[[], float] = monotonic_ms):
        self.detect = detect
        self.interval_ms = interval_ms
        self.clock = clock
        self.ticks = 0

    async def run(self, consumer: Callable[[Observation], T], stop_event: asyncio.Event) -> None:
        logger.info(f"⏱️ Tick loop started (every {self.interval_ms:.0f}ms)")
        while not stop_event.is_set():
            started = self.clock()
            observation = await asyncio.to_thread(self.detect, started)
            if observation is None:
                logger.warning("Detector returned no observation, stopping tick loop")
                stop_event.set()
                break
            consumer(observation)
            self.ticks += 1
            spent = self.clock() - started
            await asyncio.sleep(max(0.0, (self.interval_ms - spent) / 1000.0))
        logger.info(f"⏱️ Tick loop stopped after {self.ticks} ticks")


class ScriptedObservationSource:
    """Feeds a fixed observation sequence, for tests and recorded sessions."""

    def __init__(self, observations: Iterable[Observation]):
        self.observations = list(observations)

    def replay(self, consumer: Callable[[Observation], T]) -> List[T]:
        return [consumer(obs) for obs in self.observations]

    async def run(self, consumer: Callable[[Observation], T], stop_event: Optional[asyncio.Event] = None) -> List[T]:
        results = []
        for obs in self.observations:
            if stop_event is not None and stop_event.is_set():
                break
            results.append(consumer(obs))
            await asyncio.sleep(0)
        return results
