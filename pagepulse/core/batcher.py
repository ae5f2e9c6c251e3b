# ==============================================================================
# Event Batcher
# ==============================================================================
"""
Accumulates interaction events and flushes them to the collector.

Two triggers flush the queue:

    1. Size: enqueueing the batch_size-th event starts a flush immediately
    2. Interval: a background tick flushes every batch_interval seconds

A flush sends the whole queue as one batch. Only when the collector reports
success are the sent events removed; on failure they stay queued and the
next trigger sends them again together with anything enqueued meanwhile.
There is no separate retry schedule.

At most one batch is in flight. A trigger that fires while a flush is
outstanding is skipped. Draining the queue leaves the in-flight batch
behind, so an event is never both in a batch and in a drained list.
"""

import asyncio
import logging
from typing import Optional

from pagepulse.core.delivery import DeliveryClient
from pagepulse.core.models import Event
from pagepulse.utils.tasks import BackgroundTasks

logger = logging.getLogger(__name__)


class EventBatcher:
    """
    Ordered event queue with size and interval flush triggers.

    Args:
        delivery: Client used to send batches
        tasks: Registry for size-triggered flushes
        batch_size: Queue length that forces a flush
        batch_interval_seconds: Period of the background flush tick
    """

    def __init__(
        self,
        delivery: DeliveryClient,
        tasks: BackgroundTasks,
        batch_size: int = 10,
        batch_interval_seconds: float = 10.0,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        if batch_interval_seconds <= 0:
            raise ValueError(
                f"batch_interval_seconds must be positive, got {batch_interval_seconds}"
            )

        self.batch_size = batch_size
        self.batch_interval_seconds = batch_interval_seconds
        self._delivery = delivery
        self._tasks = tasks
        self._queue: list[Event] = []
        self._in_flight: list[Event] = []
        self._tick_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def queue(self) -> tuple[Event, ...]:
        """Snapshot of queued events in occurrence order."""
        return tuple(self._queue)

    @property
    def flushing(self) -> bool:
        return bool(self._in_flight)

    # ------------------------------------------------------------------
    # Queue operations
    # ------------------------------------------------------------------

    def enqueue(self, event: Event) -> asyncio.Task | None:
        """
        Append an event, flushing if the queue reached batch_size.

        Args:
            event: Event to queue

        Returns:
            The flush task if the size trigger fired, otherwise None
        """
        self._queue.append(event)
        logger.debug("Logged event %s (%d queued)", event.event_name, len(self._queue))

        if len(self._queue) >= self.batch_size:
            return self._tasks.spawn(self.flush())
        return None

    async def flush(self) -> bool:
        """
        Send all queued events as one batch.

        Returns:
            True if a batch was sent and acknowledged
        """
        if not self._queue:
            return False
        if self._in_flight:
            logger.debug("Flush already in flight, skipping")
            return False

        batch = list(self._queue)
        self._in_flight = batch
        logger.debug("Flushing %d events.", len(batch))
        try:
            success = await self._delivery.log_events([event.to_payload() for event in batch])
        finally:
            self._in_flight = []

        if success:
            sent = {id(event) for event in batch}
            self._queue = [event for event in self._queue if id(event) not in sent]
        else:
            logger.debug("Flush failed, keeping %d events queued", len(self._queue))
        return success

    def drain(self) -> list[Event]:
        """
        Remove and return every queued event not already in flight.

        Used when a session ends and the residual events travel with the
        end-of-session request instead of a batch. Events of an outstanding
        batch stay queued until that flush completes: removed on success,
        kept for the next trigger on failure.
        """
        in_flight = {id(event) for event in self._in_flight}
        events = [event for event in self._queue if id(event) not in in_flight]
        self._queue = [event for event in self._queue if id(event) in in_flight]
        return events

    # ------------------------------------------------------------------
    # Interval tick
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic flush tick on the running loop."""
        if self._tick_task is None or self._tick_task.done():
            self._tick_task = asyncio.get_running_loop().create_task(self._tick())

    async def stop(self) -> None:
        """Stop the periodic flush tick."""
        if self._tick_task is None:
            return
        self._tick_task.cancel()
        try:
            await self._tick_task
        except asyncio.CancelledError:
            pass
        self._tick_task = None

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(self.batch_interval_seconds)
            await self.flush()
