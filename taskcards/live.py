import asyncio
import logging
from typing import Set

logger = logging.getLogger(__name__)


class LiveChannel:
    """Fan-out of rendered task lists to connected browsers.

    Each connection gets its own queue; ``publish`` never blocks.
    """

    def __init__(self) -> None:
        self._queues: Set[asyncio.Queue] = set()

    def connect(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.add(queue)
        logger.debug("Live client connected total=%d", len(self._queues))
        return queue

    @property
    def connections(self) -> int:
        return len(self._queues)

    def disconnect(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)
        logger.debug("Live client disconnected total=%d", len(self._queues))

    def publish(self, html: str) -> None:
        for queue in self._queues:
            queue.put_nowait(html)
