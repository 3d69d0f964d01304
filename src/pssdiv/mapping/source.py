"""Blocking pull source for mapping elements produced on another thread.

A producer (e.g. a mapping stage running concurrently) calls ``put()`` for
every element and ``close()`` once done.  The detector iterates the source;
each step blocks until the next element or the end-of-sequence marker
arrives.
"""

from __future__ import annotations

import queue
from typing import Iterator

import structlog

from pssdiv.mapping.types import MappingElement

logger = structlog.get_logger()

# Marks the end of the sequence inside the queue
_END = object()


class QueueMappingSource:
    """Iterable mapping source backed by a thread-safe queue.

    Parameters
    ----------
    maxsize : int
        Queue bound; 0 means unbounded. A full queue blocks the producer.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._closed = False

    def put(self, entry: MappingElement) -> None:
        """Hand one element to the consumer."""
        if self._closed:
            raise RuntimeError("Cannot put into a closed mapping source")
        self._queue.put(entry)

    def close(self) -> None:
        """Signal end-of-sequence. Further calls are ignored."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_END)
        logger.debug("mapping_source_closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[MappingElement]:
        while True:
            item = self._queue.get()
            if item is _END:
                return
            yield item
