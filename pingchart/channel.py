"""Single-producer/single-consumer channel between the sampler and the chart."""

import logging
import queue
import threading

logger = logging.getLogger(__name__)


class SampleChannel:
    """Unbounded, closable hand-off queue.

    The producer calls ``send()``; once the consumer has called ``close()``
    every later send fails, which the producer treats as a stop signal.
    The consumer polls with ``drain()``, which never blocks.
    """

    def __init__(self):
        self._queue = queue.SimpleQueue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, item) -> bool:
        """Publish item. Returns False (and drops item) if the consumer is gone."""
        if self._closed.is_set():
            return False
        self._queue.put(item)
        return True

    def drain(self) -> list:
        """Take every item currently waiting, oldest first. Never blocks."""
        items = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items

    def close(self):
        """Disconnect the consumer side. Safe to call more than once."""
        if not self._closed.is_set():
            self._closed.set()
            logger.debug("Channel closed by consumer")
