"""
Frontier - Shared queue of URLs waiting to be crawled.

URLs only enter the queue after the crawl rules admit them, so each URL is
queued at most once. Consumers block while the queue is empty.
"""

import logging
import threading
from queue import Queue, Empty
from typing import Iterator, Optional

from ..rules import UriRules


class Frontier:
    """Unbounded multi-producer/multi-consumer URL queue with admission guard."""

    def __init__(self, rules: UriRules, poll_interval: float = 1.0):
        """
        Initialize frontier.

        Args:
            rules: Rules deciding which URLs are admitted
            poll_interval: Seconds a blocked consumer waits before
                re-checking whether the frontier was closed
        """
        self.rules = rules
        self.poll_interval = poll_interval
        self._queue: Queue = Queue()
        self._closed = threading.Event()
        self.logger = logging.getLogger(self.__class__.__name__)

    def add(self, url: Optional[str]) -> bool:
        """
        Admit a URL if the rules allow it; drop it silently otherwise.

        Returns:
            True if the URL was queued
        """
        if self._closed.is_set():
            return False

        if not self.rules.is_valid_uri(url):
            return False

        self._queue.put(url)
        self.logger.debug(f"[{threading.current_thread().name}] Add: {url}")
        return True

    def take_all(self) -> Iterator[str]:
        """
        Yield queued URLs forever, blocking while the frontier is empty.

        The iteration only ends once the frontier is closed.
        """
        while not self._closed.is_set():
            try:
                url = self._queue.get(timeout=self.poll_interval)
            except Empty:
                continue

            if self._closed.is_set():
                break

            yield url

    def close(self) -> None:
        """Stop all consumers and refuse further URLs."""
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending(self) -> int:
        """Approximate number of queued URLs."""
        return self._queue.qsize()

    def __len__(self) -> int:
        return self.pending
