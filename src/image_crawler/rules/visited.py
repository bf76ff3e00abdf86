"""
Visited Set - Thread-safe record of admitted URLs.
Membership only grows; an admitted URL is never admitted again.
"""

import threading
import logging
from typing import Set


class VisitedSet:
    """
    Lock-protected set of canonical URL strings.

    Pros:
    - Exact matching (no false positives)
    - O(1) check-and-insert under a single lock

    Cons:
    - Memory usage grows linearly with admitted URLs
    - Not persistent (lost on restart)
    """

    def __init__(self):
        self._urls: Set[str] = set()
        self.lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def add(self, url: str) -> bool:
        """
        Record URL as admitted.

        Returns:
            True if URL was newly added, False if already present
        """
        with self.lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: str) -> bool:
        with self.lock:
            return url in self._urls

    def __len__(self) -> int:
        with self.lock:
            return len(self._urls)
