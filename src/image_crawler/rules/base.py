"""
Rules - Abstract admission rules shared by the crawler and the processor.

Each rules instance owns its own VisitedSet. Admitting a URL means passing
validation and being recorded in that set in one atomic step, so two threads
racing on the same URL can never both be admitted.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from .visited import VisitedSet


class UriRules(ABC):
    """
    Base class for URL admission.

    Subclasses supply the structural predicate (_matches); this class
    handles fragment rejection and exactly-once recording.
    """

    def __init__(self):
        self.visited = VisitedSet()
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def _matches(self, url: str) -> bool:
        """
        Structural check for a URL (scope, extension, ...).

        Must be free of side effects.
        """
        pass

    def is_valid_uri(self, url: Optional[str]) -> bool:
        """
        Validate a URL and, if valid, record its admission.

        Returns:
            True exactly once per URL for the lifetime of this instance
        """
        if not url or not isinstance(url, str):
            return False

        # Fragments are insignificant for crawling
        if '#' in url:
            return False

        if not self._matches(url):
            return False

        if not self.visited.add(url):
            self.logger.debug(f"Already admitted: {url}")
            return False

        return True


class CrawlerRules(UriRules):
    """Rules deciding which pages are crawled."""

    @abstractmethod
    def is_valid_page(self, document: Any) -> bool:
        """Check whether a fetched document should be processed."""
        pass


class ProcessorRules(UriRules):
    """Rules deciding which resources the processor downloads."""

    @abstractmethod
    def is_valid(self, content: Any) -> bool:
        """Check whether downloaded content is acceptable."""
        pass
