"""
Image Processor Rules - Decides which images are downloaded and kept.
"""

import posixpath
import threading
from typing import Any, Iterable, Set
from urllib.parse import urlsplit

from .base import ProcessorRules


class ImageProcessorRules(ProcessorRules):
    """
    Processor-level rules.

    - URL check: path extension must be in the allow-list (empty list
      admits nothing)
    - Content check: image must be strictly larger than min_width x min_height
    """

    def __init__(self, allowed_extensions: Iterable[str] = (),
                 min_width: int = 0, min_height: int = 0):
        super().__init__()
        self._extensions: Set[str] = set()
        self._extensions_lock = threading.Lock()
        self.min_width = min_width
        self.min_height = min_height

        for ext in allowed_extensions:
            self.add_extension(ext)

    @property
    def allowed_extensions(self) -> Set[str]:
        with self._extensions_lock:
            return set(self._extensions)

    def add_extension(self, extension: str) -> None:
        """Allow an extension such as '.png' (case-insensitive)."""
        ext = extension.strip().lower()
        if not ext.startswith('.'):
            ext = '.' + ext
        with self._extensions_lock:
            self._extensions.add(ext)

    def _matches(self, url: str) -> bool:
        try:
            path = urlsplit(url).path
        except ValueError:
            return False

        extension = posixpath.splitext(path)[1].lower()
        if not extension:
            return False

        with self._extensions_lock:
            return extension in self._extensions

    def is_valid(self, content: Any) -> bool:
        if content is None:
            return False

        return content.width > self.min_width and content.height > self.min_height
