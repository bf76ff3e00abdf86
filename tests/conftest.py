import io
import threading
import time
from collections import Counter
from typing import Callable, Dict, Optional

import pytest
from bs4 import BeautifulSoup
from PIL import Image

from image_crawler.processing.fetcher import NetworkError
from image_crawler.processing.processor import CrawlerProcessor


def wait_for(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll *predicate* until it returns True or *timeout* expires."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def make_image_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeFetcher:
    """
    In-memory stand-in for HTTPFetcher.

    pages:    url -> html text (fetch_document)
    images:   url -> bytes (fetch_bytes; fetch_document returns None for them)
    failures: url -> exception raised by either method
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None,
                 images: Optional[Dict[str, bytes]] = None,
                 failures: Optional[Dict[str, Exception]] = None):
        self.pages = pages or {}
        self.images = images or {}
        self.failures = failures or {}
        self.document_calls = Counter()
        self.bytes_calls = Counter()
        self.closed = False
        self.lock = threading.Lock()

    def fetch_document(self, url: str):
        with self.lock:
            self.document_calls[url] += 1
        if url in self.failures:
            raise self.failures[url]
        if url in self.images:
            return None
        if url not in self.pages:
            raise NetworkError(url, "HTTP 404")
        return BeautifulSoup(self.pages[url], "html.parser")

    def fetch_bytes(self, url: str) -> bytes:
        with self.lock:
            self.bytes_calls[url] += 1
        if url in self.failures:
            raise self.failures[url]
        if url not in self.images:
            raise NetworkError(url, "HTTP 404")
        return self.images[url]

    def close(self):
        self.closed = True


class RecordingProcessor(CrawlerProcessor):
    """Processor that only remembers which pages it saw."""

    def __init__(self, error: Optional[Exception] = None):
        self.calls = Counter()
        self.error = error
        self.lock = threading.Lock()

    def process(self, url, document):
        with self.lock:
            self.calls[url] += 1
        if self.error is not None:
            raise self.error


@pytest.fixture()
def png_bytes() -> Callable[..., bytes]:
    return make_image_bytes


@pytest.fixture()
def recording_processor() -> RecordingProcessor:
    return RecordingProcessor()
