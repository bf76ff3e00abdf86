"""
Processing Module

Fetching, link extraction and per-page processing.

Components:
-----------
- HTTPFetcher: requests-based page/image downloader (one session per thread)
- FetchError: Base error for fetch failures (MalformedURLError, NetworkError)
- LinkExtractor / to_absolute_url: Link discovery and resolution
- CrawlerProcessor: Interface for per-page side effects
- ImageProcessor: Downloads images found on crawled pages
"""

from .fetcher import (
    FetchConfig,
    FetchError,
    HTTPFetcher,
    MalformedURLError,
    NetworkError,
    SessionManager,
)
from .links import LinkExtractor, to_absolute_url
from .processor import CrawlerProcessor, ImageProcessor

__all__ = [
    'FetchConfig',
    'FetchError',
    'HTTPFetcher',
    'MalformedURLError',
    'NetworkError',
    'SessionManager',
    'LinkExtractor',
    'to_absolute_url',
    'CrawlerProcessor',
    'ImageProcessor',
]
