"""
HTTP Fetcher - Downloads pages and images.
Pages are parsed into BeautifulSoup documents; images are returned as raw bytes.
Failures are raised as FetchError subclasses and never retried.
"""

import logging
import threading
import time
from typing import Dict, Optional
from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import (
    RequestException, InvalidURL, MissingSchema, InvalidSchema
)
from bs4 import BeautifulSoup


class FetchError(Exception):
    """Raised when a URL cannot be fetched."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url


class MalformedURLError(FetchError):
    """The URL (or a reference resolved against a page) is not usable."""
    pass


class NetworkError(FetchError):
    """Connection, timeout, HTTP status or size-limit failure."""
    pass


@dataclass
class FetchConfig:
    """Configuration for HTTP fetching."""
    timeout_seconds: float = 30
    verify_ssl: bool = True
    user_agent: str = "ImageCrawler/1.0"
    max_content_size_mb: int = 10  # Skip responses larger than this

    # Request headers
    accept_language: str = "en-US,en;q=0.9"
    accept_encoding: str = "gzip, deflate"

    # HTML parsing
    parser: str = "html.parser"  # 'html.parser', 'lxml', or 'html5lib'

    # Connection pooling
    pool_connections: int = 10
    pool_maxsize: int = 20


class SessionManager:
    """Keeps one requests.Session per worker thread."""

    def __init__(self, config: FetchConfig):
        self.config = config
        self.sessions: Dict[int, requests.Session] = {}
        self.lock = threading.Lock()
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_session(self) -> requests.Session:
        thread_id = threading.get_ident()
        with self.lock:
            if thread_id not in self.sessions:
                self.sessions[thread_id] = self._create_session()
            return self.sessions[thread_id]

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=0,
                              pool_connections=self.config.pool_connections,
                              pool_maxsize=self.config.pool_maxsize)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept-Language': self.config.accept_language,
            'Accept-Encoding': self.config.accept_encoding,
            'Connection': 'keep-alive',
        })
        self.logger.debug(f"Created session for thread {threading.get_ident()}")
        return session

    def close_all(self):
        with self.lock:
            for session in self.sessions.values():
                session.close()
            self.sessions.clear()


class HTTPFetcher:
    """
    Fetches URLs with requests.

    - fetch_document: HTML page -> BeautifulSoup (None for non-HTML responses)
    - fetch_bytes: any resource -> bytes
    """

    def __init__(self, config: Optional[FetchConfig] = None,
                 session_manager: Optional[SessionManager] = None):
        self.config = config or FetchConfig()
        self.session_manager = session_manager or SessionManager(self.config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def fetch_document(self, url: str) -> Optional[BeautifulSoup]:
        """
        Download and parse an HTML page.

        Returns:
            Parsed document, or None if the response is not HTML

        Raises:
            MalformedURLError: URL cannot be requested
            NetworkError: Request failed or response unusable
        """
        content, headers = self._get(url)

        content_type = headers.get('Content-Type', '')
        if content_type and 'html' not in content_type.lower():
            self.logger.debug(f"Not HTML ({content_type}): {url}")
            return None

        return BeautifulSoup(content, self.config.parser)

    def fetch_bytes(self, url: str) -> bytes:
        """
        Download a resource as raw bytes.

        Raises:
            MalformedURLError: URL cannot be requested
            NetworkError: Request failed or response unusable
        """
        content, _ = self._get(url)
        return content

    def _get(self, url: str):
        session = self.session_manager.get_session()
        max_bytes = self.config.max_content_size_mb * 1024 * 1024
        start_time = time.time()

        try:
            response = session.get(
                url, timeout=self.config.timeout_seconds,
                allow_redirects=True, verify=self.config.verify_ssl, stream=True
            )
        except (InvalidURL, MissingSchema, InvalidSchema, ValueError) as e:
            raise MalformedURLError(url, f"Malformed URL: {e}") from e
        except RequestException as e:
            raise NetworkError(url, f"Request Error: {e}") from e

        try:
            if not 200 <= response.status_code < 300:
                raise NetworkError(url, f"HTTP {response.status_code}")

            content_length = response.headers.get('Content-Length')
            if content_length and content_length.isdigit() and int(content_length) > max_bytes:
                raise NetworkError(url, "Content too large")

            chunks = []
            size = 0
            for chunk in response.iter_content(chunk_size=8192):
                size += len(chunk)
                if size > max_bytes:
                    raise NetworkError(url, "Content exceeded size limit")
                chunks.append(chunk)

            headers = response.headers
        except RequestException as e:
            raise NetworkError(url, f"Request Error: {e}") from e
        finally:
            response.close()

        content = b''.join(chunks)
        self.logger.debug(
            f"Fetched: {url} ({len(content)}b, {time.time() - start_time:.2f}s)"
        )
        return content, headers

    def close(self):
        """Release all pooled sessions."""
        self.session_manager.close_all()
